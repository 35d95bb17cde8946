import json

import httpx
import pytest

from cricket_quiz.config import Settings
from cricket_quiz.errors import GeneratorError
from cricket_quiz.llm_client import OllamaGenerator, OpenAIGenerator, build_generator


def _transport(handler, seen=None):
    def wrapped(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return handler(request)

    return httpx.MockTransport(wrapped)


class TestOllamaGenerator:

    async def test_returns_generated_text(self):
        seen = []
        transport = _transport(lambda req: httpx.Response(200, json={"response": '{"quizId": "x"}'}), seen)
        generator = OllamaGenerator("http://ollama:11434/", "mistral:7b", transport=transport)

        text = await generator.generate("system prompt", "user prompt")

        assert text == '{"quizId": "x"}'
        assert len(seen) == 1
        request = seen[0]
        assert str(request.url) == "http://ollama:11434/api/generate"
        body = json.loads(request.content)
        assert body["model"] == "mistral:7b"
        assert body["system"] == "system prompt"
        assert body["prompt"] == "user prompt"
        assert body["stream"] is False
        assert body["format"] == "json"

    async def test_http_error_status_propagates(self):
        transport = _transport(lambda req: httpx.Response(503, json={"error": "loading"}))
        generator = OllamaGenerator("http://ollama:11434", "mistral:7b", transport=transport)

        with pytest.raises(httpx.HTTPStatusError):
            await generator.generate("s", "u")

    async def test_missing_response_field_raises(self):
        transport = _transport(lambda req: httpx.Response(200, json={"done": True}))
        generator = OllamaGenerator("http://ollama:11434", "mistral:7b", transport=transport)

        with pytest.raises(GeneratorError):
            await generator.generate("s", "u")

    async def test_non_json_body_raises(self):
        transport = _transport(lambda req: httpx.Response(200, text="<html>proxy error</html>"))
        generator = OllamaGenerator("http://ollama:11434", "mistral:7b", transport=transport)

        with pytest.raises(GeneratorError):
            await generator.generate("s", "u")

    async def test_connection_error_propagates(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        generator = OllamaGenerator("http://ollama:11434", "mistral:7b", transport=httpx.MockTransport(refuse))

        with pytest.raises(httpx.HTTPError):
            await generator.generate("s", "u")


class TestOpenAIGenerator:

    async def test_returns_first_output_text(self):
        seen = []
        body = {
            "output": [
                {"type": "reasoning", "summary": []},
                {"type": "message", "content": [{"type": "output_text", "text": "{\"questions\": []}"}]},
            ]
        }
        transport = _transport(lambda req: httpx.Response(200, json=body), seen)
        generator = OpenAIGenerator("sk-test", transport=transport)

        text = await generator.generate("system prompt", "user prompt")

        assert text == '{"questions": []}'
        request = seen[0]
        assert str(request.url) == "https://api.openai.com/v1/responses"
        assert request.headers["Authorization"] == "Bearer sk-test"
        sent = json.loads(request.content)
        assert sent["model"] == "gpt-4.1-mini"
        assert sent["input"][0] == {"role": "system", "content": "system prompt"}
        assert sent["input"][1] == {"role": "user", "content": "user prompt"}

    async def test_falls_back_to_output_text(self):
        transport = _transport(lambda req: httpx.Response(200, json={"output": [], "output_text": "hello"}))
        generator = OpenAIGenerator("sk-test", transport=transport)

        assert await generator.generate("s", "u") == "hello"

    async def test_empty_output_raises(self):
        transport = _transport(lambda req: httpx.Response(200, json={"output": []}))
        generator = OpenAIGenerator("sk-test", transport=transport)

        with pytest.raises(GeneratorError):
            await generator.generate("s", "u")

    async def test_unauthorized_propagates(self):
        transport = _transport(lambda req: httpx.Response(401, json={"error": {"message": "bad key"}}))
        generator = OpenAIGenerator("sk-wrong", transport=transport)

        with pytest.raises(httpx.HTTPStatusError):
            await generator.generate("s", "u")


class TestBuildGenerator:

    def test_ollama(self):
        generator = build_generator(Settings(llm_provider="ollama", ollama_url="http://x:1", llm_timeout_seconds=5))
        assert isinstance(generator, OllamaGenerator)
        assert generator.base_url == "http://x:1"
        assert generator.timeout == 5

    def test_openai(self):
        generator = build_generator(Settings(llm_provider="OpenAI", openai_api_key="sk-test"))
        assert isinstance(generator, OpenAIGenerator)
        assert generator.api_key == "sk-test"

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown LLM_PROVIDER"):
            build_generator(Settings(llm_provider="carrier-pigeon"))
