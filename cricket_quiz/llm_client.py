# cricket_quiz/llm_client.py
"""HTTP clients for the quiz-content generator.

A client makes exactly one request per ``generate`` call and returns the raw
text the model produced. Parsing that text is the normalizer's job; retrying
is the caller's. Transport problems surface as ``httpx.HTTPError``, a
response without usable text as ``GeneratorError``.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from cricket_quiz.config import Settings
from cricket_quiz.errors import GeneratorError

logger = logging.getLogger(__name__)


class QuizGenerator(ABC):
    @abstractmethod
    async def generate(self, system_prompt: str, user_prompt: str) -> str:
        ...


class OllamaGenerator(QuizGenerator):
    """Talks to Ollama's ``/api/generate`` endpoint with JSON output mode on."""

    def __init__(
        self,
        base_url: str,
        model_name: str,
        timeout: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model_name = model_name
        self.timeout = timeout
        self.transport = transport

    async def generate(self, system_prompt: str, user_prompt: str) -> str:
        url = f"{self.base_url}/api/generate"
        payload = {
            "model": self.model_name,
            "prompt": user_prompt,
            "system": system_prompt,
            "stream": False,
            "format": "json",  # Crucial for Ollama structured output
        }

        logger.info("Attempting LLM call to %s with model %s", url, self.model_name)
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            resp = await client.post(url, json=payload)
            resp.raise_for_status()  # Raises HTTPStatusError for 4xx/5xx responses
            body = _json_body(resp)

        text = body.get("response") if isinstance(body, dict) else None
        if not isinstance(text, str):
            raise GeneratorError("Ollama response did not include generated text")
        return text


class OpenAIGenerator(QuizGenerator):
    """Talks to the OpenAI Responses API."""

    def __init__(
        self,
        api_key: str,
        model_name: str = "gpt-4.1-mini",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def generate(self, system_prompt: str, user_prompt: str) -> str:
        url = f"{self.base_url}/responses"
        payload = {
            "model": self.model_name,
            "input": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        logger.info("Attempting LLM call to %s with model %s", url, self.model_name)
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            resp = await client.post(url, json=payload, headers=headers)
            resp.raise_for_status()
            body = _json_body(resp)

        text = _first_output_text(body)
        if text is None:
            raise GeneratorError("OpenAI response did not include generated text")
        return text


def _json_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError as err:
        raise GeneratorError("Generator returned a non-JSON HTTP body") from err


def _first_output_text(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    # output: [{"type": "message", "content": [{"type": "output_text", "text": "..."}]}]
    for item in body.get("output") or []:
        if not isinstance(item, dict):
            continue
        for part in item.get("content") or []:
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                return part["text"]
    text = body.get("output_text")
    return text if isinstance(text, str) else None


def build_generator(settings: Settings) -> QuizGenerator:
    provider = settings.llm_provider.lower()
    if provider == "ollama":
        return OllamaGenerator(
            base_url=settings.ollama_url,
            model_name=settings.ollama_model_name,
            timeout=settings.llm_timeout_seconds,
        )
    if provider == "openai":
        if not settings.openai_api_key:
            logger.warning("LLM_PROVIDER is openai but OPENAI_API_KEY is empty; quiz requests will fail")
        return OpenAIGenerator(
            api_key=settings.openai_api_key,
            model_name=settings.openai_model,
            base_url=settings.openai_url,
            timeout=settings.llm_timeout_seconds,
        )
    raise ValueError(f"Unknown LLM_PROVIDER {settings.llm_provider!r}; expected 'ollama' or 'openai'")
