import json

import pytest
from fastapi.testclient import TestClient

from cricket_quiz.config import Settings
from cricket_quiz.credentials import CredentialStore
from cricket_quiz.llm_client import QuizGenerator
from cricket_quiz.main import create_app
from cricket_quiz.security import PasswordHasher
from cricket_quiz.store import InMemoryUserStore


class FakeGenerator(QuizGenerator):
    """Returns canned text (or raises) and remembers every prompt it was given."""

    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def generate(self, system_prompt, user_prompt):
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.text


def build_quiz_payload(count=10, quiz_id="generated-quiz"):
    return {
        "quizId": quiz_id,
        "questions": [
            {
                "id": f"gen-{i}",
                "text": f"Who scored century number {i}?",
                "options": ["Tendulkar", "Lara", "Ponting", "Kallis"],
                "correctIndex": i % 4,
                "commentary": {"intro": "Here we go", "correct": "Cracking shot!", "wrong": "Bowled him!"},
            }
            for i in range(count)
        ],
    }


@pytest.fixture
def quiz_payload():
    return build_quiz_payload


@pytest.fixture
def make_generator():
    return FakeGenerator


@pytest.fixture
def settings():
    # rounds=4 is bcrypt's minimum and keeps the suite fast
    return Settings(jwt_secret="test-secret", bcrypt_rounds=4, llm_provider="ollama", cors_origins=["*"])


@pytest.fixture
def generator():
    return FakeGenerator(text=json.dumps(build_quiz_payload()))


@pytest.fixture
def app(settings, generator):
    return create_app(settings=settings, generator=generator)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    resp = client.post("/api/signup", json={"username": "sachin", "password": "straight-drive"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def credentials():
    return CredentialStore(InMemoryUserStore(), PasswordHasher(rounds=4))
