# cricket_quiz/config.py
import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

# Defaults are tuned for the Docker setup; every value can be overridden from the environment.
JWT_SECRET = os.environ.get("JWT_SECRET", "dev-secret")
JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
SESSION_TTL_DAYS = int(os.environ.get("SESSION_TTL_DAYS", 7))
BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", 10))

LLM_PROVIDER = os.environ.get("LLM_PROVIDER", "ollama")
OLLAMA_URL = os.environ.get("OLLAMA_URL", "http://host.docker.internal:11434")
OLLAMA_MODEL_NAME = os.environ.get("OLLAMA_MODEL_NAME", "mistral:7b")
OPENAI_URL = os.environ.get("OPENAI_URL", "https://api.openai.com/v1")
OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4.1-mini")
OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")
LLM_TIMEOUT_SECONDS = float(os.environ.get("LLM_TIMEOUT_SECONDS", 30))

STRICT_QUIZ_VALIDATION = os.environ.get("STRICT_QUIZ_VALIDATION", "false").lower() in ("1", "true", "yes")
CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
PORT = int(os.environ.get("PORT", 4000))


class Settings(BaseModel):
    """Runtime configuration handed to ``create_app``."""

    jwt_secret: str = JWT_SECRET
    jwt_algorithm: str = JWT_ALGORITHM
    session_ttl_days: int = Field(SESSION_TTL_DAYS, ge=1)
    bcrypt_rounds: int = Field(BCRYPT_ROUNDS, ge=4, le=31)

    llm_provider: str = LLM_PROVIDER
    ollama_url: str = OLLAMA_URL
    ollama_model_name: str = OLLAMA_MODEL_NAME
    openai_url: str = OPENAI_URL
    openai_model: str = OPENAI_MODEL
    openai_api_key: str = OPENAI_API_KEY
    llm_timeout_seconds: float = Field(LLM_TIMEOUT_SECONDS, gt=0)

    strict_quiz_validation: bool = STRICT_QUIZ_VALIDATION
    cors_origins: List[str] = Field(default_factory=lambda: _split_origins(CORS_ORIGINS))
    log_level: str = LOG_LEVEL


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
