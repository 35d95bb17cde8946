# cricket_quiz/api/deps.py
from typing import Optional

from fastapi import Header, Request

from cricket_quiz.credentials import CredentialStore
from cricket_quiz.quiz_manager import QuizManager
from cricket_quiz.reviews import ReviewAggregator


def get_credentials(request: Request) -> CredentialStore:
    return request.app.state.credentials


def get_quiz_manager(request: Request) -> QuizManager:
    return request.app.state.quiz_manager


def get_reviews(request: Request) -> ReviewAggregator:
    return request.app.state.reviews


async def get_current_username(request: Request, authorization: Optional[str] = Header(None)) -> str:
    """Bearer-token gate for the protected routes. Raises ``Unauthorized``."""
    return request.app.state.session_issuer.authenticate(authorization)
