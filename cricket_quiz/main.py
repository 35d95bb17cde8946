# cricket_quiz/main.py

import logging
from datetime import timedelta
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cricket_quiz.api import auth_routes, quiz_routes, review_routes
from cricket_quiz.config import PORT, Settings
from cricket_quiz.credentials import CredentialStore
from cricket_quiz.errors import QuizAppError
from cricket_quiz.llm_client import QuizGenerator, build_generator
from cricket_quiz.quiz_manager import QuizManager
from cricket_quiz.reviews import ReviewAggregator
from cricket_quiz.security import PasswordHasher, SessionIssuer
from cricket_quiz.store import InMemoryReviewStore, InMemoryUserStore, ReviewStore, UserStore

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    generator: Optional[QuizGenerator] = None,
    user_store: Optional[UserStore] = None,
    review_store: Optional[ReviewStore] = None,
) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title="Cricket Quiz Backend")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    credentials = CredentialStore(user_store or InMemoryUserStore(), PasswordHasher(settings.bcrypt_rounds))
    app.state.settings = settings
    app.state.session_issuer = SessionIssuer(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(days=settings.session_ttl_days),
    )
    app.state.credentials = credentials
    app.state.quiz_manager = QuizManager(
        generator or build_generator(settings),
        credentials,
        strict=settings.strict_quiz_validation,
    )
    app.state.reviews = ReviewAggregator(review_store or InMemoryReviewStore())

    @app.exception_handler(QuizAppError)
    async def quiz_app_error_handler(request: Request, exc: QuizAppError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": _describe_validation_error(exc)})

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    app.include_router(auth_routes.router)
    app.include_router(quiz_routes.router)
    app.include_router(review_routes.router)

    logger.info("Cricket quiz backend configured with %s generator", settings.llm_provider)
    return app


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"Invalid request: {location} {first.get('msg', '')}".strip()


app = create_app()

if __name__ == "__main__":
    uvicorn.run("cricket_quiz.main:app", host="0.0.0.0", port=PORT)
