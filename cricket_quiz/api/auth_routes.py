# cricket_quiz/api/auth_routes.py
from typing import Optional

from fastapi import APIRouter, Depends, Request

from cricket_quiz.api.deps import get_credentials
from cricket_quiz.credentials import CredentialStore
from cricket_quiz.schemas import AuthResponse, Credentials, PublicUser

router = APIRouter(prefix="/api", tags=["auth"])


def _session_response(request: Request, username: str) -> AuthResponse:
    token = request.app.state.session_issuer.issue(username)
    return AuthResponse(token=token, user=PublicUser(username=username))


@router.post("/signup", response_model=AuthResponse)
async def signup(
    request: Request,
    payload: Optional[Credentials] = None,
    credentials: CredentialStore = Depends(get_credentials),
):
    payload = payload or Credentials()
    user = await credentials.signup(payload.username, payload.password)
    return _session_response(request, user.username)


@router.post("/login", response_model=AuthResponse)
async def login(
    request: Request,
    payload: Optional[Credentials] = None,
    credentials: CredentialStore = Depends(get_credentials),
):
    payload = payload or Credentials()
    user = await credentials.login(payload.username, payload.password)
    return _session_response(request, user.username)
