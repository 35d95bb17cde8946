# cricket_quiz/security.py
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from cricket_quiz.errors import Unauthorized

logger = logging.getLogger(__name__)

BEARER_SCHEME = "Bearer"
# bcrypt only looks at the first 72 bytes of a secret
BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """bcrypt digests. The async variants keep the hashing work off the event loop."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, secret: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode_secret(secret), salt).decode("utf-8")

    def verify(self, secret: str, digest: str) -> bool:
        try:
            return bcrypt.checkpw(_encode_secret(secret), digest.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password digest is not a valid bcrypt hash")
            return False

    async def hash_async(self, secret: str) -> str:
        return await asyncio.to_thread(self.hash, secret)

    async def verify_async(self, secret: str, digest: str) -> bool:
        return await asyncio.to_thread(self.verify, secret, digest)


def _encode_secret(secret: str) -> bytes:
    return secret.encode("utf-8")[:BCRYPT_MAX_BYTES]


class SessionIssuer:
    """Mints and checks stateless bearer sessions (signed JWTs bound to a username)."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(days=7)):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, username: str, issued_at: Optional[datetime] = None) -> str:
        issued_at = issued_at or datetime.now(timezone.utc)
        claims = {
            "username": username,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def authenticate(self, header_value: Optional[str]) -> str:
        """Returns the username carried by an ``Authorization`` header value.

        The user's existence is not checked here; callers that need the
        record look it up and handle ``NotFound`` themselves.
        """
        token = _bearer_token(header_value)
        return self.verify(token)

    def verify(self, token: str) -> str:
        try:
            # iat is informational only; a skewed client clock must not reject a fresh token
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp"], "verify_iat": False},
            )
        except jwt.ExpiredSignatureError as err:
            logger.info("Rejected expired session token")
            raise Unauthorized("Invalid token") from err
        except jwt.InvalidTokenError as err:
            logger.info("Rejected session token: %s", err)
            raise Unauthorized("Invalid token") from err

        username = claims.get("username")
        if not isinstance(username, str) or not username:
            raise Unauthorized("Invalid token")
        return username


def _bearer_token(header_value: Optional[str]) -> str:
    parts = (header_value or "").split(" ")
    if len(parts) != 2 or parts[0] != BEARER_SCHEME or not parts[1]:
        raise Unauthorized("Missing or invalid Authorization header")
    return parts[1]
