# cricket_quiz/credentials.py
import logging
from typing import Optional

from cricket_quiz.errors import AlreadyExists, BadRequest, NotFound
from cricket_quiz.schemas import User, UserStats
from cricket_quiz.security import PasswordHasher
from cricket_quiz.store import UserStore

logger = logging.getLogger(__name__)

# Outcome thresholds assume a 10-question quiz. They are deliberately not
# scaled by the reported totalQuestions.
WIN_THRESHOLD = 6
DRAW_SCORE = 5


def classify_outcome(score: int) -> str:
    if score >= WIN_THRESHOLD:
        return "win"
    if score == DRAW_SCORE:
        return "draw"
    return "loss"


class CredentialStore:
    """Owns user records: password digests and play statistics."""

    def __init__(self, users: UserStore, hasher: PasswordHasher):
        self.users = users
        self.hasher = hasher

    async def create(self, username: str, password_digest: str) -> User:
        return await self.users.create(User(username=username, password_digest=password_digest))

    async def find(self, username: str) -> User:
        return await self.users.find(username)

    async def signup(self, username: Optional[str], password: Optional[str]) -> User:
        if not username or not password:
            raise BadRequest("Username and password are required")
        # create() re-checks under the per-user lock if a concurrent signup wins the race.
        try:
            await self.users.find(username)
        except NotFound:
            pass
        else:
            raise AlreadyExists("Username already exists")

        digest = await self.hasher.hash_async(password)
        user = await self.create(username, digest)
        logger.info("Created user %s", username)
        return user

    async def login(self, username: Optional[str], password: Optional[str]) -> User:
        if not username or not password:
            raise BadRequest("Username and password are required")
        user = await self.find(username)
        if not await self.hasher.verify_async(password, user.password_digest):
            raise BadRequest("Incorrect password")
        return user

    async def record_result(self, username: str, score: int, total_questions: Optional[int] = None) -> UserStats:
        """Counts one finished quiz for ``username``.

        ``total_questions`` is accepted for the client's benefit but does not
        influence the outcome.
        """
        outcome = classify_outcome(score)

        def apply(user: User) -> None:
            stats = user.stats
            stats.total_played += 1
            if outcome == "win":
                stats.total_wins += 1
            elif outcome == "draw":
                stats.total_draws += 1
            else:
                stats.total_losses += 1

        user = await self.users.update(username, apply)
        logger.info("Recorded %s for %s (score=%s, totalQuestions=%s)", outcome, username, score, total_questions)
        return user.stats
