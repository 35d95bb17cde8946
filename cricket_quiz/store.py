# cricket_quiz/store.py
"""Storage seams for users and reviews.

The services only talk to ``UserStore`` and ``ReviewStore``. The in-memory
implementations are volatile: everything is lost when the process exits.
"""
import asyncio
from abc import ABC, abstractmethod
from typing import Callable, Dict, List

from cricket_quiz.errors import AlreadyExists, NotFound
from cricket_quiz.schemas import Review, User


class UserStore(ABC):
    @abstractmethod
    async def create(self, user: User) -> User:
        """Stores a new user, raising ``AlreadyExists`` if the username is taken."""

    @abstractmethod
    async def find(self, username: str) -> User:
        """Returns a copy of the user, raising ``NotFound`` if absent."""

    @abstractmethod
    async def update(self, username: str, mutate: Callable[[User], None]) -> User:
        """Applies ``mutate`` to the stored user atomically and returns a copy."""


class ReviewStore(ABC):
    @abstractmethod
    async def append(self, review: Review) -> None:
        ...

    @abstractmethod
    async def list_all(self) -> List[Review]:
        ...


class InMemoryUserStore(UserStore):
    def __init__(self):
        self._users: Dict[str, User] = {}
        # One lock per username; different users never wait on each other.
        self._locks: Dict[str, asyncio.Lock] = {}

    async def create(self, user: User) -> User:
        async with self._locks.setdefault(user.username, asyncio.Lock()):
            if user.username in self._users:
                raise AlreadyExists("Username already exists")
            self._users[user.username] = user.model_copy(deep=True)
            return user.model_copy(deep=True)

    async def find(self, username: str) -> User:
        user = self._users.get(username)
        if user is None:
            raise NotFound("User not found")
        return user.model_copy(deep=True)

    async def update(self, username: str, mutate: Callable[[User], None]) -> User:
        # Locks only exist for usernames that went through create().
        lock = self._locks.get(username)
        if lock is None:
            raise NotFound("User not found")
        async with lock:
            user = self._users.get(username)
            if user is None:
                raise NotFound("User not found")
            mutate(user)
            return user.model_copy(deep=True)


class InMemoryReviewStore(ReviewStore):
    def __init__(self):
        self._reviews: List[Review] = []
        self._lock = asyncio.Lock()

    async def append(self, review: Review) -> None:
        async with self._lock:
            self._reviews.append(review)

    async def list_all(self) -> List[Review]:
        async with self._lock:
            return list(self._reviews)
