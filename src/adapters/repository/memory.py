"""
In-memory user store adapter - Implements UserStore protocol.

Intended for development and tests. All coroutines run on one event loop
and create() has no await between its membership test and its insert, so
the conditional insert is atomic with respect to other requests.
"""

import logging

from src.domain.models import User
from src.domain.ports import PasswordHasher

logger = logging.getLogger(__name__)


class InMemoryUserStore:
    """
    Implements UserStore protocol with a dict keyed by username.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, hasher: PasswordHasher) -> None:
        self._hasher = hasher
        self._users: dict[str, User] = {}

    async def find_by_username(self, username: str) -> int:
        return 1 if username in self._users else 0

    async def hash_password(self, password: str) -> str:
        return await self._hasher.hash(password)

    async def verify_password(self, password: str, password_hash: str) -> bool:
        return await self._hasher.verify(password, password_hash)

    async def create(self, username: str, password_hash: str, role: str) -> User | None:
        if username in self._users:
            return None
        user = User(username=username, password_hash=password_hash, role=role)
        self._users[username] = user
        logger.debug("Stored user in memory: %s", username)
        return user

    async def ping(self) -> None:
        return None

    def get(self, username: str) -> User | None:
        return self._users.get(username)

    def __len__(self) -> int:
        return len(self._users)
