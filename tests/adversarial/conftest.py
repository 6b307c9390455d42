"""
Shared fixtures for adversarial tests.

Provides stores that widen the window between the uniqueness read and
the write, so concurrent registrations actually interleave.
"""

import anyio
import pytest

from src.adapters.hashing.bcrypt_hasher import BcryptPasswordHasher
from src.adapters.repository.memory import InMemoryUserStore

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


class StaleReadUserStore(InMemoryUserStore):
    """
    In-memory store whose uniqueness read always reports no match.

    Models a replica lagging behind the primary: only the write-time
    conflict check can stop a duplicate.
    """

    async def find_by_username(self, username: str) -> int:
        await anyio.sleep(0)
        return 0


class SlowReadUserStore(InMemoryUserStore):
    """In-memory store that yields to other tasks after every read."""

    async def find_by_username(self, username: str) -> int:
        count = await super().find_by_username(username)
        await anyio.sleep(0.01)
        return count


@pytest.fixture
def stale_store(hasher: BcryptPasswordHasher) -> StaleReadUserStore:
    return StaleReadUserStore(hasher)


@pytest.fixture
def slow_store(hasher: BcryptPasswordHasher) -> SlowReadUserStore:
    return SlowReadUserStore(hasher)
