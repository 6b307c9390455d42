"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- The anyio backend used by async tests
- A fast bcrypt hasher (cost factor 4)
- An in-memory user store and registration service
"""

import pytest

from src.adapters.hashing.bcrypt_hasher import BcryptPasswordHasher
from src.adapters.repository.memory import InMemoryUserStore
from src.domain.registration import RegistrationService

# Lowest cost bcrypt accepts; keeps the suite fast
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture
def anyio_backend() -> str:
    """Run async tests on asyncio only."""
    return "asyncio"


@pytest.fixture
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=TEST_BCRYPT_ROUNDS, max_workers=4)


@pytest.fixture
def memory_store(hasher: BcryptPasswordHasher) -> InMemoryUserStore:
    return InMemoryUserStore(hasher)


@pytest.fixture
def service(memory_store: InMemoryUserStore) -> RegistrationService:
    return RegistrationService(store=memory_store)

