"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from typing import Protocol

from .models import User


class PasswordHasher(Protocol):
    """Port interface for one-way password hashing."""

    async def hash(self, password: str) -> str:
        """
        Hash a plaintext password.

        Implementations must not block the event loop while hashing.
        Hashing the same password twice may produce different hashes.
        """
        ...

    async def verify(self, password: str, password_hash: str) -> bool:
        """Check a plaintext password against a stored hash."""
        ...


class UserStore(Protocol):
    """Port interface for account persistence."""

    async def find_by_username(self, username: str) -> int:
        """
        Count accounts with exactly this username.

        Returns:
            Number of matching accounts (0 or 1 in a consistent store)
        """
        ...

    async def hash_password(self, password: str) -> str:
        """Hash a plaintext password with the store's credential hasher."""
        ...

    async def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a plaintext password with the store's credential hasher."""
        ...

    async def create(self, username: str, password_hash: str, role: str) -> User | None:
        """
        Atomically create an account unless the username is taken.

        This is the authoritative uniqueness check: two concurrent calls
        for the same username must never both succeed.

        Args:
            username: Validated username
            password_hash: Output of hash_password()
            role: Role as supplied by the caller

        Returns:
            The persisted User, or None if the username already exists
        """
        ...

    async def ping(self) -> None:
        """Raise if the store is unreachable."""
        ...
