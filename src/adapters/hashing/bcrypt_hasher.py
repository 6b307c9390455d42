"""
bcrypt password hasher adapter - Implements PasswordHasher protocol.

bcrypt is deliberately slow (~50-100ms at cost 10), so every call runs on
a worker thread. A CapacityLimiter bounds how many hashes run at once so
a burst of registrations cannot starve the rest of the thread pool.
"""

import bcrypt
from anyio import CapacityLimiter, to_thread


class BcryptPasswordHasher:
    """
    Implements PasswordHasher protocol via bcrypt.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, rounds: int = 10, max_workers: int = 4) -> None:
        """
        Initialize hasher.

        Args:
            rounds: bcrypt cost factor (log2 of the iteration count)
            max_workers: Maximum number of hashes computed concurrently
        """
        self._rounds = rounds
        self._max_workers = max_workers
        self._limiter: CapacityLimiter | None = None

    @property
    def rounds(self) -> int:
        return self._rounds

    async def hash(self, password: str) -> str:
        return await to_thread.run_sync(self._hash_sync, password, limiter=self._get_limiter())

    async def verify(self, password: str, password_hash: str) -> bool:
        return await to_thread.run_sync(
            self._verify_sync, password, password_hash, limiter=self._get_limiter()
        )

    def _hash_sync(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self._rounds)).decode()

    @staticmethod
    def _verify_sync(password: str, password_hash: str) -> bool:
        return bcrypt.checkpw(password.encode(), password_hash.encode())

    def _get_limiter(self) -> CapacityLimiter:
        # Created lazily: a limiter must be built inside a running event loop
        if self._limiter is None:
            self._limiter = CapacityLimiter(self._max_workers)
        return self._limiter
