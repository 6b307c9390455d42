"""
PostgreSQL user store adapter - Implements UserStore protocol.

This module provides the PostgreSQL implementation of the domain's
user store port using psycopg3 (async) with raw SQL.

Uniqueness Design:
-----------------
The users table carries a PRIMARY KEY on username. create() issues a
single INSERT ... ON CONFLICT (username) DO NOTHING RETURNING statement,
so two concurrent registrations for the same username can both pass the
read-based check in the domain service but only one row is ever written.
An empty RETURNING set is reported as None, which the domain treats as
the authoritative "username taken" signal.
"""

import logging
from pathlib import Path

from psycopg_pool import AsyncConnectionPool

from src.domain.models import User
from src.domain.ports import PasswordHasher

logger = logging.getLogger(__name__)


class PostgresUserStore:
    """
    Implements UserStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: AsyncConnectionPool, hasher: PasswordHasher) -> None:
        """
        Initialize store with connection pool and credential hasher.

        Args:
            pool: psycopg3 AsyncConnectionPool for database connections
            hasher: Password hasher used for hash_password/verify_password
        """
        self._pool = pool
        self._hasher = hasher

    async def find_by_username(self, username: str) -> int:
        sql = "SELECT COUNT(*) FROM users WHERE username = %s"

        async with self._pool.connection() as conn, conn.cursor() as cursor:
            await cursor.execute(sql, (username,))
            row = await cursor.fetchone()
            return row[0] if row is not None else 0

    async def hash_password(self, password: str) -> str:
        return await self._hasher.hash(password)

    async def verify_password(self, password: str, password_hash: str) -> bool:
        return await self._hasher.verify(password, password_hash)

    async def create(self, username: str, password_hash: str, role: str) -> User | None:
        """
        Insert a user row unless the username already exists.

        Args:
            username: Validated username (exact, case-sensitive)
            password_hash: bcrypt hash from hash_password()
            role: Role as supplied by the caller

        Returns:
            The persisted User, or None on a username conflict
        """
        sql = """
            INSERT INTO users (username, password_hash, role, created_at)
            VALUES (%s, %s, %s, NOW())
            ON CONFLICT (username) DO NOTHING
            RETURNING username, password_hash, role
        """

        async with self._pool.connection() as conn, conn.cursor() as cursor:
            await cursor.execute(sql, (username, password_hash, role))
            row = await cursor.fetchone()
            await conn.commit()

        if row is None:
            return None
        return User(username=row[0], password_hash=row[1], role=row[2])

    async def ping(self) -> None:
        """Raise if the database is unreachable."""
        async with self._pool.connection() as conn:
            await conn.execute("SELECT 1")


async def run_migrations(pool: AsyncConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 AsyncConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            async with pool.connection() as conn:
                await conn.execute(sql_content)
                await conn.commit()

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
