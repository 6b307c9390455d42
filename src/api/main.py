"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures logging, routes, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from psycopg_pool import AsyncConnectionPool

from src.adapters.hashing.bcrypt_hasher import BcryptPasswordHasher
from src.adapters.repository.memory import InMemoryUserStore
from src.adapters.repository.postgres import PostgresUserStore, run_migrations
from src.api.dependencies import get_user_store
from src.api.models import HealthResponse
from src.api.v1 import router as v1_router
from src.config.settings import Settings, get_settings
from src.domain.ports import UserStore

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Account Registration API v1 - Validate and create user accounts",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Builds the bcrypt hasher and the configured user store on startup
    - For PostgreSQL, opens the connection pool and runs migrations
    - Closes the connection pool on shutdown
    """
    settings: Settings = app.state.settings

    logger.info("Starting application...")

    hasher = BcryptPasswordHasher(
        rounds=settings.bcrypt_cost, max_workers=settings.hash_workers
    )
    pool: AsyncConnectionPool | None = None

    if settings.storage_backend == "memory":
        logger.warning("Using in-memory user store; accounts are lost on restart")
        app.state.user_store = InMemoryUserStore(hasher)
    else:
        logger.info("Connecting to database...")
        # Create connection pool with explicit sizing
        pool = AsyncConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            open=False,
        )
        await pool.open()

        logger.info("Running database migrations...")
        await run_migrations(pool)

        app.state.user_store = PostgresUserStore(pool, hasher)

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        await pool.close()
        logger.info("Database connection pool closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Explicit settings, defaults to the cached environment settings
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title="registrar",
        description="Account Registration API - Validates credentials and creates user accounts",
        version="0.1.0",
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Include v1 API routes
    app.include_router(v1_router, prefix="/v1")

    @app.get("/health", response_model=HealthResponse)
    async def health_check(store: UserStore = Depends(get_user_store)) -> HealthResponse:
        """
        Health check endpoint with store validation.

        Returns 200 OK if application and user store are healthy.
        Raises exception if the store is unreachable.
        """
        await store.ping()
        return HealthResponse(status="healthy")

    return app


app = create_app()
