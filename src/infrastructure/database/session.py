"""Database engine and session management."""

from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import Settings, settings


def build_engine(config: Settings) -> AsyncEngine:
    """Create the async engine for the profile store.

    SQLite URLs (local development) get no pool sizing; SQLite serializes
    writers itself and only needs a busy timeout.
    """
    url = config.async_database_url
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=config.debug, connect_args={"timeout": 30})

    connect_args: dict[str, Any] = {}
    if config.database_behind_pooler:
        # Transaction-mode poolers break asyncpg's prepared statement cache
        connect_args["statement_cache_size"] = 0

    return create_async_engine(
        url,
        echo=config.debug,
        pool_pre_ping=True,
        pool_size=config.database_pool_size,
        max_overflow=config.database_max_overflow,
        connect_args=connect_args,
    )


engine = build_engine(settings)

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Session for endpoints that talk to the database directly (health checks)."""
    async with async_session_factory() as session:
        yield session
