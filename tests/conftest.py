"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable, Generator
from pathlib import Path
from typing import Any

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.services.projection_cache import ProjectionCache
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.passwords import BcryptPasswordHasher
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_SECRET = "test-secret-key"


async def _create_schema(engine: AsyncEngine) -> AsyncEngine:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return engine


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test."""
    engine = await _create_schema(create_async_engine(TEST_DATABASE_URL, echo=False))
    yield engine
    await engine.dispose()


@pytest.fixture
async def file_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed database, for tests that need several live connections."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'biolink.db'}",
        echo=False,
        connect_args={"timeout": 30},
    )

    # Take the write lock up front so concurrent writers queue on the busy
    # timeout instead of failing a lock upgrade
    @event.listens_for(engine.sync_engine, "connect")
    def _no_implicit_begin(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    await _create_schema(engine)
    yield engine
    await engine.dispose()


def _session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return _session_factory(engine)


@pytest.fixture
def file_session_factory(file_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return _session_factory(file_engine)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Unit of Work factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def password_hasher() -> BcryptPasswordHasher:
    """Cheap bcrypt cost so tests stay fast."""
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key=TEST_SECRET,
        algorithm="HS256",
        expire_minutes=30,
        provider_name="google",
    )


@pytest.fixture
def projection_cache() -> ProjectionCache:
    return ProjectionCache(ttl_seconds=60)


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no database overrides)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def test_app(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    auth_provider: JWTAuthProvider,
    password_hasher: BcryptPasswordHasher,
    projection_cache: ProjectionCache,
) -> Generator[FastAPI, None, None]:
    """
    Create an app wired to the in-memory database.

    The app:
    - Overrides every service dependency to use the test UoW factory
    - Overrides the auth provider so tokens are signed with the test secret
    - Replaces the importer with one that never touches the network
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import (
        get_analytics_service,
        get_identity_service,
        get_importer,
        get_profile_service,
        get_public_profile_service,
    )
    from domain.services.analytics_service import AnalyticsService
    from domain.services.identity_service import IdentityService
    from domain.services.profile_service import ProfileService
    from domain.services.public_profile_service import PublicProfileService
    from main import create_app
    from tests.fakes import StaticImporter

    app = create_app()

    profile_service = ProfileService(uow_factory, projection_cache=projection_cache)

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_identity_service] = lambda: IdentityService(
        uow_factory, password_hasher=password_hasher
    )
    app.dependency_overrides[get_profile_service] = lambda: profile_service
    app.dependency_overrides[get_public_profile_service] = lambda: PublicProfileService(
        uow_factory, projection_cache=projection_cache
    )
    app.dependency_overrides[get_analytics_service] = lambda: AnalyticsService(profile_service)
    app.dependency_overrides[get_importer] = StaticImporter

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def api_client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client for the wired app."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
