"""Tests for health check endpoints."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.session import get_async_session


@pytest.fixture
async def health_client(
    test_app: FastAPI, db_session: AsyncSession
) -> AsyncGenerator[AsyncClient, None]:
    """Client whose health endpoint talks to the test database."""
    test_app.dependency_overrides[get_async_session] = lambda: db_session
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


class TestLiveness:
    """GET /health"""

    @pytest.mark.asyncio
    async def test_reports_healthy(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert data["checks"] == {}

    @pytest.mark.asyncio
    async def test_carries_security_headers(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.headers["x-content-type-options"] == "nosniff"
        assert "x-request-id" in response.headers


class TestReadiness:
    """GET /health/detailed"""

    @pytest.mark.asyncio
    async def test_checks_profile_tables(self, health_client: AsyncClient) -> None:
        response = await health_client.get("/health/detailed")

        data = response.json()
        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert data["checks"] == {"accounts": "healthy", "profiles": "healthy"}
        assert data["profile_cache_ttl_seconds"] is not None

    @pytest.mark.asyncio
    async def test_missing_table_is_degraded(
        self, health_client: AsyncClient, db_session: AsyncSession
    ) -> None:
        await db_session.execute(text("DROP TABLE profile_links"))
        await db_session.execute(text("DROP TABLE profile_store_items"))
        await db_session.execute(text("DROP TABLE profiles"))

        data = (await health_client.get("/health/detailed")).json()

        assert data["status"] == "degraded"
        assert data["checks"]["accounts"] == "healthy"
        assert data["checks"]["profiles"].startswith("unhealthy")
