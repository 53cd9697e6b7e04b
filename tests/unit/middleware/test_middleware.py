"""Unit tests for middleware."""

from collections.abc import AsyncGenerator
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from api.middleware import logging as logging_middleware
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware


def _create_app_with_middleware() -> FastAPI:
    """Minimal app carrying the custom middleware stack."""
    app = FastAPI()
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/profiles/alice")
    async def _page():
        return {"ok": True}

    @app.get("/health")
    async def _health():
        return {"status": "healthy"}

    @app.post("/api/v1/analytics/click")
    async def _click():
        return {"success": True}

    return app


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=_create_app_with_middleware())
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def request_logger(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    mock = MagicMock()
    monkeypatch.setattr(logging_middleware, "logger", mock)
    return mock


class TestSecurityHeadersMiddleware:
    @pytest.mark.asyncio
    async def test_baseline_headers(self, client: AsyncClient):
        response = await client.get("/profiles/alice")

        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"
        assert response.headers["referrer-policy"] == "strict-origin-when-cross-origin"

    @pytest.mark.asyncio
    async def test_anonymous_page_is_cacheable(self, client: AsyncClient):
        response = await client.get("/profiles/alice")

        assert "cache-control" not in response.headers

    @pytest.mark.asyncio
    async def test_signed_in_response_is_not_stored(self, client: AsyncClient):
        response = await client.get(
            "/profiles/alice", headers={"Authorization": "Bearer token"}
        )

        assert response.headers["cache-control"] == "no-store"


class TestRequestIDMiddleware:
    @pytest.mark.asyncio
    async def test_generates_distinct_ids(self, client: AsyncClient):
        first = await client.get("/profiles/alice")
        second = await client.get("/profiles/alice")

        assert first.headers["x-request-id"]
        assert first.headers["x-request-id"] != second.headers["x-request-id"]

    @pytest.mark.asyncio
    async def test_reuses_inbound_id(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/analytics/click", headers={"X-Request-ID": "page-load-123"}
        )

        assert response.headers["x-request-id"] == "page-load-123"

    @pytest.mark.asyncio
    async def test_replaces_oversized_request_id(self, client: AsyncClient):
        response = await client.get("/profiles/alice", headers={"X-Request-ID": "x" * 500})

        assert response.headers["x-request-id"] != "x" * 500
        assert len(response.headers["x-request-id"]) == 36


class TestRequestLoggingMiddleware:
    @pytest.mark.asyncio
    async def test_page_request_logged_at_info(
        self, client: AsyncClient, request_logger: MagicMock
    ):
        await client.get("/profiles/alice")

        request_logger.info.assert_called_once()
        assert request_logger.info.call_args.args[0] == "request_completed"
        assert request_logger.info.call_args.kwargs["status_code"] == 200

    @pytest.mark.asyncio
    async def test_click_beacon_logged_at_debug(
        self, client: AsyncClient, request_logger: MagicMock
    ):
        await client.post("/api/v1/analytics/click")

        request_logger.debug.assert_called_once()
        request_logger.info.assert_not_called()

    @pytest.mark.asyncio
    async def test_health_check_not_logged(self, client: AsyncClient, request_logger: MagicMock):
        await client.get("/health")

        request_logger.info.assert_not_called()
        request_logger.debug.assert_not_called()
