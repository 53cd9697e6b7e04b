"""Unit tests for exception handlers."""

import json
from collections.abc import AsyncGenerator
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from api.exception_handlers import setup_exception_handlers
from api.v1.schemas.handle import OnboardingRequest
from core.exceptions import (
    HandleTakenError,
    ImportFailedError,
    ProfileNotFoundError,
    ProviderConflictError,
)


def _create_test_app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/profiles/{handle}")
    async def _profile(handle: str) -> None:
        raise ProfileNotFoundError(handle, claimable=True)

    @app.post("/onboarding")
    async def _claim(body: OnboardingRequest) -> None:
        raise HandleTakenError(body.handle)

    @app.post("/auth/external")
    async def _external() -> None:
        raise ProviderConflictError("bob@example.com", "local")

    @app.post("/imports")
    async def _import() -> None:
        raise ImportFailedError("connection refused")

    @app.get("/store")
    async def _store() -> None:
        raise OperationalError("SELECT 1", {}, Exception("connection reset"))

    return app


@pytest.fixture
def app() -> FastAPI:
    return _create_test_app()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


class TestAppExceptions:
    @pytest.mark.asyncio
    async def test_not_found_carries_claimable(self, client: AsyncClient):
        response = await client.get("/profiles/ghost")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "PROFILE_NOT_FOUND"
        assert "ghost" in body["message"]
        assert body["details"] == {"handle": "ghost", "claimable": True}

    @pytest.mark.asyncio
    async def test_conflicts_are_409(self, client: AsyncClient):
        taken = await client.post("/onboarding", json={"handle": "alice"})
        provider = await client.post("/auth/external")

        assert taken.status_code == 409
        assert taken.json()["error_code"] == "HANDLE_TAKEN"
        assert provider.status_code == 409
        assert provider.json()["details"]["provider"] == "local"

    @pytest.mark.asyncio
    async def test_upstream_failure_is_502(self, client: AsyncClient):
        response = await client.post("/imports")

        assert response.status_code == 502
        assert response.json()["error_code"] == "IMPORT_FAILED"


class TestFrameworkErrors:
    @pytest.mark.asyncio
    async def test_http_exception_uses_standard_shape(self, client: AsyncClient):
        response = await client.delete("/profiles/ghost")

        assert response.status_code == 405
        body = response.json()
        assert body["error_code"] == "HTTP_ERROR"
        assert body["details"] is None

    @pytest.mark.asyncio
    async def test_validation_error_lists_fields(self, client: AsyncClient):
        response = await client.post("/onboarding", json={})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"][0]["field"] == "body.handle"


class TestInfrastructureErrors:
    @pytest.mark.asyncio
    async def test_database_error_is_503_without_internals(self, client: AsyncClient):
        response = await client.get("/store")

        assert response.status_code == 503
        body = response.json()
        assert body["error_code"] == "DATABASE_ERROR"
        assert "connection reset" not in body["message"]

    @pytest.mark.asyncio
    async def test_unhandled_exception_is_500(self, app: FastAPI):
        handler = app.exception_handlers.get(Exception)
        assert handler is not None, "Global exception handler not registered"

        request = MagicMock()
        request.state.request_id = "req-1"

        response = await handler(request, RuntimeError("boom"))  # type: ignore[misc]

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["details"]["request_id"] == "req-1"
