"""Integration tests for handle availability and onboarding API."""

import pytest
from httpx import AsyncClient

from infrastructure.auth.jwt_provider import JWTAuthProvider
from tests.fakes import register


async def _external_session(
    client: AsyncClient, provider: JWTAuthProvider, sub: str, email: str
) -> dict[str, str]:
    token = provider.create_external_token(sub, email)
    response = await client.post(
        "/api/v1/auth/external", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['data']['access_token']}"}


class TestHandleAvailability:
    """GET /api/v1/handles/{candidate}"""

    @pytest.mark.asyncio
    async def test_available(self, api_client: AsyncClient):
        response = await api_client.get("/api/v1/handles/New.Handle")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data == {"handle": "newhandle", "available": True, "reason": None}

    @pytest.mark.asyncio
    async def test_taken(self, api_client: AsyncClient):
        await register(api_client)

        data = (await api_client.get("/api/v1/handles/ALICE")).json()["data"]

        assert data["available"] is False
        assert data["reason"] == "taken"

    @pytest.mark.asyncio
    async def test_reserved(self, api_client: AsyncClient):
        data = (await api_client.get("/api/v1/handles/dashboard")).json()["data"]

        assert data["available"] is False
        assert data["reason"] == "reserved"

    @pytest.mark.asyncio
    async def test_too_short(self, api_client: AsyncClient):
        response = await api_client.get("/api/v1/handles/a-b")

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_HANDLE"


class TestOnboarding:
    """POST /api/v1/onboarding"""

    @pytest.mark.asyncio
    async def test_claim_returns_fresh_session(
        self, api_client: AsyncClient, auth_provider: JWTAuthProvider
    ):
        headers = await _external_session(api_client, auth_provider, "sub-1", "new@example.com")

        response = await api_client.post(
            "/api/v1/onboarding", json={"handle": "New_User"}, headers=headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["needs_onboarding"] is False
        assert data["account"]["handle"] == "newuser"

        subject = await auth_provider.validate_token(data["access_token"])
        assert subject is not None
        assert subject.handle == "newuser"

        page = await api_client.get("/api/v1/profiles/newuser")
        assert page.status_code == 200
        assert page.json()["data"]["display_title"] == "@newuser"

    @pytest.mark.asyncio
    async def test_keeps_provider_display_name(
        self, api_client: AsyncClient, auth_provider: JWTAuthProvider
    ):
        token = auth_provider.create_external_token("sub-2", "jane@example.com", "Jane Doe")
        session = await api_client.post(
            "/api/v1/auth/external", headers={"Authorization": f"Bearer {token}"}
        )
        headers = {"Authorization": f"Bearer {session.json()['data']['access_token']}"}

        await api_client.post("/api/v1/onboarding", json={"handle": "jane"}, headers=headers)

        page = await api_client.get("/api/v1/profiles/jane")
        assert page.json()["data"]["display_title"] == "Jane Doe"

    @pytest.mark.asyncio
    async def test_claim_is_idempotent_for_same_handle(
        self, api_client: AsyncClient, auth_provider: JWTAuthProvider
    ):
        headers = await _external_session(api_client, auth_provider, "sub-1", "new@example.com")

        await api_client.post("/api/v1/onboarding", json={"handle": "newuser"}, headers=headers)
        again = await api_client.post(
            "/api/v1/onboarding", json={"handle": "newuser"}, headers=headers
        )
        other = await api_client.post(
            "/api/v1/onboarding", json={"handle": "another"}, headers=headers
        )

        assert again.status_code == 200
        assert other.status_code == 409
        assert other.json()["error_code"] == "HANDLE_ALREADY_SET"

    @pytest.mark.asyncio
    async def test_claim_taken_handle(self, api_client: AsyncClient, auth_provider: JWTAuthProvider):
        await register(api_client)
        headers = await _external_session(api_client, auth_provider, "sub-1", "new@example.com")

        response = await api_client.post(
            "/api/v1/onboarding", json={"handle": "alice"}, headers=headers
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "HANDLE_TAKEN"

    @pytest.mark.asyncio
    async def test_claim_reserved(self, api_client: AsyncClient, auth_provider: JWTAuthProvider):
        headers = await _external_session(api_client, auth_provider, "sub-1", "new@example.com")

        response = await api_client.post(
            "/api/v1/onboarding", json={"handle": "Admin"}, headers=headers
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "HANDLE_RESERVED"

    @pytest.mark.asyncio
    async def test_requires_session(self, api_client: AsyncClient):
        response = await api_client.post("/api/v1/onboarding", json={"handle": "anyone"})

        assert response.status_code == 401
