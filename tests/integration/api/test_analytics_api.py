"""Integration tests for click analytics API."""

import uuid

import pytest
from httpx import AsyncClient

from tests.fakes import register


async def _store_item_id(client: AsyncClient, headers: dict[str, str]) -> str:
    data = (await client.get("/api/v1/me/profile", headers=headers)).json()["data"]
    return data["store_items"][0]["id"]


async def _store_clicks(client: AsyncClient, headers: dict[str, str], item_id: str) -> int:
    data = (await client.get("/api/v1/me/profile", headers=headers)).json()["data"]
    return next(i["click_count"] for i in data["store_items"] if i["id"] == item_id)


class TestRecordClick:
    """POST /api/v1/analytics/click"""

    @pytest.mark.asyncio
    async def test_counts_store_click(self, api_client: AsyncClient):
        headers = await register(api_client)
        item_id = await _store_item_id(api_client, headers)

        response = await api_client.post(
            "/api/v1/analytics/click",
            json={"handle": "alice", "item_id": item_id, "kind": "store"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert await _store_clicks(api_client, headers, item_id) == 1

    @pytest.mark.asyncio
    async def test_accepts_legacy_field_names(self, api_client: AsyncClient):
        headers = await register(api_client)
        item_id = await _store_item_id(api_client, headers)

        response = await api_client.post(
            "/api/v1/analytics/click",
            json={"username": "Alice", "itemId": item_id, "type": "store"},
        )

        assert response.status_code == 200
        assert await _store_clicks(api_client, headers, item_id) == 1

    @pytest.mark.asyncio
    async def test_wrong_kind_does_not_count(self, api_client: AsyncClient):
        headers = await register(api_client)
        item_id = await _store_item_id(api_client, headers)

        response = await api_client.post(
            "/api/v1/analytics/click",
            json={"handle": "alice", "item_id": item_id, "kind": "link"},
        )

        assert response.status_code == 200
        assert await _store_clicks(api_client, headers, item_id) == 0

    @pytest.mark.asyncio
    async def test_unknown_item_still_succeeds(self, api_client: AsyncClient):
        await register(api_client)

        response = await api_client.post(
            "/api/v1/analytics/click",
            json={"handle": "alice", "item_id": str(uuid.uuid4()), "kind": "link"},
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_unknown_handle_still_succeeds(self, api_client: AsyncClient):
        response = await api_client.post(
            "/api/v1/analytics/click",
            json={"handle": "nobody", "item_id": "not-a-uuid", "kind": "store"},
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_invalid_kind(self, api_client: AsyncClient):
        response = await api_client.post(
            "/api/v1/analytics/click",
            json={"handle": "alice", "item_id": str(uuid.uuid4()), "kind": "banner"},
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_no_session_needed(self, api_client: AsyncClient):
        headers = await register(api_client)
        item_id = await _store_item_id(api_client, headers)

        for _ in range(3):
            await api_client.post(
                "/api/v1/analytics/click",
                json={"handle": "alice", "item_id": item_id, "kind": "store"},
            )

        assert await _store_clicks(api_client, headers, item_id) == 3
