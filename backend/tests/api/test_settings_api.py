"""Tests for Site Settings API endpoints."""

import pytest
from httpx import AsyncClient


class TestSettingsApi:
    """Tests for /api/v1/settings."""

    @pytest.mark.asyncio
    async def test_requires_manage_settings(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        response = await async_client.get("/api/v1/settings", headers=editor_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_put_infers_type(
        self, async_client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await async_client.put(
            "/api/v1/settings/posts_per_page", json={"value": 10}, headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["key"] == "posts_per_page"
        assert data["value"] == 10
        assert data["type"] == "number"

    @pytest.mark.asyncio
    async def test_put_json_and_read_back(
        self, async_client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        await async_client.put(
            "/api/v1/settings/social",
            json={"value": {"twitter": "@fastpress"}},
            headers=admin_headers,
        )

        response = await async_client.get("/api/v1/settings/social", headers=admin_headers)

        assert response.json()["value"] == {"twitter": "@fastpress"}
        assert response.json()["type"] == "json"

    @pytest.mark.asyncio
    async def test_invalid_type_is_422(
        self, async_client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await async_client.put(
            "/api/v1/settings/x", json={"value": 1, "type": "date"}, headers=admin_headers
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_boolean_as_number_is_422(
        self, async_client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await async_client.put(
            "/api/v1/settings/flag", json={"value": True, "type": "number"}, headers=admin_headers
        )

        assert response.status_code == 422
        listing = await async_client.get("/api/v1/settings", headers=admin_headers)
        assert listing.status_code == 200
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_get_missing(
        self, async_client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await async_client.get("/api/v1/settings/missing", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Setting 'missing' not found"

    @pytest.mark.asyncio
    async def test_delete(
        self, async_client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        await async_client.put(
            "/api/v1/settings/site_name", json={"value": "FastPress"}, headers=admin_headers
        )

        response = await async_client.delete("/api/v1/settings/site_name", headers=admin_headers)

        assert response.status_code == 204
        listing = await async_client.get("/api/v1/settings", headers=admin_headers)
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_comments_toggle(
        self, async_client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        assert (await async_client.get("/api/v1/settings/comments-enabled")).json() == {
            "enabled": True
        }

        response = await async_client.put(
            "/api/v1/settings/comments-enabled",
            json={"enabled": False},
            headers=admin_headers,
        )

        assert response.json() == {"enabled": False}
        assert (await async_client.get("/api/v1/settings/comments-enabled")).json() == {
            "enabled": False
        }
