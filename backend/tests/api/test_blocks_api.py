"""Tests for the block registry API."""

import pytest
from httpx import AsyncClient


class TestBlocksApi:
    @pytest.mark.asyncio
    async def test_list_by_category(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/v1/blocks", params={"category": "layout"})

        assert response.status_code == 200
        assert [b["id"] for b in response.json()] == ["banner"]

    @pytest.mark.asyncio
    async def test_available(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/v1/blocks/available")

        assert len(response.json()) == 9

    @pytest.mark.asyncio
    async def test_get_block(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/v1/blocks/text")

        assert response.json()["label"] == "Text"

    @pytest.mark.asyncio
    async def test_unknown_block(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/v1/blocks/carousel")

        assert response.status_code == 404
        assert response.json()["detail"] == "Block type 'carousel' not found"

    @pytest.mark.asyncio
    async def test_default_block(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/api/v1/blocks/logos/default")

        assert response.status_code == 200
        assert response.json()["blockType"] == "logos"

    @pytest.mark.asyncio
    async def test_validate(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/api/v1/blocks/validate", json={"block": {"blockType": "testimonial"}}
        )

        assert response.json() == {
            "is_valid": False,
            "errors": ["Quote is required", "Author is required"],
        }
