"""Tests for Categories and Tags API endpoints."""

from typing import Any

import pytest
from httpx import AsyncClient


async def _category(
    client: AsyncClient, headers: dict[str, str], **payload: Any
) -> dict[str, Any]:
    response = await client.post("/api/v1/categories", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCategories:
    """Tests for /api/v1/categories."""

    @pytest.mark.asyncio
    async def test_create_derives_slug(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        data = await _category(async_client, editor_headers, name="Company News")

        assert data["slug"] == "company-news"
        assert data["parent_id"] is None

    @pytest.mark.asyncio
    async def test_explicit_slug_conflict(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        await _category(async_client, editor_headers, name="News")

        response = await async_client.post(
            "/api/v1/categories", json={"name": "Other", "slug": "news"}, headers=editor_headers
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Category slug 'news' already exists"

    @pytest.mark.asyncio
    async def test_roots_only(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        news = await _category(async_client, editor_headers, name="News")
        await _category(async_client, editor_headers, name="Local", parent_id=news["id"])

        response = await async_client.get("/api/v1/categories", params={"roots_only": True})

        assert [c["slug"] for c in response.json()] == ["news"]

    @pytest.mark.asyncio
    async def test_detail_by_slug(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        news = await _category(async_client, editor_headers, name="News")
        await _category(async_client, editor_headers, name="Local", parent_id=news["id"])
        await async_client.post(
            "/api/v1/posts",
            json={"title": "Story", "status": "published", "category_ids": [news["id"]]},
            headers=editor_headers,
        )

        response = await async_client.get("/api/v1/categories/slug/news")

        data = response.json()
        assert data["parent"] is None
        assert [c["slug"] for c in data["children"]] == ["local"]
        assert [p["title"] for p in data["posts"]] == ["Story"]

    @pytest.mark.asyncio
    async def test_category_posts(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        news = await _category(async_client, editor_headers, name="News")
        for title, status in (("Live", "published"), ("Hidden", "draft")):
            await async_client.post(
                "/api/v1/posts",
                json={"title": title, "status": status, "category_ids": [news["id"]]},
                headers=editor_headers,
            )

        response = await async_client.get(f"/api/v1/categories/{news['id']}/posts")

        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["title"] == "Live"

    @pytest.mark.asyncio
    async def test_move_under_descendant_rejected(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        news = await _category(async_client, editor_headers, name="News")
        local = await _category(async_client, editor_headers, name="Local", parent_id=news["id"])

        response = await async_client.patch(
            f"/api/v1/categories/{news['id']}",
            json={"parent_id": local["id"]},
            headers=editor_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Category cannot be moved under one of its descendants"

    @pytest.mark.asyncio
    async def test_delete_with_children_conflicts(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        news = await _category(async_client, editor_headers, name="News")
        await _category(async_client, editor_headers, name="Local", parent_id=news["id"])

        response = await async_client.delete(
            f"/api/v1/categories/{news['id']}", headers=editor_headers
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Cannot delete category with child categories"

    @pytest.mark.asyncio
    async def test_subscriber_cannot_create(
        self, async_client: AsyncClient, subscriber_headers: dict[str, str]
    ) -> None:
        response = await async_client.post(
            "/api/v1/categories", json={"name": "News"}, headers=subscriber_headers
        )

        assert response.status_code == 403


class TestTags:
    """Tests for /api/v1/tags."""

    @pytest.mark.asyncio
    async def test_create_and_get(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        created = await async_client.post(
            "/api/v1/tags", json={"name": "Python Tips"}, headers=editor_headers
        )

        assert created.status_code == 201
        assert created.json()["slug"] == "python-tips"
        fetched = await async_client.get("/api/v1/tags/slug/python-tips")
        assert fetched.json()["name"] == "Python Tips"

    @pytest.mark.asyncio
    async def test_duplicate_slug(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        await async_client.post("/api/v1/tags", json={"name": "Python"}, headers=editor_headers)

        response = await async_client.post(
            "/api/v1/tags", json={"name": "python"}, headers=editor_headers
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Tag slug 'python' already exists"

    @pytest.mark.asyncio
    async def test_delete_detaches_from_posts(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        post = await async_client.post(
            "/api/v1/posts", json={"title": "Tagged", "tags": ["python"]}, headers=editor_headers
        )
        tag_id = post.json()["tags"][0]["id"]

        response = await async_client.delete(f"/api/v1/tags/{tag_id}", headers=editor_headers)

        assert response.status_code == 204
        refreshed = await async_client.get(
            f"/api/v1/posts/{post.json()['id']}", headers=editor_headers
        )
        assert refreshed.json()["tags"] == []
        assert (await async_client.get("/api/v1/tags/slug/python")).status_code == 404
