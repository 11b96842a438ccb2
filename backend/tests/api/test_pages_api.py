"""Tests for Pages API endpoints.

Tests the /api/v1/pages endpoints:
- Create with block layout validation
- Hierarchy: parent summaries, child counts, tree and breadcrumbs
- Parent cycle protection on update
- Duplicate and delete
"""

from typing import Any

import pytest
from httpx import AsyncClient


async def _create_page(
    client: AsyncClient, headers: dict[str, str], **overrides: Any
) -> dict[str, Any]:
    payload = {"title": "About", "status": "published", **overrides}
    response = await client.post("/api/v1/pages", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreatePage:
    """Tests for POST /api/v1/pages."""

    @pytest.mark.asyncio
    async def test_create_with_layout(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        data = await _create_page(
            async_client,
            editor_headers,
            layout=[{"blockType": "text", "content": "Intro"}],
        )

        assert data["slug"] == "about"
        assert data["published_at"] is not None
        assert data["layout"][0]["blockType"] == "text"

    @pytest.mark.asyncio
    async def test_invalid_layout_is_422(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        response = await async_client.post(
            "/api/v1/pages",
            json={"title": "About", "layout": [{"blockType": "text", "content": ""}]},
            headers=editor_headers,
        )

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["message"] == "Invalid page layout"
        assert detail["blocks"] == [
            {"index": 0, "block_type": "text", "errors": ["Content is required"]}
        ]

    @pytest.mark.asyncio
    async def test_non_string_block_type_is_422(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        response = await async_client.post(
            "/api/v1/pages",
            json={"title": "About", "layout": [{"blockType": ["text"]}, {}]},
            headers=editor_headers,
        )

        assert response.status_code == 422
        blocks = response.json()["detail"]["blocks"]
        assert [b["index"] for b in blocks] == [0, 1]
        assert blocks[0]["errors"] == ["Block type must be a string"]

    @pytest.mark.asyncio
    async def test_missing_parent_is_404(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        response = await async_client.post(
            "/api/v1/pages",
            json={"title": "Orphan", "parent_id": "missing"},
            headers=editor_headers,
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Parent page with id 'missing' not found"

    @pytest.mark.asyncio
    async def test_subscriber_forbidden(
        self, async_client: AsyncClient, subscriber_headers: dict[str, str]
    ) -> None:
        response = await async_client.post(
            "/api/v1/pages", json={"title": "About"}, headers=subscriber_headers
        )

        assert response.status_code == 403


class TestHierarchy:
    """Tests for parents, children, tree and breadcrumbs."""

    @pytest.mark.asyncio
    async def test_list_includes_parent_and_child_count(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        about = await _create_page(async_client, editor_headers, menu_order=1)
        await _create_page(
            async_client, editor_headers, title="Team", parent_id=about["id"], menu_order=2
        )

        response = await async_client.get("/api/v1/pages")

        data = response.json()
        assert data["total"] == 2
        by_slug = {p["slug"]: p for p in data["items"]}
        assert by_slug["about"]["child_count"] == 1
        assert by_slug["about"]["parent"] is None
        assert by_slug["team"]["parent"]["slug"] == "about"

    @pytest.mark.asyncio
    async def test_roots_only(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        about = await _create_page(async_client, editor_headers)
        await _create_page(async_client, editor_headers, title="Team", parent_id=about["id"])

        response = await async_client.get("/api/v1/pages", params={"roots_only": True})

        assert [p["slug"] for p in response.json()["items"]] == ["about"]

    @pytest.mark.asyncio
    async def test_anonymous_list_hides_drafts(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        await _create_page(async_client, editor_headers)
        await _create_page(async_client, editor_headers, title="Draft", status="draft")

        response = await async_client.get("/api/v1/pages")

        assert [p["slug"] for p in response.json()["items"]] == ["about"]

    @pytest.mark.asyncio
    async def test_tree(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        about = await _create_page(async_client, editor_headers, menu_order=1)
        await _create_page(
            async_client, editor_headers, title="Team", parent_id=about["id"]
        )
        await _create_page(async_client, editor_headers, title="Contact", menu_order=2)

        response = await async_client.get("/api/v1/pages/tree")

        tree = response.json()
        assert [node["slug"] for node in tree] == ["about", "contact"]
        assert [child["slug"] for child in tree[0]["children"]] == ["team"]

    @pytest.mark.asyncio
    async def test_tree_ignores_status_for_anonymous(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        await _create_page(async_client, editor_headers, status="draft")

        anonymous = await async_client.get("/api/v1/pages/tree", params={"status": "draft"})
        editor = await async_client.get(
            "/api/v1/pages/tree", params={"status": "draft"}, headers=editor_headers
        )

        assert anonymous.json() == []
        assert [node["slug"] for node in editor.json()] == ["about"]

    @pytest.mark.asyncio
    async def test_breadcrumbs(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        about = await _create_page(async_client, editor_headers)
        team = await _create_page(
            async_client, editor_headers, title="Team", parent_id=about["id"]
        )
        lead = await _create_page(
            async_client, editor_headers, title="Lead", parent_id=team["id"]
        )

        response = await async_client.get(f"/api/v1/pages/{lead['id']}/breadcrumbs")

        assert [p["slug"] for p in response.json()] == ["about", "team", "lead"]

    @pytest.mark.asyncio
    async def test_breadcrumbs_of_draft_hidden_from_readers(
        self,
        async_client: AsyncClient,
        editor_headers: dict[str, str],
        subscriber_headers: dict[str, str],
    ) -> None:
        draft = await _create_page(
            async_client, editor_headers, title="Launch plan", status="draft"
        )
        url = f"/api/v1/pages/{draft['id']}/breadcrumbs"

        assert (await async_client.get(url)).status_code == 404
        assert (await async_client.get(url, headers=subscriber_headers)).status_code == 404
        editor_view = await async_client.get(url, headers=editor_headers)
        assert [p["slug"] for p in editor_view.json()] == ["launch-plan"]

    @pytest.mark.asyncio
    async def test_breadcrumbs_skip_unpublished_ancestors(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        about = await _create_page(async_client, editor_headers)
        private = await _create_page(
            async_client,
            editor_headers,
            title="Internal",
            status="private",
            parent_id=about["id"],
        )
        team = await _create_page(
            async_client, editor_headers, title="Team", parent_id=private["id"]
        )

        url = f"/api/v1/pages/{team['id']}/breadcrumbs"
        anonymous = await async_client.get(url)
        editor = await async_client.get(url, headers=editor_headers)

        assert [p["slug"] for p in anonymous.json()] == ["about", "team"]
        assert [p["slug"] for p in editor.json()] == ["about", "internal", "team"]

    @pytest.mark.asyncio
    async def test_get_by_slug_detail(
        self, async_client: AsyncClient, make_user: Any
    ) -> None:
        _, headers = await make_user("editor", name="Page Author")
        about = await _create_page(async_client, headers)
        await _create_page(async_client, headers, title="Team", parent_id=about["id"])
        await _create_page(
            async_client, headers, title="Hidden", parent_id=about["id"], status="draft"
        )

        response = await async_client.get("/api/v1/pages/slug/about")

        assert response.status_code == 200
        data = response.json()
        assert data["author"]["display_name"] == "Page Author"
        assert [c["slug"] for c in data["children"]] == ["team"]


class TestUpdatePage:
    """Tests for PATCH /api/v1/pages/{id}."""

    @pytest.mark.asyncio
    async def test_own_parent_rejected(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        about = await _create_page(async_client, editor_headers)

        response = await async_client.patch(
            f"/api/v1/pages/{about['id']}",
            json={"parent_id": about["id"]},
            headers=editor_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Page cannot be its own parent"

    @pytest.mark.asyncio
    async def test_descendant_parent_rejected(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        about = await _create_page(async_client, editor_headers)
        team = await _create_page(
            async_client, editor_headers, title="Team", parent_id=about["id"]
        )
        lead = await _create_page(
            async_client, editor_headers, title="Lead", parent_id=team["id"]
        )

        response = await async_client.patch(
            f"/api/v1/pages/{about['id']}",
            json={"parent_id": lead["id"]},
            headers=editor_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Page cannot be moved under one of its descendants"

    @pytest.mark.asyncio
    async def test_move_to_root(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        about = await _create_page(async_client, editor_headers)
        team = await _create_page(
            async_client, editor_headers, title="Team", parent_id=about["id"]
        )

        response = await async_client.patch(
            f"/api/v1/pages/{team['id']}",
            json={"parent_id": None, "menu_order": 5},
            headers=editor_headers,
        )

        assert response.status_code == 200
        assert response.json()["parent_id"] is None
        assert response.json()["menu_order"] == 5


class TestDuplicateAndDelete:
    """Tests for duplicating and deleting pages."""

    @pytest.mark.asyncio
    async def test_duplicate(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        about = await _create_page(
            async_client,
            editor_headers,
            layout=[{"blockType": "banner", "heading": "Hi"}],
        )

        response = await async_client.post(
            f"/api/v1/pages/{about['id']}/duplicate", headers=editor_headers
        )

        assert response.status_code == 201
        copy = response.json()
        assert copy["title"] == "About (Copy)"
        assert copy["slug"] == "about-copy"
        assert copy["status"] == "draft"
        assert copy["layout"][0]["heading"] == "Hi"

    @pytest.mark.asyncio
    async def test_delete_with_children_conflicts(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        about = await _create_page(async_client, editor_headers)
        await _create_page(async_client, editor_headers, title="Team", parent_id=about["id"])

        response = await async_client.delete(
            f"/api/v1/pages/{about['id']}", headers=editor_headers
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Cannot delete page with child pages"

    @pytest.mark.asyncio
    async def test_delete_leaf(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        about = await _create_page(async_client, editor_headers)

        response = await async_client.delete(
            f"/api/v1/pages/{about['id']}", headers=editor_headers
        )

        assert response.status_code == 204
        missing = await async_client.get(
            f"/api/v1/pages/{about['id']}", headers=editor_headers
        )
        assert missing.status_code == 404
