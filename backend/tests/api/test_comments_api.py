"""Tests for Comments API endpoints.

Tests the /api/v1/comments endpoints and the comment views of posts:
- Visitor submission (pending by default, disabled comments, unpublished posts)
- Reply validation
- Moderation queue, approve, spam, delete
- Approved reply tree and counts
"""

from typing import Any

import pytest
from httpx import AsyncClient


async def _published_post(client: AsyncClient, headers: dict[str, str], title: str = "Post") -> str:
    response = await client.post(
        "/api/v1/posts", json={"title": title, "status": "published"}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


async def _comment(client: AsyncClient, post_id: str, **overrides: Any) -> dict[str, Any]:
    payload = {
        "post_id": post_id,
        "author_name": "Reader",
        "author_email": "Reader@Example.com",
        "content": "Great post",
        **overrides,
    }
    response = await client.post("/api/v1/comments", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestSubmitComment:
    """Tests for POST /api/v1/comments."""

    @pytest.mark.asyncio
    async def test_submitted_comment_is_pending(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        post_id = await _published_post(async_client, editor_headers)

        data = await _comment(async_client, post_id)

        assert data["status"] == "pending"
        assert data["post_id"] == post_id
        assert "author_email" not in data

    @pytest.mark.asyncio
    async def test_unpublished_post_is_404(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        draft = await async_client.post(
            "/api/v1/posts", json={"title": "Draft"}, headers=editor_headers
        )

        response = await async_client.post(
            "/api/v1/comments",
            json={
                "post_id": draft.json()["id"],
                "author_name": "Reader",
                "author_email": "reader@example.com",
                "content": "Hi",
            },
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Post not found"

    @pytest.mark.asyncio
    async def test_comments_disabled(
        self,
        async_client: AsyncClient,
        editor_headers: dict[str, str],
        admin_headers: dict[str, str],
    ) -> None:
        post_id = await _published_post(async_client, editor_headers)
        await async_client.put(
            "/api/v1/settings/comments-enabled", json={"enabled": False}, headers=admin_headers
        )

        response = await async_client.post(
            "/api/v1/comments",
            json={
                "post_id": post_id,
                "author_name": "Reader",
                "author_email": "reader@example.com",
                "content": "Hi",
            },
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "Comments are disabled"

    @pytest.mark.asyncio
    async def test_invalid_email_is_422(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        post_id = await _published_post(async_client, editor_headers)

        response = await async_client.post(
            "/api/v1/comments",
            json={
                "post_id": post_id,
                "author_name": "Reader",
                "author_email": "not-an-email",
                "content": "Hi",
            },
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_missing_parent(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        post_id = await _published_post(async_client, editor_headers)

        response = await async_client.post(
            "/api/v1/comments",
            json={
                "post_id": post_id,
                "parent_id": "missing",
                "author_name": "Reader",
                "author_email": "reader@example.com",
                "content": "Hi",
            },
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Parent comment not found"

    @pytest.mark.asyncio
    async def test_parent_on_other_post(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        first = await _published_post(async_client, editor_headers, "First")
        second = await _published_post(async_client, editor_headers, "Second")
        parent = await _comment(async_client, first)

        response = await async_client.post(
            "/api/v1/comments",
            json={
                "post_id": second,
                "parent_id": parent["id"],
                "author_name": "Reader",
                "author_email": "reader@example.com",
                "content": "Hi",
            },
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Parent comment belongs to a different post"


class TestModeration:
    """Tests for the moderation endpoints."""

    @pytest.mark.asyncio
    async def test_queue_requires_moderator(
        self, async_client: AsyncClient, subscriber_headers: dict[str, str]
    ) -> None:
        response = await async_client.get("/api/v1/comments", headers=subscriber_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_queue_filters_by_status(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        post_id = await _published_post(async_client, editor_headers)
        first = await _comment(async_client, post_id)
        await _comment(async_client, post_id, content="Second")
        await async_client.post(
            f"/api/v1/comments/{first['id']}/spam", headers=editor_headers
        )

        response = await async_client.get(
            "/api/v1/comments", params={"status": "pending"}, headers=editor_headers
        )

        data = response.json()
        assert data["total"] == 1
        item = data["items"][0]
        assert item["content"] == "Second"
        assert item["author_email"] == "reader@example.com"
        assert item["post"]["id"] == post_id

    @pytest.mark.asyncio
    async def test_approve_and_thread(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        post_id = await _published_post(async_client, editor_headers)
        parent = await _comment(async_client, post_id)
        reply = await _comment(async_client, post_id, parent_id=parent["id"], content="Thanks")
        await _comment(async_client, post_id, content="Still pending")

        approved = await async_client.post(
            f"/api/v1/comments/{parent['id']}/approve", headers=editor_headers
        )
        await async_client.post(
            f"/api/v1/comments/{reply['id']}/approve", headers=editor_headers
        )

        assert approved.json()["status"] == "approved"
        thread = (await async_client.get(f"/api/v1/posts/{post_id}/comments")).json()
        assert thread["total"] == 2
        assert [c["id"] for c in thread["items"]] == [parent["id"]]
        assert [r["content"] for r in thread["items"][0]["replies"]] == ["Thanks"]

        count = await async_client.get(f"/api/v1/posts/{post_id}/comments/count")
        assert count.json() == {"post_id": post_id, "count": 2}

    @pytest.mark.asyncio
    async def test_delete_with_replies_conflicts(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        post_id = await _published_post(async_client, editor_headers)
        parent = await _comment(async_client, post_id)
        reply = await _comment(async_client, post_id, parent_id=parent["id"])

        conflict = await async_client.delete(
            f"/api/v1/comments/{parent['id']}", headers=editor_headers
        )
        assert conflict.status_code == 409
        assert conflict.json()["detail"] == "Cannot delete comment with replies"

        assert (
            await async_client.delete(f"/api/v1/comments/{reply['id']}", headers=editor_headers)
        ).status_code == 204
        assert (
            await async_client.delete(f"/api/v1/comments/{parent['id']}", headers=editor_headers)
        ).status_code == 204

    @pytest.mark.asyncio
    async def test_approve_missing_comment(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        response = await async_client.post(
            "/api/v1/comments/missing/approve", headers=editor_headers
        )

        assert response.status_code == 404
