"""Tests for Users and Roles API endpoints.

Tests the /api/v1/users and /api/v1/roles endpoints:
- Own profile read and update
- Administrator-only user management and role assignment
- User meta for oneself or an administrator
"""

from typing import Any

import pytest
from httpx import AsyncClient


class TestProfile:
    """Tests for /api/v1/users/me."""

    @pytest.mark.asyncio
    async def test_get_me(self, async_client: AsyncClient, make_user: Any) -> None:
        user, headers = await make_user("editor", email="me@example.com")

        response = await async_client.get("/api/v1/users/me", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == user.id
        assert data["email"] == "me@example.com"
        assert data["role"]["slug"] == "editor"

    @pytest.mark.asyncio
    async def test_requires_authentication(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/v1/users/me")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_update_me(
        self, async_client: AsyncClient, subscriber_headers: dict[str, str]
    ) -> None:
        response = await async_client.patch(
            "/api/v1/users/me",
            json={"display_name": "  New Name ", "user_url": "https://me.example.com"},
            headers=subscriber_headers,
        )

        assert response.status_code == 200
        assert response.json()["display_name"] == "New Name"
        assert response.json()["user_url"] == "https://me.example.com"

    @pytest.mark.asyncio
    async def test_invalid_url_is_422(
        self, async_client: AsyncClient, subscriber_headers: dict[str, str]
    ) -> None:
        response = await async_client.patch(
            "/api/v1/users/me", json={"user_url": "me.example.com"}, headers=subscriber_headers
        )

        assert response.status_code == 422


class TestAdministration:
    """Tests for administrator-only user endpoints."""

    @pytest.mark.asyncio
    async def test_non_admin_forbidden(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        response = await async_client.get("/api/v1/users", headers=editor_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "Access denied: Requires one of: administrator"

    @pytest.mark.asyncio
    async def test_list_users(
        self, async_client: AsyncClient, make_user: Any, admin_headers: dict[str, str]
    ) -> None:
        await make_user("subscriber")

        response = await async_client.get(
            "/api/v1/users", params={"limit": 1}, headers=admin_headers
        )

        data = response.json()
        assert data["total"] == 2
        assert len(data["users"]) == 1
        assert data["has_more"] is True

    @pytest.mark.asyncio
    async def test_update_email_conflict(
        self, async_client: AsyncClient, make_user: Any, admin_headers: dict[str, str]
    ) -> None:
        await make_user("subscriber", email="taken@example.com")
        target, _ = await make_user("subscriber")

        response = await async_client.patch(
            f"/api/v1/users/{target.id}",
            json={"email": "Taken@Example.com"},
            headers=admin_headers,
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Email 'taken@example.com' is already in use"

    @pytest.mark.asyncio
    async def test_assign_role(
        self, async_client: AsyncClient, make_user: Any, admin_headers: dict[str, str]
    ) -> None:
        target, _ = await make_user("subscriber")

        response = await async_client.put(
            f"/api/v1/users/{target.id}/role", json={"role": "editor"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["role"]["slug"] == "editor"

    @pytest.mark.asyncio
    async def test_assign_unknown_role(
        self, async_client: AsyncClient, make_user: Any, admin_headers: dict[str, str]
    ) -> None:
        target, _ = await make_user("subscriber")

        response = await async_client.put(
            f"/api/v1/users/{target.id}/role", json={"role": "author"}, headers=admin_headers
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Role 'author' not found"

    @pytest.mark.asyncio
    async def test_cannot_delete_self(
        self, async_client: AsyncClient, make_user: Any
    ) -> None:
        admin, headers = await make_user("administrator")

        response = await async_client.delete(f"/api/v1/users/{admin.id}", headers=headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot delete your own account"

    @pytest.mark.asyncio
    async def test_delete_user_revokes_sessions(
        self, async_client: AsyncClient, make_user: Any, admin_headers: dict[str, str]
    ) -> None:
        target, target_headers = await make_user("subscriber")

        response = await async_client.delete(f"/api/v1/users/{target.id}", headers=admin_headers)

        assert response.status_code == 204
        assert (
            await async_client.get("/api/v1/users/me", headers=target_headers)
        ).status_code == 401


class TestUserMeta:
    """Tests for /api/v1/users/{id}/meta."""

    @pytest.mark.asyncio
    async def test_own_meta_lifecycle(self, async_client: AsyncClient, make_user: Any) -> None:
        user, headers = await make_user("subscriber")
        base = f"/api/v1/users/{user.id}/meta"

        put = await async_client.put(
            f"{base}/theme", json={"value": {"mode": "dark"}}, headers=headers
        )
        assert put.json() == {"theme": {"mode": "dark"}}

        one = await async_client.get(f"{base}/theme", headers=headers)
        assert one.json() == {"key": "theme", "value": {"mode": "dark"}}

        assert (await async_client.delete(f"{base}/theme", headers=headers)).status_code == 204
        assert (await async_client.get(base, headers=headers)).json() == {}

    @pytest.mark.asyncio
    async def test_delete_missing_key(self, async_client: AsyncClient, make_user: Any) -> None:
        user, headers = await make_user("subscriber")

        response = await async_client.delete(
            f"/api/v1/users/{user.id}/meta/nope", headers=headers
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Meta key 'nope' not found"

    @pytest.mark.asyncio
    async def test_other_users_meta_forbidden(
        self, async_client: AsyncClient, make_user: Any
    ) -> None:
        other, _ = await make_user("subscriber")
        _, headers = await make_user("editor")

        response = await async_client.get(f"/api/v1/users/{other.id}/meta", headers=headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "Access denied: Can only manage your own meta"

    @pytest.mark.asyncio
    async def test_admin_manages_any_meta(
        self, async_client: AsyncClient, make_user: Any, admin_headers: dict[str, str]
    ) -> None:
        other, _ = await make_user("subscriber")

        response = await async_client.put(
            f"/api/v1/users/{other.id}/meta/flag", json={"value": True}, headers=admin_headers
        )

        assert response.json() == {"flag": True}


class TestRoles:
    """Tests for /api/v1/roles."""

    @pytest.mark.asyncio
    async def test_list_roles(
        self, async_client: AsyncClient, subscriber_headers: dict[str, str]
    ) -> None:
        response = await async_client.get("/api/v1/roles", headers=subscriber_headers)

        assert [r["slug"] for r in response.json()] == ["administrator", "editor", "subscriber"]

    @pytest.mark.asyncio
    async def test_get_role(
        self, async_client: AsyncClient, subscriber_headers: dict[str, str]
    ) -> None:
        response = await async_client.get("/api/v1/roles/editor", headers=subscriber_headers)

        data = response.json()
        assert "edit_posts" in data["permissions"]
        assert "manage_users" not in data["permissions"]

    @pytest.mark.asyncio
    async def test_requires_authentication(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/v1/roles")

        assert response.status_code == 401
