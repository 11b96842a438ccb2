"""Tests for Bearer session authentication and user profile defaults."""

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.models.role import Role
from fastpress.models.user import AuthSession, User
from fastpress.services.user import UserService, login_base


class TestSessions:
    """Tests for resolving Bearer tokens to users."""

    @pytest.mark.asyncio
    async def test_expired_session(
        self,
        async_client: AsyncClient,
        db_session: AsyncSession,
        roles: dict[str, Role],
    ) -> None:
        user = User(email="old@example.com", user_login="old", role_id=roles["editor"].id)
        db_session.add(user)
        await db_session.flush()
        session = AuthSession(user_id=user.id, expires_at=datetime.now(UTC) - timedelta(minutes=1))
        db_session.add(session)
        await db_session.commit()

        response = await async_client.get(
            "/api/v1/users/me", headers={"Authorization": f"Bearer {session.id}"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Session expired"

    @pytest.mark.asyncio
    async def test_user_without_role(self, async_client: AsyncClient, make_user: Any) -> None:
        _, headers = await make_user(None)

        response = await async_client.post(
            "/api/v1/posts", json={"title": "X"}, headers=headers
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "Access denied: No role assigned"

    @pytest.mark.asyncio
    async def test_anonymous_reads_allowed(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/v1/pages")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_malformed_header(self, async_client: AsyncClient) -> None:
        response = await async_client.get(
            "/api/v1/users/me", headers={"Authorization": "Token abc"}
        )

        assert response.status_code == 401


class TestLogins:
    @pytest.mark.parametrize(
        ("name", "email", "expected"),
        [
            ("Jane Doe", "x@example.com", "janedoe"),
            (None, "John.Smith@example.com", "johnsmith"),
            ("", "---@example.com", "user"),
        ],
    )
    def test_login_base(self, name: str | None, email: str, expected: str) -> None:
        assert login_base(name, email) == expected

    @pytest.mark.asyncio
    async def test_unique_login_appends_counter(self, db_session: AsyncSession) -> None:
        db_session.add_all(
            [
                User(email="a@example.com", user_login="jane"),
                User(email="b@example.com", user_login="jane1"),
            ]
        )
        await db_session.flush()

        assert await UserService.unique_login(db_session, "jane") == "jane2"
        assert await UserService.unique_login(db_session, "john") == "john"

    @pytest.mark.asyncio
    async def test_ensure_profile_fills_defaults(self, db_session: AsyncSession) -> None:
        user = User(email="jane.doe@example.com")
        db_session.add(user)
        await db_session.flush()

        await UserService.ensure_profile(db_session, user)

        assert user.user_login == "janedoe"
        assert user.user_nicename == "janedoe"
        assert user.display_name == "janedoe"
        role = await db_session.get(Role, user.role_id)
        assert role is not None
        assert role.slug == "subscriber"

    @pytest.mark.asyncio
    async def test_ensure_profile_is_idempotent(self, db_session: AsyncSession) -> None:
        user = User(email="x@example.com", user_login="existing", display_name="Kept")
        db_session.add(user)
        await db_session.flush()

        await UserService.ensure_profile(db_session, user)

        assert user.user_login == "existing"
        assert user.role_id is None
