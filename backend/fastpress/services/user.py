"""User service: profile provisioning, profile edits and user meta.

Profiles are created lazily the first time a user signs in: a unique
WordPress-style login is derived from the name (or the email local part)
and the subscriber role is assigned.
"""

import re
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import flag_modified

from fastpress.core.logging import get_logger
from fastpress.core.roles import DEFAULT_ROLE_SLUG
from fastpress.models.role import Role
from fastpress.models.user import AuthSession, User
from fastpress.schemas.user import (
    AdminUserUpdate,
    ProfileUpdate,
    RoleResponse,
    UserListResponse,
    UserResponse,
)
from fastpress.services.role import RoleService

logger = get_logger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def login_base(name: str | None, email: str) -> str:
    """Derive the login stem from a name or the email local part."""
    source = name if name else email.split("@")[0]
    return _NON_ALNUM.sub("", source.lower()) or "user"


class UserService:
    """Service class for User and profile operations."""

    @staticmethod
    async def unique_login(db: AsyncSession, base: str) -> str:
        """Return `base`, or `base1`, `base2`... whichever is unused."""
        login = base
        counter = 1
        while True:
            result = await db.execute(select(User.id).where(User.user_login == login))
            if result.first() is None:
                return login
            login = f"{base}{counter}"
            counter += 1

    @staticmethod
    async def ensure_profile(db: AsyncSession, user: User) -> User:
        """Fill in profile fields and the default role if missing.

        Idempotent: a user that already has a login is returned as is.
        """
        if user.user_login:
            return user

        login = await UserService.unique_login(db, login_base(user.name, user.email))
        user.user_login = login
        user.user_nicename = login
        user.display_name = user.display_name or user.name or login

        if user.role_id is None:
            role = await RoleService.get_or_seed(db, DEFAULT_ROLE_SLUG)
            user.role_id = role.id

        await db.flush()
        logger.info(
            "Created user profile",
            extra={"user_id": user.id, "user_login": login},
        )
        return user

    @staticmethod
    async def get_user(db: AsyncSession, user_id: str) -> User:
        """Get a user by ID.

        Raises:
            HTTPException: 404 if user not found.
        """
        user = await db.get(User, user_id)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"User with id '{user_id}' not found",
            )
        return user

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """Get a user by email (case-insensitive), or None."""
        result = await db.execute(select(User).where(User.email == email.strip().lower()))
        return result.scalar_one_or_none()

    @staticmethod
    async def list_users(
        db: AsyncSession, limit: int = 20, offset: int = 0
    ) -> UserListResponse:
        """List users newest first with total count."""
        total = (await db.execute(select(func.count(User.id)))).scalar_one()
        result = await db.execute(
            select(User).order_by(User.created_at.desc()).limit(limit).offset(offset)
        )
        users = list(result.scalars().all())
        return UserListResponse(
            users=await UserService.to_response_list(db, users),
            total=total,
            has_more=offset + len(users) < total,
        )

    @staticmethod
    async def update_profile(
        db: AsyncSession, user_id: str, data: ProfileUpdate | AdminUserUpdate
    ) -> User:
        """Update profile fields on a user.

        Raises:
            HTTPException: 404 if user not found, 409 if the new email is taken.
        """
        user = await UserService.get_user(db, user_id)

        update_data = data.model_dump(exclude_unset=True)
        new_email = update_data.get("email")
        if new_email and new_email != user.email:
            existing = await UserService.get_by_email(db, new_email)
            if existing is not None:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Email '{new_email}' is already in use",
                )

        for field, value in update_data.items():
            if field == "email" and value is None:
                continue
            setattr(user, field, value)

        await db.flush()
        return user

    @staticmethod
    async def delete_user(db: AsyncSession, user_id: str, acting_user_id: str) -> None:
        """Delete a user and their sessions.

        Raises:
            HTTPException: 400 when deleting oneself, 404 if user not found.
        """
        if user_id == acting_user_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete your own account",
            )
        user = await UserService.get_user(db, user_id)
        await db.execute(delete(AuthSession).where(AuthSession.user_id == user_id))
        await db.delete(user)
        await db.flush()
        logger.info("User deleted", extra={"user_id": user_id})

    # ------------------------------------------------------------------
    # User meta
    # ------------------------------------------------------------------

    @staticmethod
    async def get_meta(db: AsyncSession, user_id: str, key: str) -> Any:
        """Get one meta value, or None when unset."""
        user = await UserService.get_user(db, user_id)
        return (user.meta or {}).get(key)

    @staticmethod
    async def get_all_meta(db: AsyncSession, user_id: str) -> dict[str, Any]:
        """Get every meta value of a user."""
        user = await UserService.get_user(db, user_id)
        return dict(user.meta or {})

    @staticmethod
    async def set_meta(db: AsyncSession, user_id: str, key: str, value: Any) -> dict[str, Any]:
        """Set a meta value, returning the full meta dict."""
        user = await UserService.get_user(db, user_id)
        meta = dict(user.meta or {})
        meta[key] = value
        user.meta = meta
        flag_modified(user, "meta")
        await db.flush()
        return meta

    @staticmethod
    async def delete_meta(db: AsyncSession, user_id: str, key: str) -> bool:
        """Remove a meta key. Returns False when the key was not set."""
        user = await UserService.get_user(db, user_id)
        meta = dict(user.meta or {})
        if key not in meta:
            return False
        del meta[key]
        user.meta = meta
        flag_modified(user, "meta")
        await db.flush()
        return True

    # ------------------------------------------------------------------
    # Response conversion
    # ------------------------------------------------------------------

    @staticmethod
    async def to_response(db: AsyncSession, user: User) -> UserResponse:
        """Convert a User to UserResponse with its role stitched in."""
        role = await db.get(Role, user.role_id) if user.role_id else None
        response = UserResponse.model_validate(user)
        response.role = RoleResponse.model_validate(role) if role else None
        return response

    @staticmethod
    async def to_response_list(db: AsyncSession, users: list[User]) -> list[UserResponse]:
        """Convert users to responses, loading each role once."""
        role_ids = {u.role_id for u in users if u.role_id}
        roles: dict[str, Role] = {}
        if role_ids:
            result = await db.execute(select(Role).where(Role.id.in_(role_ids)))
            roles = {r.id: r for r in result.scalars().all()}

        responses = []
        for user in users:
            response = UserResponse.model_validate(user)
            role = roles.get(user.role_id) if user.role_id else None
            response.role = RoleResponse.model_validate(role) if role else None
            responses.append(response)
        return responses
