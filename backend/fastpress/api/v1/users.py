"""Users API router.

Signed-in users manage their own profile and meta; everything else is
reserved for administrators.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.auth import UserInfo, get_current_user, require_role
from fastpress.core.database import get_session
from fastpress.core.roles import ADMINISTRATOR
from fastpress.schemas.user import (
    AdminUserUpdate,
    ProfileUpdate,
    RoleAssign,
    UserListResponse,
    UserMetaSet,
    UserResponse,
)
from fastpress.services.role import RoleService
from fastpress.services.user import UserService

router = APIRouter(prefix="/users", tags=["Users"])

admin_only = [Depends(require_role(ADMINISTRATOR))]


def _check_self_or_admin(user: UserInfo, user_id: str) -> None:
    if user.id != user_id and not user.has_role(ADMINISTRATOR):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: Can only manage your own meta",
        )


@router.get("/me", response_model=UserResponse)
async def get_me(
    db: AsyncSession = Depends(get_session),
    user: UserInfo = Depends(get_current_user),
) -> UserResponse:
    """The signed-in user with profile and role."""
    return await UserService.to_response(db, await UserService.get_user(db, user.id))


@router.patch("/me", response_model=UserResponse)
async def update_me(
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_session),
    user: UserInfo = Depends(get_current_user),
) -> UserResponse:
    """Update one's own profile."""
    updated = await UserService.update_profile(db, user.id, data)
    return await UserService.to_response(db, updated)


@router.get("", response_model=UserListResponse, dependencies=admin_only)
async def list_users(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
) -> UserListResponse:
    """List users newest first."""
    return await UserService.list_users(db, limit, offset)


@router.get("/{user_id}", response_model=UserResponse, dependencies=admin_only)
async def get_user(user_id: str, db: AsyncSession = Depends(get_session)) -> UserResponse:
    """Get any user."""
    return await UserService.to_response(db, await UserService.get_user(db, user_id))


@router.patch("/{user_id}", response_model=UserResponse, dependencies=admin_only)
async def update_user(
    user_id: str,
    data: AdminUserUpdate,
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Update any user's profile, including email.

    Raises:
        HTTPException: 409 if the new email belongs to someone else.
    """
    updated = await UserService.update_profile(db, user_id, data)
    return await UserService.to_response(db, updated)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    db: AsyncSession = Depends(get_session),
    user: UserInfo = Depends(require_role(ADMINISTRATOR)),
) -> None:
    """Delete a user. Administrators cannot delete themselves."""
    await UserService.delete_user(db, user_id, acting_user_id=user.id)


@router.put("/{user_id}/role", response_model=UserResponse, dependencies=admin_only)
async def assign_role(
    user_id: str,
    data: RoleAssign,
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Assign a role to a user."""
    updated = await RoleService.assign_role(db, user_id, data.role)
    return await UserService.to_response(db, updated)


@router.get("/{user_id}/meta")
async def get_all_meta(
    user_id: str,
    db: AsyncSession = Depends(get_session),
    user: UserInfo = Depends(get_current_user),
) -> dict[str, Any]:
    """All meta values of a user."""
    _check_self_or_admin(user, user_id)
    return await UserService.get_all_meta(db, user_id)


@router.get("/{user_id}/meta/{key}")
async def get_meta(
    user_id: str,
    key: str,
    db: AsyncSession = Depends(get_session),
    user: UserInfo = Depends(get_current_user),
) -> dict[str, Any]:
    """One meta value; `value` is null when unset."""
    _check_self_or_admin(user, user_id)
    return {"key": key, "value": await UserService.get_meta(db, user_id, key)}


@router.put("/{user_id}/meta/{key}")
async def set_meta(
    user_id: str,
    key: str,
    data: UserMetaSet,
    db: AsyncSession = Depends(get_session),
    user: UserInfo = Depends(get_current_user),
) -> dict[str, Any]:
    """Set a meta value and return the full meta dict."""
    _check_self_or_admin(user, user_id)
    return await UserService.set_meta(db, user_id, key, data.value)


@router.delete("/{user_id}/meta/{key}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meta(
    user_id: str,
    key: str,
    db: AsyncSession = Depends(get_session),
    user: UserInfo = Depends(get_current_user),
) -> None:
    """Remove a meta key.

    Raises:
        HTTPException: 404 if the key is not set.
    """
    _check_self_or_admin(user, user_id)
    if not await UserService.delete_meta(db, user_id, key):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Meta key '{key}' not found",
        )
