"""Authentication and authorization dependencies for FastAPI.

Validates Bearer session ids against the auth_sessions table written by the
auth provider. When AUTH_REQUIRED=false, every request runs as a built-in
development administrator.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.config import get_settings
from fastpress.core.database import get_session
from fastpress.core.logging import get_logger
from fastpress.core.roles import ADMINISTRATOR, READ_PRIVATE_POSTS
from fastpress.models.role import Role
from fastpress.models.user import AuthSession, User
from fastpress.services.role import RoleService
from fastpress.services.user import UserService

logger = get_logger(__name__)

DEV_USER_EMAIL = "dev@localhost"


@dataclass
class UserInfo:
    """Authenticated user information."""

    id: str
    email: str
    name: str | None
    role: str | None = None
    permissions: frozenset[str] = field(default_factory=frozenset)

    def has_permission(self, permission: str) -> bool:
        """Check if the user's role grants `permission`."""
        return permission in self.permissions

    def has_role(self, *roles: str) -> bool:
        """Check if the user holds one of `roles`."""
        return self.role is not None and self.role in roles

    @property
    def can_read_private(self) -> bool:
        """Whether drafts and private content are visible to this user."""
        return self.has_permission(READ_PRIVATE_POSTS)


async def _user_info(db: AsyncSession, user: User) -> UserInfo:
    """Build UserInfo from a User, provisioning the profile if needed."""
    await UserService.ensure_profile(db, user)
    role = await db.get(Role, user.role_id) if user.role_id else None
    return UserInfo(
        id=user.id,
        email=user.email,
        name=user.display_name or user.name,
        role=role.slug if role else None,
        permissions=frozenset(role.permissions or []) if role else frozenset(),
    )


async def _dev_user(db: AsyncSession) -> UserInfo:
    """Get or create the development administrator."""
    result = await db.execute(select(User).where(User.email == DEV_USER_EMAIL))
    user = result.scalar_one_or_none()
    if user is None:
        admin = await RoleService.get_or_seed(db, ADMINISTRATOR)
        user = User(email=DEV_USER_EMAIL, name="Dev User", role_id=admin.id)
        db.add(user)
        await db.flush()
    return await _user_info(db, user)


def _as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


async def _resolve_token(db: AsyncSession, session_id: str) -> UserInfo:
    """Validate a session id and return its user."""
    auth_session = await db.get(AuthSession, session_id)

    if auth_session is None:
        logger.warning("Session not found: %s...", session_id[:8])
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session not found",
        )

    if _as_utc(auth_session.expires_at) < datetime.now(UTC):
        logger.warning("Session expired at %s", auth_session.expires_at)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired",
        )

    user = await db.get(User, auth_session.user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session not found",
        )
    return await _user_info(db, user)


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header[7:]


async def get_current_user(
    request: Request, db: AsyncSession = Depends(get_session)
) -> UserInfo:
    """FastAPI dependency that validates the session token and returns the current user.

    When AUTH_REQUIRED=false, returns the dev administrator without checking headers.
    """
    settings = get_settings()

    if not settings.auth_required:
        return await _dev_user(db)

    session_id = _bearer_token(request)
    if session_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return await _resolve_token(db, session_id)


async def get_optional_user(
    request: Request, db: AsyncSession = Depends(get_session)
) -> UserInfo | None:
    """Like get_current_user, but anonymous requests yield None.

    A token that is present but invalid still fails with 401.
    """
    settings = get_settings()

    if not settings.auth_required:
        return await _dev_user(db)

    session_id = _bearer_token(request)
    if session_id is None:
        return None
    return await _resolve_token(db, session_id)


def require_permission(permission: str) -> Callable[..., Awaitable[UserInfo]]:
    """Dependency factory: the current user must hold `permission`.

    Usage:
        @router.post("", dependencies=[Depends(require_permission("edit_posts"))])
    """

    async def dependency(user: UserInfo = Depends(get_current_user)) -> UserInfo:
        if user.role is None:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied: No role assigned",
            )
        if not user.has_permission(permission):
            logger.warning(
                "Permission denied",
                extra={"user_id": user.id, "permission": permission, "role": user.role},
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied: Requires permission '{permission}'",
            )
        return user

    return dependency


def require_role(*roles: str) -> Callable[..., Awaitable[UserInfo]]:
    """Dependency factory: the current user must hold one of `roles`."""

    async def dependency(user: UserInfo = Depends(get_current_user)) -> UserInfo:
        if user.role is None:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied: No role assigned",
            )
        if not user.has_role(*roles):
            logger.warning(
                "Role check failed",
                extra={"user_id": user.id, "required": list(roles), "role": user.role},
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied: Requires one of: {', '.join(roles)}",
            )
        return user

    return dependency
