"""Role service: default role seeding, lookups and role assignment."""

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.logging import get_logger
from fastpress.core.roles import DEFAULT_ROLES
from fastpress.models.role import Role
from fastpress.models.user import User

logger = get_logger(__name__)


class RoleService:
    """Service class for Role operations."""

    @staticmethod
    async def seed_default_roles(db: AsyncSession) -> list[Role]:
        """Create any missing built-in role.

        Existing roles are left untouched so customised permission lists
        survive restarts.

        Returns:
            The roles that were created.
        """
        result = await db.execute(select(Role.slug))
        existing = set(result.scalars().all())

        created: list[Role] = []
        for slug, definition in DEFAULT_ROLES.items():
            if slug in existing:
                continue
            role = Role(
                slug=slug,
                name=str(definition["name"]),
                description=str(definition["description"]),
                permissions=list(definition["permissions"]),  # type: ignore[call-overload]
            )
            db.add(role)
            created.append(role)

        if created:
            await db.flush()
            logger.info(
                "Seeded default roles",
                extra={"roles": [role.slug for role in created]},
            )
        return created

    @staticmethod
    async def list_roles(db: AsyncSession) -> list[Role]:
        """List all roles ordered by name."""
        result = await db.execute(select(Role).order_by(Role.name))
        return list(result.scalars().all())

    @staticmethod
    async def get_by_slug(db: AsyncSession, slug: str) -> Role | None:
        """Get a role by slug, or None."""
        result = await db.execute(select(Role).where(Role.slug == slug))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_or_seed(db: AsyncSession, slug: str) -> Role:
        """Get a built-in role, seeding defaults first when it is missing."""
        role = await RoleService.get_by_slug(db, slug)
        if role is None:
            await RoleService.seed_default_roles(db)
            role = await RoleService.get_by_slug(db, slug)
        if role is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Role '{slug}' not found",
            )
        return role

    @staticmethod
    async def get_role(db: AsyncSession, slug: str) -> Role:
        """Get a role by slug.

        Raises:
            HTTPException: 404 if the role does not exist.
        """
        role = await RoleService.get_by_slug(db, slug)
        if role is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Role '{slug}' not found",
            )
        return role

    @staticmethod
    async def assign_role(db: AsyncSession, user_id: str, role_slug: str) -> User:
        """Assign a role to a user.

        Args:
            db: AsyncSession for database operations.
            user_id: UUID of the user.
            role_slug: Slug of the role to assign.

        Returns:
            The updated user.

        Raises:
            HTTPException: 404 if the user or role does not exist.
        """
        role = await RoleService.get_role(db, role_slug)

        user = await db.get(User, user_id)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"User with id '{user_id}' not found",
            )

        user.role_id = role.id
        await db.flush()

        logger.info(
            "Role assigned",
            extra={"user_id": user_id, "role": role_slug},
        )
        return user
