"""Roles API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.auth import get_current_user
from fastpress.core.database import get_session
from fastpress.schemas.user import RoleResponse
from fastpress.services.role import RoleService

router = APIRouter(
    prefix="/roles",
    tags=["Roles"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=list[RoleResponse])
async def list_roles(db: AsyncSession = Depends(get_session)) -> list[RoleResponse]:
    """List all roles ordered by name."""
    return [RoleResponse.model_validate(r) for r in await RoleService.list_roles(db)]


@router.get("/{slug}", response_model=RoleResponse)
async def get_role(slug: str, db: AsyncSession = Depends(get_session)) -> RoleResponse:
    """Get a role by slug."""
    return RoleResponse.model_validate(await RoleService.get_role(db, slug))
