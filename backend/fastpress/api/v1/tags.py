"""Tags API router."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.auth import require_permission
from fastpress.core.database import get_session
from fastpress.core.roles import MANAGE_CATEGORIES
from fastpress.schemas.taxonomy import TagCreate, TagResponse
from fastpress.services.tag import TagService

router = APIRouter(prefix="/tags", tags=["Tags"])


@router.get("", response_model=list[TagResponse])
async def list_tags(
    limit: int = Query(100, ge=1, le=1000),
    db: AsyncSession = Depends(get_session),
) -> list[TagResponse]:
    """List tags ordered by name."""
    return [TagResponse.model_validate(t) for t in await TagService.list_tags(db, limit)]


@router.get("/slug/{slug}", response_model=TagResponse)
async def get_tag_by_slug(slug: str, db: AsyncSession = Depends(get_session)) -> TagResponse:
    """Get a tag by slug."""
    return TagResponse.model_validate(await TagService.get_by_slug(db, slug))


@router.post(
    "",
    response_model=TagResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission(MANAGE_CATEGORIES))],
)
async def create_tag(data: TagCreate, db: AsyncSession = Depends(get_session)) -> TagResponse:
    """Create a tag."""
    return TagResponse.model_validate(await TagService.create_tag(db, data))


@router.delete(
    "/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_permission(MANAGE_CATEGORIES))],
)
async def delete_tag(tag_id: str, db: AsyncSession = Depends(get_session)) -> None:
    """Delete a tag and detach it from posts."""
    await TagService.delete_tag(db, tag_id)
