"""Pages API router.

Hierarchical pages with block layouts. Reads are public for published pages;
writes require `manage_pages`.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.auth import UserInfo, get_optional_user, require_permission
from fastpress.core.database import get_session
from fastpress.core.roles import MANAGE_PAGES
from fastpress.schemas.page import (
    PageCreate,
    PageDetailResponse,
    PageListResponse,
    PageResponse,
    PageSummary,
    PageTreeNode,
    PageUpdate,
)
from fastpress.services.page import PageService

router = APIRouter(prefix="/pages", tags=["Pages"])


@router.get("", response_model=PageListResponse)
async def list_pages(
    status_filter: str | None = Query(None, alias="status"),
    parent_id: str | None = Query(None),
    roots_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_session),
    viewer: UserInfo | None = Depends(get_optional_user),
) -> PageListResponse:
    """List pages ordered by menu order, with parent summary and child count."""
    items = await PageService.list_pages(db, viewer, status_filter, parent_id, roots_only, limit)
    return PageListResponse(items=items, total=len(items))


@router.get("/tree", response_model=list[PageTreeNode])
async def get_page_tree(
    statuses: list[str] | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_session),
    viewer: UserInfo | None = Depends(get_optional_user),
) -> list[PageTreeNode]:
    """Page hierarchy. Only editors may ask for non-published statuses."""
    if viewer is None or not viewer.can_read_private:
        statuses = None
    return await PageService.get_tree(db, statuses)


@router.get("/slug/{slug}", response_model=PageDetailResponse)
async def get_page_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_session),
    viewer: UserInfo | None = Depends(get_optional_user),
) -> PageDetailResponse:
    """Get a page with its author, parent and child pages."""
    page = await PageService.get_by_slug(db, slug, viewer)
    return await PageService.get_detail(db, page, viewer)


@router.get("/{page_id}", response_model=PageDetailResponse)
async def get_page(
    page_id: str,
    db: AsyncSession = Depends(get_session),
    user: UserInfo = Depends(require_permission(MANAGE_PAGES)),
) -> PageDetailResponse:
    """Get any page by ID for editing."""
    page = await PageService.get_page(db, page_id)
    return await PageService.get_detail(db, page, user)


@router.get("/{page_id}/breadcrumbs", response_model=list[PageSummary])
async def get_breadcrumbs(
    page_id: str,
    db: AsyncSession = Depends(get_session),
    viewer: UserInfo | None = Depends(get_optional_user),
) -> list[PageSummary]:
    """Ancestors of a page from the root down to the page itself."""
    return await PageService.breadcrumbs(db, page_id, viewer)


@router.post("", response_model=PageResponse, status_code=status.HTTP_201_CREATED)
async def create_page(
    data: PageCreate,
    db: AsyncSession = Depends(get_session),
    user: UserInfo = Depends(require_permission(MANAGE_PAGES)),
) -> PageResponse:
    """Create a page.

    Raises:
        HTTPException: 422 with per-block errors when the layout is invalid.
    """
    page = await PageService.create_page(db, data, user)
    return PageResponse.model_validate(page)


@router.patch(
    "/{page_id}",
    response_model=PageResponse,
    dependencies=[Depends(require_permission(MANAGE_PAGES))],
)
async def update_page(
    page_id: str,
    data: PageUpdate,
    db: AsyncSession = Depends(get_session),
) -> PageResponse:
    """Update a page. Parent changes that would create a cycle are rejected."""
    page = await PageService.update_page(db, page_id, data)
    return PageResponse.model_validate(page)


@router.post(
    "/{page_id}/duplicate",
    response_model=PageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def duplicate_page(
    page_id: str,
    db: AsyncSession = Depends(get_session),
    user: UserInfo = Depends(require_permission(MANAGE_PAGES)),
) -> PageResponse:
    """Copy a page as a new draft."""
    page = await PageService.duplicate_page(db, page_id, user)
    return PageResponse.model_validate(page)


@router.delete(
    "/{page_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_permission(MANAGE_PAGES))],
)
async def delete_page(page_id: str, db: AsyncSession = Depends(get_session)) -> None:
    """Delete a page without child pages."""
    await PageService.delete_page(db, page_id)
