"""Categories API router."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.auth import require_permission
from fastpress.core.database import get_session
from fastpress.core.roles import MANAGE_CATEGORIES
from fastpress.schemas.post import CategoryDetailResponse, PostListResponse
from fastpress.schemas.taxonomy import CategoryCreate, CategoryResponse, CategoryUpdate
from fastpress.services.category import CategoryService
from fastpress.services.post import PostService

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    parent_id: str | None = Query(None, description="Only children of this category"),
    roots_only: bool = Query(False, description="Only top-level categories"),
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_session),
) -> list[CategoryResponse]:
    """List categories ordered by name."""
    categories = await CategoryService.list_categories(db, parent_id, roots_only, limit)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.get("/slug/{slug}", response_model=CategoryDetailResponse)
async def get_category_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_session),
) -> CategoryDetailResponse:
    """Get a category with its parent, children and latest posts."""
    return await CategoryService.get_detail(db, slug)


@router.get("/{category_id}/posts", response_model=PostListResponse)
async def list_category_posts(
    category_id: str,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
) -> PostListResponse:
    """Published posts in a category, newest first."""
    await CategoryService.get_category(db, category_id)
    posts, total = await CategoryService.list_posts(db, category_id, limit, offset)
    return PostListResponse(
        items=await PostService.to_response_list(db, posts),
        total=total,
        limit=limit,
        offset=offset,
        has_more=offset + len(posts) < total,
    )


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission(MANAGE_CATEGORIES))],
)
async def create_category(
    data: CategoryCreate,
    db: AsyncSession = Depends(get_session),
) -> CategoryResponse:
    """Create a category."""
    category = await CategoryService.create_category(db, data)
    return CategoryResponse.model_validate(category)


@router.patch(
    "/{category_id}",
    response_model=CategoryResponse,
    dependencies=[Depends(require_permission(MANAGE_CATEGORIES))],
)
async def update_category(
    category_id: str,
    data: CategoryUpdate,
    db: AsyncSession = Depends(get_session),
) -> CategoryResponse:
    """Update a category. A category cannot be moved under its own descendants."""
    category = await CategoryService.update_category(db, category_id, data)
    return CategoryResponse.model_validate(category)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_permission(MANAGE_CATEGORIES))],
)
async def delete_category(
    category_id: str,
    db: AsyncSession = Depends(get_session),
) -> None:
    """Delete a category without children."""
    await CategoryService.delete_category(db, category_id)
