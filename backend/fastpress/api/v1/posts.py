"""Posts API router.

REST endpoints for listing, reading, searching, creating, updating and deleting
posts. Readers without `read_private_posts` only ever see published posts.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.auth import UserInfo, get_optional_user, require_permission
from fastpress.core.database import get_session
from fastpress.core.roles import DELETE_POSTS, EDIT_POSTS
from fastpress.schemas.comment import CommentCountResponse, CommentThreadResponse
from fastpress.schemas.post import (
    PostCreate,
    PostListResponse,
    PostResponse,
    PostSummary,
    PostUpdate,
)
from fastpress.services.comment import CommentService
from fastpress.services.post import PostService

router = APIRouter(prefix="/posts", tags=["Posts"])


@router.get("", response_model=PostListResponse)
async def list_posts(
    status_filter: str | None = Query(None, alias="status"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
    viewer: UserInfo | None = Depends(get_optional_user),
) -> PostListResponse:
    """List posts newest first.

    Anonymous visitors and subscribers only receive published posts.
    """
    posts, total = await PostService.list_posts(db, viewer, status_filter, limit, offset)
    return PostListResponse(
        items=await PostService.to_response_list(db, posts),
        total=total,
        limit=limit,
        offset=offset,
        has_more=offset + len(posts) < total,
    )


@router.get("/search", response_model=list[PostSummary])
async def search_posts(
    q: str = Query(..., min_length=1, max_length=200),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_session),
) -> list[PostSummary]:
    """Search published posts by title or content."""
    posts = await PostService.search_posts(db, q, limit)
    return [PostSummary.model_validate(p) for p in posts]


@router.get("/slug/{slug}", response_model=PostResponse)
async def get_post_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_session),
    viewer: UserInfo | None = Depends(get_optional_user),
) -> PostResponse:
    """Get a post by its slug."""
    post = await PostService.get_by_slug(db, slug, viewer)
    return await PostService.to_response(db, post)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    db: AsyncSession = Depends(get_session),
    viewer: UserInfo | None = Depends(get_optional_user),
) -> PostResponse:
    """Get a post by ID."""
    post = await PostService.get_visible_post(db, post_id, viewer)
    return await PostService.to_response(db, post)


@router.get("/{post_id}/related", response_model=list[PostSummary])
async def get_related_posts(
    post_id: str,
    limit: int = Query(5, ge=1, le=20),
    db: AsyncSession = Depends(get_session),
) -> list[PostSummary]:
    """Published posts sharing the most categories and tags with this post."""
    posts = await PostService.related_posts(db, post_id, limit)
    return [PostSummary.model_validate(p) for p in posts]


@router.get("/{post_id}/comments", response_model=CommentThreadResponse)
async def list_post_comments(
    post_id: str,
    db: AsyncSession = Depends(get_session),
    viewer: UserInfo | None = Depends(get_optional_user),
) -> CommentThreadResponse:
    """Approved comments of a post as a reply tree."""
    await PostService.get_visible_post(db, post_id, viewer)
    threads = await CommentService.list_for_post(db, post_id)
    total = await CommentService.approved_count(db, post_id)
    return CommentThreadResponse(items=threads, total=total)


@router.get("/{post_id}/comments/count", response_model=CommentCountResponse)
async def count_post_comments(
    post_id: str,
    db: AsyncSession = Depends(get_session),
) -> CommentCountResponse:
    """Number of approved comments on a post."""
    return CommentCountResponse(
        post_id=post_id, count=await CommentService.approved_count(db, post_id)
    )


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    data: PostCreate,
    db: AsyncSession = Depends(get_session),
    user: UserInfo = Depends(require_permission(EDIT_POSTS)),
) -> PostResponse:
    """Create a post authored by the current user.

    Raises:
        HTTPException: 403 when publishing without `publish_posts`.
        HTTPException: 404 for unknown category ids.
        HTTPException: 409 if an explicit slug is taken.
    """
    post = await PostService.create_post(db, data, user)
    return await PostService.to_response(db, post)


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    data: PostUpdate,
    db: AsyncSession = Depends(get_session),
    user: UserInfo = Depends(require_permission(EDIT_POSTS)),
) -> PostResponse:
    """Update a post."""
    post = await PostService.update_post(db, post_id, data, user)
    return await PostService.to_response(db, post)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_permission(DELETE_POSTS))],
)
async def delete_post(
    post_id: str,
    db: AsyncSession = Depends(get_session),
) -> None:
    """Delete a post with its comments and SEO analysis."""
    await PostService.delete_post(db, post_id)
