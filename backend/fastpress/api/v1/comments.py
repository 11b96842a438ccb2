"""Comments API router.

Visitors submit comments publicly; moderation endpoints require
`moderate_comments`.
"""

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.auth import require_permission
from fastpress.core.database import get_session
from fastpress.core.roles import MODERATE_COMMENTS
from fastpress.schemas.comment import (
    VALID_COMMENT_STATUSES,
    CommentAdminListResponse,
    CommentCreate,
    CommentResponse,
)
from fastpress.services.comment import CommentService

router = APIRouter(prefix="/comments", tags=["Comments"])

moderator = [Depends(require_permission(MODERATE_COMMENTS))]


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    data: CommentCreate,
    request: Request,
    db: AsyncSession = Depends(get_session),
) -> CommentResponse:
    """Submit a comment. New comments wait for moderation.

    Raises:
        HTTPException: 403 when comments are disabled site-wide.
        HTTPException: 404 if the post or parent comment does not exist.
    """
    comment = await CommentService.create_comment(
        db,
        data,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return CommentResponse.model_validate(comment)


@router.get("", response_model=CommentAdminListResponse, dependencies=moderator)
async def list_comments(
    status_filter: str | None = Query(
        None, alias="status", pattern="^(" + "|".join(sorted(VALID_COMMENT_STATUSES)) + ")$"
    ),
    post_id: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
) -> CommentAdminListResponse:
    """Moderation queue, newest first."""
    items, total = await CommentService.list_for_admin(db, status_filter, post_id, limit, offset)
    return CommentAdminListResponse(items=items, total=total)


@router.post("/{comment_id}/approve", response_model=CommentResponse, dependencies=moderator)
async def approve_comment(
    comment_id: str, db: AsyncSession = Depends(get_session)
) -> CommentResponse:
    """Approve a comment."""
    return CommentResponse.model_validate(await CommentService.approve(db, comment_id))


@router.post("/{comment_id}/spam", response_model=CommentResponse, dependencies=moderator)
async def mark_comment_spam(
    comment_id: str, db: AsyncSession = Depends(get_session)
) -> CommentResponse:
    """Mark a comment as spam."""
    return CommentResponse.model_validate(await CommentService.mark_spam(db, comment_id))


@router.delete(
    "/{comment_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=moderator
)
async def delete_comment(comment_id: str, db: AsyncSession = Depends(get_session)) -> None:
    """Delete a comment without replies."""
    await CommentService.delete_comment(db, comment_id)
