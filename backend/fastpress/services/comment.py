"""Comment service: submission, threading and moderation.

New comments always start as pending. Only approved comments are shown
publicly, as a tree ordered oldest first within each level.
"""

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.logging import get_logger
from fastpress.models.comment import Comment, CommentStatus
from fastpress.models.post import ContentStatus, Post
from fastpress.schemas.comment import (
    CommentAdminResponse,
    CommentCreate,
    CommentParentSummary,
    CommentPostSummary,
    CommentThread,
)
from fastpress.services.site_settings import SiteSettingsService

logger = get_logger(__name__)

PUBLIC_THREAD_LIMIT = 100
ADMIN_LIST_LIMIT = 50


class CommentService:
    """Service class for Comment operations."""

    @staticmethod
    async def create_comment(
        db: AsyncSession,
        data: CommentCreate,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Comment:
        """Submit a comment for moderation.

        Raises:
            HTTPException: 403 when comments are disabled, 404 if the post
                (or parent comment) is missing, 400 if the parent belongs to
                another post.
        """
        if not await SiteSettingsService.comments_enabled(db):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Comments are disabled",
            )

        post = await db.get(Post, data.post_id)
        if post is None or post.status != ContentStatus.PUBLISHED.value:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Post not found",
            )

        if data.parent_id is not None:
            parent = await db.get(Comment, data.parent_id)
            if parent is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Parent comment not found",
                )
            if parent.post_id != data.post_id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Parent comment belongs to a different post",
                )

        comment = Comment(
            post_id=data.post_id,
            parent_id=data.parent_id,
            author_name=data.author_name,
            author_email=data.author_email,
            author_url=data.author_url,
            content=data.content,
            status=CommentStatus.PENDING.value,
            ip_address=ip_address,
            user_agent=user_agent[:1024] if user_agent else None,
        )
        db.add(comment)
        await db.flush()

        logger.info(
            "Comment submitted",
            extra={"comment_id": comment.id, "post_id": data.post_id},
        )
        return comment

    @staticmethod
    async def get_comment(db: AsyncSession, comment_id: str) -> Comment:
        """Get a comment by ID.

        Raises:
            HTTPException: 404 if comment not found.
        """
        comment = await db.get(Comment, comment_id)
        if comment is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Comment with id '{comment_id}' not found",
            )
        return comment

    @staticmethod
    async def list_for_post(
        db: AsyncSession, post_id: str, limit: int = PUBLIC_THREAD_LIMIT
    ) -> list[CommentThread]:
        """Approved comments of a post as a reply tree, oldest first.

        Replies whose parent is not approved are dropped with it.
        """
        result = await db.execute(
            select(Comment)
            .where(
                Comment.post_id == post_id,
                Comment.status == CommentStatus.APPROVED.value,
            )
            .order_by(Comment.created_at.asc())
            .limit(limit)
        )
        comments = list(result.scalars().all())
        return build_thread(comments)

    @staticmethod
    async def list_for_admin(
        db: AsyncSession,
        status_filter: str | None = None,
        post_id: str | None = None,
        limit: int = ADMIN_LIST_LIMIT,
        offset: int = 0,
    ) -> tuple[list[CommentAdminResponse], int]:
        """Moderation queue, newest first, with post and parent summaries."""
        stmt = select(Comment)
        if status_filter is not None:
            stmt = stmt.where(Comment.status == status_filter)
        if post_id is not None:
            stmt = stmt.where(Comment.post_id == post_id)

        total = (
            await db.execute(select(func.count()).select_from(stmt.subquery()))
        ).scalar_one()
        result = await db.execute(
            stmt.order_by(Comment.created_at.desc()).limit(limit).offset(offset)
        )
        comments = list(result.scalars().all())

        post_ids = {c.post_id for c in comments}
        posts: dict[str, Post] = {}
        if post_ids:
            rows = await db.execute(select(Post).where(Post.id.in_(post_ids)))
            posts = {p.id: p for p in rows.scalars().all()}

        parent_ids = {c.parent_id for c in comments if c.parent_id}
        parents: dict[str, Comment] = {}
        if parent_ids:
            rows = await db.execute(select(Comment).where(Comment.id.in_(parent_ids)))
            parents = {c.id: c for c in rows.scalars().all()}

        items = []
        for comment in comments:
            item = CommentAdminResponse.model_validate(comment)
            post = posts.get(comment.post_id)
            item.post = CommentPostSummary.model_validate(post) if post else None
            parent = parents.get(comment.parent_id) if comment.parent_id else None
            item.parent = CommentParentSummary.model_validate(parent) if parent else None
            items.append(item)
        return items, total

    @staticmethod
    async def set_status(db: AsyncSession, comment_id: str, new_status: CommentStatus) -> Comment:
        """Change a comment's moderation status."""
        comment = await CommentService.get_comment(db, comment_id)
        previous = comment.status
        comment.status = new_status.value
        await db.flush()
        logger.info(
            "Comment status changed",
            extra={"comment_id": comment_id, "from": previous, "to": new_status.value},
        )
        return comment

    @staticmethod
    async def approve(db: AsyncSession, comment_id: str) -> Comment:
        """Approve a comment."""
        return await CommentService.set_status(db, comment_id, CommentStatus.APPROVED)

    @staticmethod
    async def mark_spam(db: AsyncSession, comment_id: str) -> Comment:
        """Mark a comment as spam."""
        return await CommentService.set_status(db, comment_id, CommentStatus.SPAM)

    @staticmethod
    async def delete_comment(db: AsyncSession, comment_id: str) -> None:
        """Delete a comment that has no replies.

        Raises:
            HTTPException: 404 if not found, 409 when replies exist.
        """
        comment = await CommentService.get_comment(db, comment_id)
        reply_count = (
            await db.execute(
                select(func.count(Comment.id)).where(Comment.parent_id == comment_id)
            )
        ).scalar_one()
        if reply_count:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Cannot delete comment with replies",
            )
        await db.delete(comment)
        await db.flush()

    @staticmethod
    async def approved_count(db: AsyncSession, post_id: str) -> int:
        """Number of approved comments on a post."""
        result = await db.execute(
            select(func.count(Comment.id)).where(
                Comment.post_id == post_id,
                Comment.status == CommentStatus.APPROVED.value,
            )
        )
        return result.scalar_one()


def build_thread(comments: list[Comment]) -> list[CommentThread]:
    """Nest comments under their parents, preserving input order.

    Comments whose parent is absent from `comments` are dropped.
    """
    nodes = {c.id: CommentThread.model_validate(c) for c in comments}
    roots: list[CommentThread] = []
    for comment in comments:
        node = nodes[comment.id]
        if comment.parent_id is None:
            roots.append(node)
        elif comment.parent_id in nodes:
            nodes[comment.parent_id].replies.append(node)
    return roots
