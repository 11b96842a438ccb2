"""Admin dashboard statistics."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.models.comment import Comment, CommentStatus
from fastpress.models.media import Media
from fastpress.models.page import Page
from fastpress.models.post import Post
from fastpress.schemas.dashboard import DashboardResponse, PostCounts
from fastpress.schemas.post import PostSummary

RECENT_POSTS = 5


class DashboardService:
    """Service class for dashboard aggregates."""

    @staticmethod
    async def get_stats(db: AsyncSession) -> DashboardResponse:
        """Content counts and the most recently created posts."""
        rows = await db.execute(select(Post.status, func.count(Post.id)).group_by(Post.status))
        counts = PostCounts()
        for post_status, count in rows.all():
            if post_status in ("draft", "published", "private"):
                setattr(counts, post_status, count)
            counts.total += count

        pages = (await db.execute(select(func.count(Page.id)))).scalar_one()
        pending = (
            await db.execute(
                select(func.count(Comment.id)).where(
                    Comment.status == CommentStatus.PENDING.value
                )
            )
        ).scalar_one()
        media = (await db.execute(select(func.count(Media.id)))).scalar_one()

        recent = await db.execute(
            select(Post).order_by(Post.created_at.desc()).limit(RECENT_POSTS)
        )
        return DashboardResponse(
            posts=counts,
            pages=pages,
            pending_comments=pending,
            media=media,
            recent_posts=[PostSummary.model_validate(p) for p in recent.scalars().all()],
        )
