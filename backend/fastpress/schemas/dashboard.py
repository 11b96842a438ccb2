"""Pydantic schemas for the admin dashboard."""

from pydantic import BaseModel, Field

from fastpress.schemas.post import PostSummary


class PostCounts(BaseModel):
    """Posts per status."""

    draft: int = 0
    published: int = 0
    private: int = 0
    total: int = 0


class DashboardResponse(BaseModel):
    """Site statistics for the admin home screen."""

    posts: PostCounts
    pages: int
    pending_comments: int
    media: int
    recent_posts: list[PostSummary] = Field(default_factory=list)
