"""Pydantic schemas for comments."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

VALID_COMMENT_STATUSES = frozenset({"pending", "approved", "spam"})


class CommentCreate(BaseModel):
    """Schema for a visitor submitting a comment."""

    post_id: str = Field(..., description="UUID of the commented post")
    parent_id: str | None = Field(None, description="UUID of the comment being replied to")
    author_name: str = Field(..., max_length=255)
    author_email: str = Field(..., max_length=320)
    author_url: str | None = Field(None, max_length=2048)
    content: str = Field(..., max_length=10000)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        """Strip and reject empty comments."""
        v = v.strip()
        if not v:
            raise ValueError("Comment content cannot be empty")
        return v

    @field_validator("author_name")
    @classmethod
    def validate_author_name(cls, v: str) -> str:
        """Strip and require an author name."""
        v = v.strip()
        if not v:
            raise ValueError("Author name is required")
        return v

    @field_validator("author_email")
    @classmethod
    def validate_author_email(cls, v: str) -> str:
        """Normalize the email and require an @."""
        v = v.strip().lower()
        if not v or "@" not in v:
            raise ValueError("Valid email is required")
        return v

    @field_validator("author_url")
    @classmethod
    def validate_author_url(cls, v: str | None) -> str | None:
        """Treat blank URLs as absent."""
        if v is None:
            return v
        return v.strip() or None


class CommentResponse(BaseModel):
    """Public comment representation (no email, IP or user agent)."""

    id: str
    post_id: str
    parent_id: str | None = None
    author_name: str
    author_url: str | None = None
    content: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentThread(CommentResponse):
    """Approved comment with nested replies."""

    replies: list["CommentThread"] = Field(default_factory=list)


class CommentThreadResponse(BaseModel):
    """Threaded comments of a post."""

    items: list[CommentThread]
    total: int


class CommentPostSummary(BaseModel):
    """Post reference shown in moderation lists."""

    id: str
    title: str
    slug: str

    model_config = ConfigDict(from_attributes=True)


class CommentParentSummary(BaseModel):
    """Parent comment reference shown in moderation lists."""

    id: str
    author_name: str
    content: str

    model_config = ConfigDict(from_attributes=True)


class CommentAdminResponse(CommentResponse):
    """Comment with moderation details."""

    author_email: str
    user_agent: str | None = None
    ip_address: str | None = None
    post: CommentPostSummary | None = None
    parent: CommentParentSummary | None = None


class CommentAdminListResponse(BaseModel):
    """Moderation list."""

    items: list[CommentAdminResponse]
    total: int


class CommentCountResponse(BaseModel):
    """Approved comment count of a post."""

    post_id: str
    count: int
