"""Pydantic schemas for posts.

Defines request/response models for Post API endpoints with validation rules.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fastpress.schemas.taxonomy import CategoryResponse, CategorySummary, TagResponse
from fastpress.schemas.user import AuthorSummary

VALID_CONTENT_STATUSES = frozenset({"draft", "published", "private"})


def validate_content_status(v: str) -> str:
    """Validate a post/page status value."""
    if v not in VALID_CONTENT_STATUSES:
        raise ValueError(
            f"Invalid status '{v}'. Must be one of: {', '.join(sorted(VALID_CONTENT_STATUSES))}"
        )
    return v


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str = Field(..., min_length=1, max_length=500, description="Post title")
    slug: str | None = Field(None, max_length=255, description="URL slug (derived from title when omitted)")
    content: str = Field(default="", description="HTML content")
    excerpt: str | None = Field(None, description="Optional summary")
    status: str = Field(default="draft", description="draft, published or private")
    category_ids: list[str] = Field(default_factory=list, description="Category UUIDs")
    tags: list[str] = Field(default_factory=list, description="Tag names (created when missing)")
    featured_media_id: str | None = Field(None, description="Featured image media UUID")
    meta_title: str | None = Field(None, max_length=255)
    meta_description: str | None = None
    focus_keyword: str | None = Field(None, max_length=255)
    canonical_url: str | None = Field(None, max_length=2048)
    no_index: bool = False
    no_follow: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Strip and reject blank titles."""
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty or whitespace only")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        """Validate status is a known value."""
        return validate_content_status(v)

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str | None) -> str | None:
        """Normalize slug."""
        if v is None:
            return v
        return v.strip().lower() or None


class PostUpdate(BaseModel):
    """Schema for updating a post. All fields optional."""

    title: str | None = Field(None, min_length=1, max_length=500)
    slug: str | None = Field(None, max_length=255)
    content: str | None = None
    excerpt: str | None = None
    status: str | None = None
    category_ids: list[str] | None = None
    tags: list[str] | None = None
    featured_media_id: str | None = None
    meta_title: str | None = Field(None, max_length=255)
    meta_description: str | None = None
    focus_keyword: str | None = Field(None, max_length=255)
    canonical_url: str | None = Field(None, max_length=2048)
    no_index: bool | None = None
    no_follow: bool | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        """Strip and reject blank titles."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty or whitespace only")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str | None) -> str | None:
        """Validate status is a known value."""
        return validate_content_status(v) if v is not None else v

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str | None) -> str | None:
        """Normalize slug."""
        if v is None:
            return v
        return v.strip().lower() or None


class PostSummary(BaseModel):
    """Compact post representation for lists and embeds."""

    id: str
    title: str
    slug: str
    excerpt: str | None = None
    status: str
    published_at: datetime | None = None
    reading_time: int = 0

    model_config = ConfigDict(from_attributes=True)


class PostResponse(BaseModel):
    """Schema for post response."""

    id: str
    title: str
    slug: str
    content: str
    excerpt: str | None = None
    status: str
    author_id: str | None = None
    author: AuthorSummary | None = None
    featured_media_id: str | None = None
    published_at: datetime | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    focus_keyword: str | None = None
    seo_score: int | None = None
    readability_score: int | None = None
    canonical_url: str | None = None
    no_index: bool = False
    no_follow: bool = False
    word_count: int = 0
    reading_time: int = 0
    categories: list[CategorySummary] = Field(default_factory=list)
    tags: list[TagResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PostListResponse(BaseModel):
    """Paginated list of posts."""

    items: list[PostResponse]
    total: int
    limit: int
    offset: int
    has_more: bool


class CategoryDetailResponse(CategoryResponse):
    """Category with its parent, children and recent posts."""

    parent: CategorySummary | None = None
    children: list[CategorySummary] = Field(default_factory=list)
    posts: list[PostSummary] = Field(default_factory=list)
