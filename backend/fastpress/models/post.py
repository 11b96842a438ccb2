"""Post model.

Blog posts carry:
- HTML content with derived word count and reading time
- Publishing status and first-publication timestamp
- Category and tag associations (eagerly loaded)
- SEO overrides and the latest SEO scores
- The legacy WordPress post id for idempotent imports
"""

from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fastpress.core.database import Base
from fastpress.models.taxonomy import post_categories, post_tags

if TYPE_CHECKING:
    from fastpress.models.taxonomy import Category, Tag


class ContentStatus(str, Enum):
    """Publishing status shared by posts and pages."""

    DRAFT = "draft"
    PUBLISHED = "published"
    PRIVATE = "private"


class Post(Base):
    """Blog post.

    Attributes:
        id: UUID primary key
        title: Post title
        slug: Unique URL slug
        content: HTML body
        excerpt: Optional summary
        status: draft, published or private
        author_id: Authoring user
        featured_media_id: Optional featured image
        published_at: Set the first time the post is published
        meta_title / meta_description / focus_keyword: SEO overrides
        seo_score / readability_score: Latest SEO analysis scores
        canonical_url / no_index / no_follow: Robots directives
        word_count: Words in the text content
        reading_time: Minutes at 200 words per minute
        wp_post_id: Legacy WordPress post id
        categories / tags: Taxonomy associations
    """

    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
        server_default=text("gen_random_uuid()"),
    )

    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
    )

    slug: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    excerpt: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ContentStatus.DRAFT.value,
        server_default=text("'draft'"),
        index=True,
    )

    author_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    featured_media_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("media.id", ondelete="SET NULL"),
        nullable=True,
    )

    published_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
    )

    # SEO
    meta_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    focus_keyword: Mapped[str | None] = mapped_column(String(255), nullable=True)
    seo_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    readability_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    canonical_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    no_index: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    no_follow: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    word_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reading_time: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    wp_post_id: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        server_default=text("now()"),
        index=True,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        server_default=text("now()"),
        onupdate=lambda: datetime.now(UTC),
    )

    # Relationships
    categories: Mapped[list["Category"]] = relationship(
        "Category",
        secondary=post_categories,
        lazy="selectin",
        order_by="Category.name",
    )

    tags: Mapped[list["Tag"]] = relationship(
        "Tag",
        secondary=post_tags,
        lazy="selectin",
        order_by="Tag.name",
    )

    @property
    def is_published(self) -> bool:
        """Check if the post is publicly visible."""
        return self.status == ContentStatus.PUBLISHED.value

    def __repr__(self) -> str:
        return f"<Post(id={self.id!r}, slug={self.slug!r}, status={self.status!r})>"
