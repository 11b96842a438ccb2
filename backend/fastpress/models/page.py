"""Page model with block-based layout.

Pages form a tree through parent_id and carry a JSONB `layout` list of block
descriptors ({"blockType": ..., "id": ..., **props}) plus an optional hero.
"""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from fastpress.core.database import Base
from fastpress.models.post import ContentStatus


class Page(Base):
    """Static page.

    Attributes:
        id: UUID primary key
        title: Page title
        slug: Unique URL slug
        content: Optional HTML body (rendered above the layout)
        status: draft, published or private
        author_id: Authoring user
        parent_id: Optional parent page
        template: Front-end template name
        menu_order: Sort order among siblings
        hero: JSONB hero configuration
        layout: JSONB list of block descriptors
        meta_title / meta_description / meta_image_id: SEO overrides
        published_at: Set the first time the page is published
        wp_post_id: Legacy WordPress post id
    """

    __tablename__ = "pages"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
        server_default=text("gen_random_uuid()"),
    )

    title: Mapped[str] = mapped_column(String(500), nullable=False)

    slug: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

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
    )

    parent_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("pages.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    template: Mapped[str | None] = mapped_column(String(100), nullable=True)

    menu_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    hero: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)

    layout: Mapped[list[Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        server_default=text("'[]'::jsonb"),
    )

    meta_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[str | None] = mapped_column(Text, nullable=True)

    meta_image_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("media.id", ondelete="SET NULL"),
        nullable=True,
    )

    published_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    wp_post_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        server_default=text("now()"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        server_default=text("now()"),
        onupdate=lambda: datetime.now(UTC),
    )

    def __repr__(self) -> str:
        return f"<Page(id={self.id!r}, slug={self.slug!r}, parent_id={self.parent_id!r})>"
