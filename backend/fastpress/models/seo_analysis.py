"""SEO analysis results, one row per analysed post or page."""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from fastpress.core.database import Base


class SEOAnalysis(Base):
    """Stored SEO analysis.

    Exactly one of post_id / page_id is set.

    Attributes:
        focus_keyword: Keyword the analysis was run for
        keyword_density: Keyword occurrences per 100 words
        title_score / meta_description_score / content_score / readability_score:
            Component scores (0-100)
        overall_score: Weighted overall score (0-100)
        suggestions: JSONB list of recommendation strings
        warnings: JSONB list of warning strings
        analyzed_at: When the analysis last ran
    """

    __tablename__ = "seo_analyses"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
        server_default=text("gen_random_uuid()"),
    )

    post_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=True,
        unique=True,
    )

    page_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("pages.id", ondelete="CASCADE"),
        nullable=True,
        unique=True,
    )

    focus_keyword: Mapped[str] = mapped_column(String(255), nullable=False)
    keyword_density: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    title_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    meta_description_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    content_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    readability_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    overall_score: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        index=True,
    )

    suggestions: Mapped[list[Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        server_default=text("'[]'::jsonb"),
    )

    warnings: Mapped[list[Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        server_default=text("'[]'::jsonb"),
    )

    analyzed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        server_default=text("now()"),
        index=True,
    )

    def __repr__(self) -> str:
        target = f"post_id={self.post_id!r}" if self.post_id else f"page_id={self.page_id!r}"
        return f"<SEOAnalysis({target}, overall={self.overall_score})>"
