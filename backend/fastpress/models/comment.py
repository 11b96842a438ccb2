"""Comment model for threaded post comments."""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from fastpress.core.database import Base


class CommentStatus(str, Enum):
    """Moderation status of a comment."""

    PENDING = "pending"
    APPROVED = "approved"
    SPAM = "spam"


class Comment(Base):
    """Visitor comment on a post.

    Attributes:
        id: UUID primary key
        post_id: Commented post
        parent_id: Parent comment for threaded replies
        author_name / author_email / author_url: Commenter details
        content: Comment text
        status: pending, approved or spam
        user_agent / ip_address: Submission metadata for moderation
        wp_comment_id: Legacy WordPress comment id
        created_at: Submission timestamp
    """

    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
        server_default=text("gen_random_uuid()"),
    )

    post_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    parent_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    author_name: Mapped[str] = mapped_column(String(255), nullable=False)
    author_email: Mapped[str] = mapped_column(String(320), nullable=False)
    author_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=CommentStatus.PENDING.value,
        server_default=text("'pending'"),
        index=True,
    )

    user_agent: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)

    wp_comment_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        server_default=text("now()"),
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id!r}, post_id={self.post_id!r}, status={self.status!r})>"
