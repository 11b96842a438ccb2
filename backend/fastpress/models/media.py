"""Media model for uploaded and imported files."""

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import DateTime, Float, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from fastpress.core.database import Base


class Media(Base):
    """Media library item.

    Files uploaded through the API live in object storage under `storage_key`;
    imported WordPress attachments keep their original `url` and no key.

    Attributes:
        id: UUID primary key
        filename: Original file name
        mime_type: MIME type
        filesize: Size in bytes
        width / height: Image dimensions when known
        alt / caption: Accessibility and display text
        url: Public URL
        storage_key: Object storage key (None for external files)
        focal_x / focal_y: Focal point percentages (0-100)
        wp_post_id: Legacy WordPress attachment id
    """

    __tablename__ = "media"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
        server_default=text("gen_random_uuid()"),
    )

    filename: Mapped[str] = mapped_column(String(255), nullable=False)

    mime_type: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="application/octet-stream",
    )

    filesize: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)

    alt: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    caption: Mapped[str | None] = mapped_column(Text, nullable=True)

    url: Mapped[str] = mapped_column(String(2048), nullable=False, index=True)

    storage_key: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    focal_x: Mapped[float | None] = mapped_column(Float, nullable=True)
    focal_y: Mapped[float | None] = mapped_column(Float, nullable=True)

    wp_post_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

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

    @property
    def is_image(self) -> bool:
        """Check if the media item is an image."""
        return self.mime_type.startswith("image/")

    def __repr__(self) -> str:
        return f"<Media(id={self.id!r}, filename={self.filename!r})>"
