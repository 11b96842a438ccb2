"""Site settings key/value model.

Values are stored as text and parsed on read according to `value_type`.
"""

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import DateTime, String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from fastpress.core.database import Base

# Supported setting value types
SETTING_TYPES = ("string", "number", "boolean", "json")


class SiteSetting(Base):
    """Single site setting.

    Attributes:
        id: UUID primary key
        key: Unique setting key
        value: Serialized value
        value_type: string, number, boolean or json
        updated_at: Last write timestamp
    """

    __tablename__ = "site_settings"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
        server_default=text("gen_random_uuid()"),
    )

    key: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    value: Mapped[str] = mapped_column(Text, nullable=False)

    value_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="string",
        server_default=text("'string'"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        server_default=text("now()"),
        onupdate=lambda: datetime.now(UTC),
    )

    def __repr__(self) -> str:
        return f"<SiteSetting(key={self.key!r}, type={self.value_type!r})>"
