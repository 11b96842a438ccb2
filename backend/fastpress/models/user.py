"""User and AuthSession models.

A User row carries both the authentication identity (email, name) and the
WordPress-style profile (login, nicename, display name, bio, role, meta).
Profile fields stay empty until the profile is ensured on first sign-in.

AuthSession rows are written by the external auth provider; FastPress only
reads them to resolve Bearer tokens.
"""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from fastpress.core.database import Base


class User(Base):
    """Site user with WordPress profile fields.

    Attributes:
        id: UUID primary key
        email: Unique login email (lowercased)
        name: Name reported by the auth provider
        user_login: Unique WordPress-style login derived from name or email
        user_nicename: URL-friendly login
        display_name: Public display name
        first_name / last_name: Optional name parts
        bio: Free-form biography
        user_url: Personal website
        avatar_id: Optional media record used as avatar
        role_id: Assigned role (subscriber by default)
        meta: JSONB key/value user meta
        wp_user_id: Legacy WordPress author id for imported users
        created_at: Registration timestamp
        updated_at: Last profile update
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
        server_default=text("gen_random_uuid()"),
    )

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
    )

    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    user_login: Mapped[str | None] = mapped_column(
        String(60),
        nullable=True,
        unique=True,
        index=True,
    )

    user_nicename: Mapped[str | None] = mapped_column(
        String(60),
        nullable=True,
    )

    display_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    avatar_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("media.id", ondelete="SET NULL"),
        nullable=True,
    )

    role_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("roles.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    meta: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        server_default=text("'{}'::jsonb"),
    )

    wp_user_id: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        index=True,
    )

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
        return f"<User(id={self.id!r}, login={self.user_login!r})>"


class AuthSession(Base):
    """Session issued by the auth provider.

    Attributes:
        id: Opaque session id sent as the Bearer token
        user_id: Owning user
        expires_at: Expiry timestamp
        created_at: Creation timestamp
    """

    __tablename__ = "auth_sessions"

    id: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        server_default=text("now()"),
    )

    def __repr__(self) -> str:
        return f"<AuthSession(user_id={self.user_id!r}, expires_at={self.expires_at!r})>"
