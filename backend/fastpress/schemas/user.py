"""Pydantic schemas for users, profiles and roles."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RoleResponse(BaseModel):
    """Schema for role response."""

    id: str = Field(..., description="UUID of the role")
    name: str = Field(..., description="Role name")
    slug: str = Field(..., description="Role slug")
    description: str | None = Field(None, description="Role description")
    permissions: list[str] = Field(default_factory=list, description="Granted permissions")

    model_config = ConfigDict(from_attributes=True)


class RoleAssign(BaseModel):
    """Schema for assigning a role to a user."""

    role: str = Field(..., min_length=1, description="Slug of the role to assign")


class UserResponse(BaseModel):
    """Schema for user/profile response."""

    id: str
    email: str
    name: str | None = None
    user_login: str | None = None
    user_nicename: str | None = None
    display_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    bio: str | None = None
    user_url: str | None = None
    avatar_id: str | None = None
    role: RoleResponse | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthorSummary(BaseModel):
    """Public author fields embedded in posts and pages."""

    id: str
    display_name: str | None = None
    user_nicename: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UserListResponse(BaseModel):
    """Paginated user list."""

    users: list[UserResponse]
    total: int
    has_more: bool


class ProfileUpdate(BaseModel):
    """Schema for updating one's own profile. All fields optional."""

    display_name: str | None = Field(None, max_length=255)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    bio: str | None = None
    user_url: str | None = Field(None, max_length=2048)
    avatar_id: str | None = None

    @field_validator("display_name")
    @classmethod
    def validate_display_name(cls, v: str | None) -> str | None:
        """Reject blank display names."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Display name cannot be empty")
        return v

    @field_validator("user_url")
    @classmethod
    def validate_user_url(cls, v: str | None) -> str | None:
        """Require http(s) URLs."""
        if v is None or v == "":
            return v
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v


class AdminUserUpdate(ProfileUpdate):
    """Schema for an administrator editing any user."""

    email: str | None = Field(None, max_length=320)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        """Normalize and sanity-check email."""
        if v is None:
            return v
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Valid email is required")
        return v


class UserMetaSet(BaseModel):
    """Schema for setting a user meta value."""

    value: Any = Field(..., description="JSON-serialisable meta value")
