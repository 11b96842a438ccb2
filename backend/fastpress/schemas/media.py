"""Pydantic schemas for the media library."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MediaCreate(BaseModel):
    """Schema for registering an externally hosted file."""

    filename: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1, max_length=2048)
    mime_type: str = Field(default="application/octet-stream", max_length=255)
    filesize: int = Field(default=0, ge=0)
    width: int | None = Field(None, ge=0)
    height: int | None = Field(None, ge=0)
    alt: str | None = Field(None, max_length=1024)
    caption: str | None = None

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an absolute http(s) or root-relative URL."""
        v = v.strip()
        if not (v.startswith(("http://", "https://", "/"))):
            raise ValueError("URL must start with http://, https:// or /")
        return v


class MediaUpdate(BaseModel):
    """Schema for updating alt text, caption and focal point."""

    alt: str | None = Field(None, max_length=1024)
    caption: str | None = None
    focal_x: float | None = Field(None, ge=0, le=100)
    focal_y: float | None = Field(None, ge=0, le=100)


class MediaResponse(BaseModel):
    """Media library item."""

    id: str
    filename: str
    mime_type: str
    filesize: int
    width: int | None = None
    height: int | None = None
    alt: str | None = None
    caption: str | None = None
    url: str
    storage_key: str | None = None
    focal_x: float | None = None
    focal_y: float | None = None
    is_image: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MediaListResponse(BaseModel):
    """Paginated media list."""

    items: list[MediaResponse]
    total: int
    limit: int
    offset: int
    has_more: bool
