"""Pydantic schemas for categories and tags."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name cannot be empty or whitespace only")
    return v


def _clean_slug(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip().lower()
    return v or None


class CategoryCreate(BaseModel):
    """Schema for creating a category."""

    name: str = Field(..., min_length=1, max_length=200, description="Category name")
    slug: str | None = Field(None, max_length=200, description="URL slug (derived from name when omitted)")
    description: str | None = Field(None, description="Category description")
    parent_id: str | None = Field(None, description="Parent category UUID")
    meta_title: str | None = Field(None, max_length=255)
    meta_description: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Strip and reject blank names."""
        return _clean_name(v)

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str | None) -> str | None:
        """Normalize slug."""
        return _clean_slug(v)


class CategoryUpdate(BaseModel):
    """Schema for updating a category. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=200)
    slug: str | None = Field(None, max_length=200)
    description: str | None = None
    parent_id: str | None = None
    meta_title: str | None = Field(None, max_length=255)
    meta_description: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        """Strip and reject blank names."""
        return _clean_name(v) if v is not None else v

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str | None) -> str | None:
        """Normalize slug."""
        return _clean_slug(v)


class CategorySummary(BaseModel):
    """Compact category reference."""

    id: str
    name: str
    slug: str

    model_config = ConfigDict(from_attributes=True)


class CategoryResponse(BaseModel):
    """Schema for category response."""

    id: str
    name: str
    slug: str
    description: str | None = None
    parent_id: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TagCreate(BaseModel):
    """Schema for creating a tag."""

    name: str = Field(..., min_length=1, max_length=200)
    slug: str | None = Field(None, max_length=200)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Strip and reject blank names."""
        return _clean_name(v)

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str | None) -> str | None:
        """Normalize slug."""
        return _clean_slug(v)


class TagResponse(BaseModel):
    """Schema for tag response."""

    id: str
    name: str
    slug: str

    model_config = ConfigDict(from_attributes=True)
