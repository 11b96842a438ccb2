"""Pydantic schemas for pages and the block registry."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fastpress.schemas.post import validate_content_status
from fastpress.schemas.user import AuthorSummary


class PageCreate(BaseModel):
    """Schema for creating a page."""

    title: str = Field(..., min_length=1, max_length=500)
    slug: str | None = Field(None, max_length=255)
    content: str = Field(default="")
    status: str = Field(default="draft")
    parent_id: str | None = None
    template: str | None = Field(None, max_length=100)
    menu_order: int = 0
    hero: dict[str, Any] | None = None
    layout: list[dict[str, Any]] = Field(default_factory=list, description="Block descriptors")
    meta_title: str | None = Field(None, max_length=255)
    meta_description: str | None = None
    meta_image_id: str | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Strip and reject blank titles."""
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty or whitespace only")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        """Validate status is a known value."""
        return validate_content_status(v)


class PageUpdate(BaseModel):
    """Schema for updating a page. All fields optional."""

    title: str | None = Field(None, min_length=1, max_length=500)
    slug: str | None = Field(None, max_length=255)
    content: str | None = None
    status: str | None = None
    parent_id: str | None = None
    template: str | None = Field(None, max_length=100)
    menu_order: int | None = None
    hero: dict[str, Any] | None = None
    layout: list[dict[str, Any]] | None = None
    meta_title: str | None = Field(None, max_length=255)
    meta_description: str | None = None
    meta_image_id: str | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        """Strip and reject blank titles."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty or whitespace only")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str | None) -> str | None:
        """Validate status is a known value."""
        return validate_content_status(v) if v is not None else v


class PageSummary(BaseModel):
    """Compact page reference."""

    id: str
    title: str
    slug: str
    status: str

    model_config = ConfigDict(from_attributes=True)


class PageResponse(BaseModel):
    """Schema for page response."""

    id: str
    title: str
    slug: str
    content: str
    status: str
    author_id: str | None = None
    parent_id: str | None = None
    template: str | None = None
    menu_order: int = 0
    hero: dict[str, Any] | None = None
    layout: list[dict[str, Any]] = Field(default_factory=list)
    meta_title: str | None = None
    meta_description: str | None = None
    meta_image_id: str | None = None
    published_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PageListItem(PageResponse):
    """Page in a list with its parent and number of children."""

    parent: PageSummary | None = None
    child_count: int = 0


class PageListResponse(BaseModel):
    """List of pages."""

    items: list[PageListItem]
    total: int


class PageDetailResponse(PageResponse):
    """Page with author, parent and child pages."""

    author: AuthorSummary | None = None
    parent: PageSummary | None = None
    children: list[PageSummary] = Field(default_factory=list)


class PageTreeNode(BaseModel):
    """Node of the page hierarchy."""

    id: str
    title: str
    slug: str
    status: str
    menu_order: int = 0
    children: list["PageTreeNode"] = Field(default_factory=list)


class BlockSummary(BaseModel):
    """Block picker entry."""

    id: str
    label: str
    description: str
    icon: str
    category: str


class BlockValidationRequest(BaseModel):
    """A block to validate."""

    block: dict[str, Any]


class BlockValidationResponse(BaseModel):
    """Validation outcome for one block."""

    is_valid: bool
    errors: list[str]
