"""Pydantic schemas for site settings."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from fastpress.models.site_setting import SETTING_TYPES


class SettingWrite(BaseModel):
    """Schema for writing a setting value."""

    value: Any = Field(..., description="Value to store")
    type: str | None = Field(None, description="string, number, boolean or json (inferred when omitted)")

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str | None) -> str | None:
        """Validate type is a known value."""
        if v is not None and v not in SETTING_TYPES:
            raise ValueError(
                f"Invalid setting type '{v}'. Must be one of: {', '.join(SETTING_TYPES)}"
            )
        return v


class SettingResponse(BaseModel):
    """A parsed setting."""

    key: str
    value: Any
    type: str
    updated_at: datetime | None = None


class CommentsEnabledUpdate(BaseModel):
    """Toggle for site-wide comments."""

    enabled: bool
