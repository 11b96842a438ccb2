"""Pydantic schemas for forms and submissions."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

VALID_FORM_STATUSES = frozenset({"draft", "published"})
VALID_SUBMIT_ACTIONS = frozenset({"basic", "enhanced"})


def _check_status(v: str) -> str:
    if v not in VALID_FORM_STATUSES:
        raise ValueError(
            f"Invalid status '{v}'. Must be one of: {', '.join(sorted(VALID_FORM_STATUSES))}"
        )
    return v


def _check_submit_action(v: str) -> str:
    if v not in VALID_SUBMIT_ACTIONS:
        raise ValueError(
            f"Invalid submit action '{v}'. Must be one of: {', '.join(sorted(VALID_SUBMIT_ACTIONS))}"
        )
    return v


def _check_fields(v: list[dict[str, Any]]) -> list[dict[str, Any]]:
    names = set()
    for index, form_field in enumerate(v):
        name = form_field.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"Field at index {index} must have a name")
        if name in names:
            raise ValueError(f"Duplicate field name '{name}'")
        names.add(name)
    return v


class FormCreate(BaseModel):
    """Schema for creating a form."""

    title: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=255)
    description: str | None = None
    fields: list[dict[str, Any]] = Field(default_factory=list)
    submit_action: str = "basic"
    confirmation_message: str | None = None
    status: str = "draft"

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        """Validate status is a known value."""
        return _check_status(v)

    @field_validator("submit_action")
    @classmethod
    def validate_submit_action(cls, v: str) -> str:
        """Validate submit action is a known value."""
        return _check_submit_action(v)

    @field_validator("fields")
    @classmethod
    def validate_fields(cls, v: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Require unique field names."""
        return _check_fields(v)


class FormUpdate(BaseModel):
    """Schema for updating a form. All fields optional."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    fields: list[dict[str, Any]] | None = None
    submit_action: str | None = None
    confirmation_message: str | None = None
    status: str | None = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str | None) -> str | None:
        return _check_status(v) if v is not None else v

    @field_validator("submit_action")
    @classmethod
    def validate_submit_action(cls, v: str | None) -> str | None:
        return _check_submit_action(v) if v is not None else v

    @field_validator("fields")
    @classmethod
    def validate_fields(cls, v: list[dict[str, Any]] | None) -> list[dict[str, Any]] | None:
        return _check_fields(v) if v is not None else v


class FormResponse(BaseModel):
    """Form definition."""

    id: str
    title: str
    slug: str
    description: str | None = None
    fields: list[dict[str, Any]]
    submit_action: str
    confirmation_message: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FormSubmit(BaseModel):
    """Visitor submission payload."""

    data: dict[str, Any] = Field(default_factory=dict)


class SubmissionResponse(BaseModel):
    """Stored submission."""

    id: str
    form_id: str
    data: dict[str, Any]
    status: str
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SubmitResult(BaseModel):
    """Result returned to the submitting visitor."""

    success: bool = True
    submission_id: str
    message: str | None = None
