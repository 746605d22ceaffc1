"""PM template schemas for API request/response."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


def _strip_optional(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            return None
    return v


class PMTemplateCreate(BaseModel):
    """Schema for creating a PM template.

    Name and duration limits are enforced by the model invariants so every
    violation is reported together.
    """

    name: str
    description: str | None = Field(default=None, max_length=1000)
    category: str | None = Field(default=None, max_length=100)
    checklist: dict[str, Any] | None = None
    estimated_duration_hours: Decimal | None = Field(default=None, decimal_places=2)
    default_vendor_id: UUID | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("description", "category")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class PMTemplateUpdate(BaseModel):
    """Schema for updating a PM template. Only set fields are applied."""

    name: str | None = None
    description: str | None = Field(default=None, max_length=1000)
    category: str | None = Field(default=None, max_length=100)
    checklist: dict[str, Any] | None = None
    estimated_duration_hours: Decimal | None = Field(default=None, decimal_places=2)
    default_vendor_id: UUID | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else v

    @field_validator("description", "category")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class PMTemplateRead(BaseModel):
    """Schema for reading a PM template."""

    id: UUID
    name: str
    description: str | None
    category: str | None
    checklist: dict[str, Any] | None
    estimated_duration_hours: Decimal | None
    default_vendor_id: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
