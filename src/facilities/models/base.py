from datetime import UTC, date, datetime
from typing import ClassVar
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.facilities.core.errors import FieldViolation


def utc_now() -> datetime:
    """Return current UTC time as naive datetime (for PostgreSQL TIMESTAMP).

    Database columns use TIMESTAMP WITHOUT TIME ZONE, so we strip tzinfo.
    All times are stored in UTC by convention.
    """
    return datetime.now(UTC).replace(tzinfo=None)


def utc_today() -> date:
    """Return the current UTC calendar date."""
    return datetime.now(UTC).date()


class TenantScopedModel(SQLModel):
    """Column schema every mutable tenant-scoped table must carry.

    TenantScopedRepository is bound to this base, so tenant and soft-delete
    filtering are written once for every entity type.
    """

    PROTECTED_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"id", "tenant_id", "created_at", "updated_at", "deleted_at"}
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID | None = Field(default=None, index=True, nullable=False)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    deleted_at: datetime | None = Field(default=None)

    @property
    def is_deleted(self) -> bool:
        """Check if the row is soft-deleted."""
        return self.deleted_at is not None

    def invariant_violations(self) -> list[FieldViolation]:
        """Structural invariants checked on every create and update."""
        return []


class AuditRecordModel(SQLModel):
    """Column schema for append-only audit tables (no updates, no soft delete)."""

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)
