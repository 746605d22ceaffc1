"""PM completion model - immutable audit record of a fulfilled occurrence."""

from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field

from src.facilities.models.base import AuditRecordModel


class PMCompletion(AuditRecordModel, table=True):
    """One row per (schedule, scheduled_date).

    No tenant_id column: tenant scope comes from the owning schedule.
    The unique constraint is what serializes concurrent completions.
    """

    __tablename__ = "pm_completions"
    __table_args__ = (
        UniqueConstraint("schedule_id", "scheduled_date", name="uq_pm_completions_schedule_date"),
    )

    schedule_id: UUID = Field(foreign_key="pm_schedules.id", index=True)
    ticket_id: UUID
    scheduled_date: date
    completed_date: date
    completed_by: UUID
    checklist_results: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))
    notes: str | None = Field(default=None, max_length=2000)
