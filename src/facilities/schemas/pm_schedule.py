"""PM schedule and completion schemas for API request/response."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, Field, field_validator

from src.facilities.scheduling.enums import DueStatus, PMFrequency

FREQUENCY_DESCRIPTION = "One of: " + ", ".join(f.value for f in PMFrequency)


def _frequency_value(v: Any) -> Any:
    return v.value if isinstance(v, PMFrequency) else v


# Unknown values are reported by the service together with other violations
FrequencyValue = Annotated[str, BeforeValidator(_frequency_value)]


class PMScheduleCreate(BaseModel):
    """Schema for creating a PM schedule.

    Cross-field rules (asset XOR location, frequency-specific days, ranges)
    are checked by the service so that all violations come back at once.
    """

    template_id: UUID | None = None
    name: str
    description: str | None = None
    asset_id: UUID | None = None
    location_id: UUID | None = None
    frequency: FrequencyValue = Field(description=FREQUENCY_DESCRIPTION)
    day_of_week: int | None = None
    day_of_month: int | None = None
    month_of_year: int | None = None
    assigned_to: UUID | None = None
    vendor_id: UUID | None = None
    estimated_cost: Decimal | None = None
    start_date: date | None = Field(
        default=None,
        description="First occurrence is computed strictly after this date. Defaults to today.",
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class PMScheduleUpdate(BaseModel):
    """Schema for updating a PM schedule. Only set fields are applied.

    Changing recurrence fields recomputes next_due_date unless
    next_due_date is given explicitly.
    """

    template_id: UUID | None = None
    name: str | None = None
    description: str | None = None
    asset_id: UUID | None = None
    location_id: UUID | None = None
    frequency: FrequencyValue | None = Field(default=None, description=FREQUENCY_DESCRIPTION)
    day_of_week: int | None = None
    day_of_month: int | None = None
    month_of_year: int | None = None
    assigned_to: UUID | None = None
    vendor_id: UUID | None = None
    estimated_cost: Decimal | None = None
    is_active: bool | None = None
    next_due_date: date | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else v


class PMScheduleRead(BaseModel):
    """Schema for reading a PM schedule."""

    id: UUID
    template_id: UUID | None
    name: str
    description: str | None
    asset_id: UUID | None
    location_id: UUID | None
    frequency: PMFrequency
    day_of_week: int | None
    day_of_month: int | None
    month_of_year: int | None
    assigned_to: UUID | None
    vendor_id: UUID | None
    estimated_cost: Decimal | None
    next_due_date: date
    is_active: bool
    last_generated_at: datetime | None
    generated_ticket_id: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DueSchedulesRead(BaseModel):
    """Active schedules due today and overdue, as of a given date."""

    as_of: date
    due: list[PMScheduleRead]
    overdue: list[PMScheduleRead]

    model_config = {"from_attributes": True}


class CalendarEntryRead(BaseModel):
    """One projected occurrence of a schedule."""

    schedule_id: UUID
    schedule_name: str
    due_date: date
    frequency: PMFrequency
    asset_id: UUID | None
    location_id: UUID | None
    status: DueStatus

    model_config = {"from_attributes": True}


class CalendarRead(BaseModel):
    year: int
    month: int
    entries: list[CalendarEntryRead]

    model_config = {"from_attributes": True}


class GeneratedTicketRead(BaseModel):
    schedule_id: UUID
    ticket_id: UUID
    scheduled_date: date

    model_config = {"from_attributes": True}


class GenerationErrorRead(BaseModel):
    schedule_id: UUID
    message: str

    model_config = {"from_attributes": True}


class TicketGenerationRead(BaseModel):
    """Outcome of a ticket generation run.

    Per-schedule failures are listed in ``errors``; they do not fail the run.
    """

    generated: list[GeneratedTicketRead]
    skipped: list[UUID]
    errors: list[GenerationErrorRead]

    model_config = {"from_attributes": True}


class PMStatsRead(BaseModel):
    total: int
    active: int
    due_today: int
    overdue: int
    completed_this_month: int

    model_config = {"from_attributes": True}


class PMCompletionCreate(BaseModel):
    """Schema for marking the current occurrence of a schedule completed.

    scheduled_date defaults to the schedule's current next_due_date;
    when given it must equal it. ticket_id defaults to the ticket already
    generated for the occurrence, else a new work order is requested.
    """

    completed_by: UUID
    ticket_id: UUID | None = None
    scheduled_date: date | None = None
    completed_date: date | None = None
    checklist_results: dict[str, Any] | None = None
    notes: str | None = Field(default=None, max_length=2000)

    @field_validator("notes")
    @classmethod
    def blank_notes_to_none(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                return None
        return v


class PMCompletionRead(BaseModel):
    """Schema for reading a PM completion record."""

    id: UUID
    schedule_id: UUID
    ticket_id: UUID
    scheduled_date: date
    completed_date: date
    completed_by: UUID
    checklist_results: dict[str, Any] | None
    notes: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class PMCompletionResult(BaseModel):
    """A recorded completion plus the schedule after advancing."""

    completion: PMCompletionRead
    schedule: PMScheduleRead

    model_config = {"from_attributes": True}
