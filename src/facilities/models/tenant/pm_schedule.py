"""PM schedule model - a recurring maintenance rule."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint
from sqlmodel import Field

from src.facilities.core.errors import FieldViolation
from src.facilities.models.base import TenantScopedModel
from src.facilities.scheduling.enums import PMFrequency
from src.facilities.scheduling.recurrence import RecurrenceRule, rule_violations

MAX_SCHEDULE_NAME_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 1000
MAX_ESTIMATED_COST = Decimal("99999999.99")


class PMSchedule(TenantScopedModel, table=True):
    """Recurring maintenance rule targeting exactly one asset or location.

    Due/overdue state is never stored; it is derived from next_due_date.
    generated_ticket_id/generated_for_date track the work order already
    requested for the current occurrence.
    """

    __tablename__ = "pm_schedules"
    __table_args__ = (
        CheckConstraint(
            "(asset_id IS NULL) <> (location_id IS NULL)",
            name="ck_pm_schedules_asset_xor_location",
        ),
    )

    template_id: UUID | None = Field(default=None, foreign_key="pm_templates.id", index=True)
    name: str = Field(max_length=MAX_SCHEDULE_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=MAX_DESCRIPTION_LENGTH)
    asset_id: UUID | None = Field(default=None, index=True)
    location_id: UUID | None = Field(default=None, index=True)
    frequency: str = Field(max_length=20)
    day_of_week: int | None = Field(default=None)
    day_of_month: int | None = Field(default=None)
    month_of_year: int | None = Field(default=None)
    assigned_to: UUID | None = Field(default=None)
    vendor_id: UUID | None = Field(default=None)
    estimated_cost: Decimal | None = Field(default=None, max_digits=10, decimal_places=2)
    next_due_date: date = Field(index=True)
    is_active: bool = Field(default=True)
    last_generated_at: datetime | None = Field(default=None)
    generated_ticket_id: UUID | None = Field(default=None)
    generated_for_date: date | None = Field(default=None)

    @property
    def frequency_enum(self) -> PMFrequency:
        """Get frequency as PMFrequency enum."""
        return PMFrequency(self.frequency)

    @property
    def rule(self) -> RecurrenceRule:
        """The recurrence rule described by this schedule's columns."""
        return RecurrenceRule(
            frequency=self.frequency_enum,
            day_of_week=self.day_of_week,
            day_of_month=self.day_of_month,
            month_of_year=self.month_of_year,
        )

    @property
    def has_open_ticket(self) -> bool:
        """Whether a work order was already requested for the current occurrence."""
        return (
            self.generated_ticket_id is not None
            and self.generated_for_date == self.next_due_date
        )

    def invariant_violations(self) -> list[FieldViolation]:
        violations: list[FieldViolation] = []
        if not self.name or not self.name.strip():
            violations.append(FieldViolation("name", "Schedule name is required"))
        elif len(self.name) > MAX_SCHEDULE_NAME_LENGTH:
            violations.append(
                FieldViolation("name", "Schedule name must be 200 characters or less")
            )
        if self.description is not None and len(self.description) > MAX_DESCRIPTION_LENGTH:
            violations.append(
                FieldViolation("description", "Description must be 1000 characters or less")
            )
        if self.asset_id is None and self.location_id is None:
            violations.append(
                FieldViolation("asset_id", "Either asset_id or location_id is required")
            )
            violations.append(
                FieldViolation("location_id", "Either asset_id or location_id is required")
            )
        elif self.asset_id is not None and self.location_id is not None:
            violations.append(
                FieldViolation("asset_id", "Cannot specify both asset_id and location_id")
            )
            violations.append(
                FieldViolation("location_id", "Cannot specify both asset_id and location_id")
            )
        violations.extend(
            rule_violations(
                self.frequency, self.day_of_week, self.day_of_month, self.month_of_year
            )
        )
        cost = self.estimated_cost
        if cost is not None:
            if cost <= 0:
                violations.append(FieldViolation("estimated_cost", "Must be positive"))
            elif cost > MAX_ESTIMATED_COST:
                violations.append(
                    FieldViolation("estimated_cost", "Must be at most 99999999.99")
                )
            elif cost.as_tuple().exponent < -2:  # type: ignore[operator]
                violations.append(
                    FieldViolation("estimated_cost", "At most 2 decimal places")
                )
        if self.next_due_date is None:
            violations.append(FieldViolation("next_due_date", "Required"))
        if self.is_active is None:
            violations.append(FieldViolation("is_active", "Must be true or false"))
        return violations
