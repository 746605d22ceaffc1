"""PM template model - reusable task definition for schedules."""

from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, Column
from sqlmodel import Field

from src.facilities.core.errors import FieldViolation
from src.facilities.models.base import TenantScopedModel

MAX_TEMPLATE_NAME_LENGTH = 200
MAX_ESTIMATED_DURATION_HOURS = Decimal("99.99")


class PMTemplate(TenantScopedModel, table=True):
    """Preventive maintenance template stored per tenant."""

    __tablename__ = "pm_templates"

    name: str = Field(max_length=MAX_TEMPLATE_NAME_LENGTH, index=True)
    description: str | None = Field(default=None, max_length=1000)
    category: str | None = Field(default=None, max_length=100)
    checklist: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))
    estimated_duration_hours: Decimal | None = Field(default=None, max_digits=4, decimal_places=2)
    default_vendor_id: UUID | None = Field(default=None)

    def invariant_violations(self) -> list[FieldViolation]:
        violations: list[FieldViolation] = []
        if not self.name or not self.name.strip():
            violations.append(FieldViolation("name", "Template name is required"))
        elif len(self.name) > MAX_TEMPLATE_NAME_LENGTH:
            violations.append(
                FieldViolation("name", "Template name must be 200 characters or less")
            )
        hours = self.estimated_duration_hours
        if hours is not None:
            if hours <= 0:
                violations.append(
                    FieldViolation("estimated_duration_hours", "Estimated duration must be positive")
                )
            elif hours > MAX_ESTIMATED_DURATION_HOURS:
                violations.append(
                    FieldViolation(
                        "estimated_duration_hours",
                        "Estimated duration must be less than 100 hours",
                    )
                )
        return violations
