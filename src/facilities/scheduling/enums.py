"""Enums for PM recurrence and due-state classification."""

from enum import Enum


class PMFrequency(str, Enum):
    """Cadence of a preventive maintenance schedule."""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUALLY = "semi_annually"
    ANNUALLY = "annually"


class DueStatus(str, Enum):
    """Time-relative state of a schedule's current occurrence.

    Always computed from next_due_date and "today"; never stored.
    """

    UPCOMING = "upcoming"
    DUE = "due"
    OVERDUE = "overdue"
