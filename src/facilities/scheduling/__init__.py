"""Recurrence engine - pure date computation for PM schedules."""

from src.facilities.scheduling.enums import DueStatus, PMFrequency
from src.facilities.scheduling.recurrence import (
    RecurrenceRule,
    classify,
    iter_occurrences,
    month_window,
    next_occurrence,
    occurrences_in_window,
    rule_violations,
)

__all__ = [
    "DueStatus",
    "PMFrequency",
    "RecurrenceRule",
    "classify",
    "iter_occurrences",
    "month_window",
    "next_occurrence",
    "occurrences_in_window",
    "rule_violations",
]
