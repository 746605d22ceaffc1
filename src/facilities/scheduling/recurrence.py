"""Recurrence engine for preventive maintenance schedules.

Pure functions over dates: no I/O, no clock access. Callers pass "today"
and anchors explicitly so results are deterministic.

Weekday numbering follows the stored schema: 0 = Sunday ... 6 = Saturday.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, timedelta
from itertools import takewhile

from dateutil.relativedelta import relativedelta, weekday

from src.facilities.core.errors import FieldViolation
from src.facilities.scheduling.enums import DueStatus, PMFrequency

# Frequencies whose cadence is a fixed number of days
DAY_STEPS: dict[PMFrequency, int] = {
    PMFrequency.DAILY: 1,
    PMFrequency.WEEKLY: 7,
    PMFrequency.BIWEEKLY: 14,
}

# Frequencies whose cadence is counted in calendar months
MONTH_STEPS: dict[PMFrequency, int] = {
    PMFrequency.MONTHLY: 1,
    PMFrequency.QUARTERLY: 3,
    PMFrequency.SEMI_ANNUALLY: 6,
    PMFrequency.ANNUALLY: 12,
}

DAY_OF_MONTH_FREQUENCIES = frozenset(
    {
        PMFrequency.MONTHLY,
        PMFrequency.QUARTERLY,
        PMFrequency.SEMI_ANNUALLY,
        PMFrequency.ANNUALLY,
    }
)


@dataclass(frozen=True)
class RecurrenceRule:
    """Frequency plus the day/month constraints that define a cadence."""

    frequency: PMFrequency
    day_of_week: int | None = None
    day_of_month: int | None = None
    month_of_year: int | None = None


def _to_dateutil_weekday(day_of_week: int) -> weekday:
    # dateutil counts from Monday = 0
    return weekday((day_of_week - 1) % 7)


def _months_to_aligned(after: date, step: int, month_of_year: int | None) -> int:
    """Months from ``after`` to the next month in step with ``month_of_year``.

    Quarterly with month_of_year=3 runs Mar/Jun/Sep/Dec. Without an
    alignment month the cadence simply steps forward.
    """
    if month_of_year is None:
        return step
    return (month_of_year - after.month - 1) % step + 1


def next_occurrence(rule: RecurrenceRule, after: date) -> date:
    """Return the next occurrence strictly after ``after``.

    Month-based cadences clamp ``day_of_month`` to the length of the target
    month (31 in February lands on the 28th or 29th) and pick the intended
    day again in the following period, so the cadence never drifts.
    Quarterly and semi-annual rules with ``month_of_year`` land only on
    months in step with it.
    """
    frequency = PMFrequency(rule.frequency)

    if frequency == PMFrequency.DAILY:
        return after + timedelta(days=1)

    if frequency == PMFrequency.WEEKLY:
        if rule.day_of_week is None:
            return after + timedelta(days=7)
        # Start the day after, then move forward to the matching weekday
        return after + relativedelta(days=1, weekday=_to_dateutil_weekday(rule.day_of_week))

    if frequency == PMFrequency.BIWEEKLY:
        return after + timedelta(days=14)

    if frequency == PMFrequency.ANNUALLY:
        return after + relativedelta(
            years=1,
            month=rule.month_of_year or after.month,
            day=rule.day_of_month or after.day,
        )

    step = MONTH_STEPS[frequency]
    alignment = rule.month_of_year if step > 1 else None
    return after + relativedelta(
        months=_months_to_aligned(after, step, alignment),
        day=rule.day_of_month or after.day,
    )


def _fast_forward(rule: RecurrenceRule, anchor: date, target: date) -> date:
    """Jump along the occurrences from ``anchor`` to one on or before ``target``.

    Whole periods are skipped arithmetically so projecting into a distant
    window costs the same as a near one. Rules whose day drifts with month
    length (no day_of_month) are not skipped.
    """
    first = next_occurrence(rule, anchor)
    if first >= target:
        return anchor

    frequency = PMFrequency(rule.frequency)
    if frequency in DAY_STEPS:
        step = DAY_STEPS[frequency]
        return first + timedelta(days=(target - first).days // step * step)

    if rule.day_of_month is None:
        return anchor
    step = MONTH_STEPS[frequency]
    months_apart = (target.year - first.year) * 12 + target.month - first.month
    periods = max(months_apart // step - 1, 0)
    return first + relativedelta(months=periods * step, day=rule.day_of_month)


def iter_occurrences(rule: RecurrenceRule, anchor: date) -> Iterator[date]:
    """Yield ``anchor`` and every following occurrence, without end."""
    current = anchor
    while True:
        yield current
        current = next_occurrence(rule, current)


def occurrences_in_window(
    rule: RecurrenceRule,
    anchor: date,
    window_start: date,
    window_end: date,
) -> list[date]:
    """Project a rule onto the inclusive window ``[window_start, window_end]``.

    The anchor is treated as an occurrence (normally the schedule's stored
    next_due_date). Recomputed from scratch on every call; the work done is
    bounded by the window, not by its distance from the anchor.
    """
    if window_end < window_start:
        return []
    start = _fast_forward(rule, anchor, window_start)
    upto_end = takewhile(lambda d: d <= window_end, iter_occurrences(rule, start))
    return [d for d in upto_end if d >= window_start]


def classify(next_due_date: date, today: date) -> DueStatus:
    """Classify an occurrence relative to today."""
    if next_due_date == today:
        return DueStatus.DUE
    if next_due_date < today:
        return DueStatus.OVERDUE
    return DueStatus.UPCOMING


def month_window(year: int, month: int) -> tuple[date, date]:
    """First and last day of a calendar month."""
    first = date(year, month, 1)
    return first, first + relativedelta(day=31)


def rule_violations(
    frequency: str | None,
    day_of_week: int | None,
    day_of_month: int | None,
    month_of_year: int | None,
) -> list[FieldViolation]:
    """Collect every range and frequency-specific requirement violation."""
    violations: list[FieldViolation] = []

    freq: PMFrequency | None = None
    try:
        freq = PMFrequency(frequency)
    except ValueError:
        allowed = ", ".join(f.value for f in PMFrequency)
        violations.append(FieldViolation("frequency", f"Must be one of: {allowed}"))

    if day_of_week is not None and not 0 <= day_of_week <= 6:
        violations.append(FieldViolation("day_of_week", "Must be between 0 and 6"))
    if day_of_month is not None and not 1 <= day_of_month <= 31:
        violations.append(FieldViolation("day_of_month", "Must be between 1 and 31"))
    if month_of_year is not None and not 1 <= month_of_year <= 12:
        violations.append(FieldViolation("month_of_year", "Must be between 1 and 12"))

    if freq is PMFrequency.WEEKLY and day_of_week is None:
        violations.append(FieldViolation("day_of_week", "Required for weekly schedules"))
    if freq in DAY_OF_MONTH_FREQUENCIES and day_of_month is None:
        violations.append(FieldViolation("day_of_month", f"Required for {freq.value} schedules"))
    if freq is PMFrequency.ANNUALLY and month_of_year is None:
        violations.append(FieldViolation("month_of_year", "Required for annually schedules"))

    return violations
