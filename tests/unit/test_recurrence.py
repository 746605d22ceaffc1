"""Unit tests for the recurrence engine.

Pure date arithmetic - no database, no clock.
"""

from datetime import date, timedelta

import pytest

from src.facilities.scheduling import (
    DueStatus,
    PMFrequency,
    RecurrenceRule,
    classify,
    month_window,
    next_occurrence,
    occurrences_in_window,
    rule_violations,
)
from src.facilities.scheduling.recurrence import iter_occurrences

pytestmark = pytest.mark.unit


class TestNextOccurrence:
    """Tests for next_occurrence per frequency."""

    def test_daily(self) -> None:
        rule = RecurrenceRule(PMFrequency.DAILY)
        assert next_occurrence(rule, date(2025, 12, 31)) == date(2026, 1, 1)

    def test_weekly_anchors_to_day_of_week(self) -> None:
        """Monday 2025-01-06 with day_of_week=3 lands on Wednesday 2025-01-08."""
        rule = RecurrenceRule(PMFrequency.WEEKLY, day_of_week=3)
        first = next_occurrence(rule, date(2025, 1, 6))
        assert first == date(2025, 1, 8)
        assert next_occurrence(rule, first) == date(2025, 1, 15)

    def test_weekly_is_strictly_after(self) -> None:
        """An anchor already on the weekday moves a full week."""
        rule = RecurrenceRule(PMFrequency.WEEKLY, day_of_week=3)
        assert next_occurrence(rule, date(2025, 1, 8)) == date(2025, 1, 15)

    @pytest.mark.parametrize(
        ("day_of_week", "expected"),
        [
            (0, date(2025, 1, 12)),  # Sunday
            (1, date(2025, 1, 13)),  # Monday, a week after the anchor
            (6, date(2025, 1, 11)),  # Saturday
        ],
    )
    def test_weekly_sunday_based_numbering(self, day_of_week: int, expected: date) -> None:
        rule = RecurrenceRule(PMFrequency.WEEKLY, day_of_week=day_of_week)
        assert next_occurrence(rule, date(2025, 1, 6)) == expected

    def test_biweekly(self) -> None:
        rule = RecurrenceRule(PMFrequency.BIWEEKLY)
        assert next_occurrence(rule, date(2025, 1, 6)) == date(2025, 1, 20)

    def test_monthly_clamps_to_month_end(self) -> None:
        """Jan 31 -> Feb 28 -> Mar 31: clamping never drifts the cadence."""
        rule = RecurrenceRule(PMFrequency.MONTHLY, day_of_month=31)
        feb = next_occurrence(rule, date(2025, 1, 31))
        assert feb == date(2025, 2, 28)
        assert next_occurrence(rule, feb) == date(2025, 3, 31)

    def test_monthly_clamps_to_leap_day(self) -> None:
        rule = RecurrenceRule(PMFrequency.MONTHLY, day_of_month=31)
        assert next_occurrence(rule, date(2024, 1, 31)) == date(2024, 2, 29)

    def test_monthly_uses_following_month(self) -> None:
        rule = RecurrenceRule(PMFrequency.MONTHLY, day_of_month=15)
        assert next_occurrence(rule, date(2025, 3, 1)) == date(2025, 4, 15)

    def test_quarterly(self) -> None:
        rule = RecurrenceRule(PMFrequency.QUARTERLY, day_of_month=10)
        assert next_occurrence(rule, date(2025, 1, 10)) == date(2025, 4, 10)

    def test_semi_annually_crosses_year(self) -> None:
        rule = RecurrenceRule(PMFrequency.SEMI_ANNUALLY, day_of_month=30)
        assert next_occurrence(rule, date(2025, 8, 30)) == date(2026, 2, 28)

    @pytest.mark.parametrize(
        ("after", "expected"),
        [
            (date(2025, 1, 1), date(2025, 3, 15)),
            (date(2025, 3, 15), date(2025, 6, 15)),
            (date(2025, 4, 20), date(2025, 6, 15)),
            (date(2025, 11, 1), date(2025, 12, 15)),
            (date(2025, 12, 15), date(2026, 3, 15)),
        ],
    )
    def test_quarterly_aligned_to_month_of_year(self, after: date, expected: date) -> None:
        """month_of_year=3 runs the quarters Mar/Jun/Sep/Dec."""
        rule = RecurrenceRule(PMFrequency.QUARTERLY, day_of_month=15, month_of_year=3)
        assert next_occurrence(rule, after) == expected

    def test_semi_annually_aligned_to_month_of_year(self) -> None:
        rule = RecurrenceRule(PMFrequency.SEMI_ANNUALLY, day_of_month=31, month_of_year=1)
        july = next_occurrence(rule, date(2025, 2, 1))
        assert july == date(2025, 7, 31)
        assert next_occurrence(rule, july) == date(2026, 1, 31)

    def test_annually(self) -> None:
        rule = RecurrenceRule(PMFrequency.ANNUALLY, day_of_month=29, month_of_year=2)
        assert next_occurrence(rule, date(2024, 2, 29)) == date(2025, 2, 28)

    def test_accepts_frequency_value_string(self) -> None:
        rule = RecurrenceRule("daily", None, None, None)  # type: ignore[arg-type]
        assert next_occurrence(rule, date(2025, 1, 1)) == date(2025, 1, 2)


class TestOccurrencesInWindow:
    """Tests for projecting a rule onto a date window."""

    def test_one_monthly_occurrence_per_month(self) -> None:
        rule = RecurrenceRule(PMFrequency.MONTHLY, day_of_month=31)
        for month in range(1, 13):
            start, end = month_window(2025, month)
            occurrences = occurrences_in_window(rule, date(2025, 1, 31), start, end)
            assert len(occurrences) == 1, month

    def test_anchor_counts_as_occurrence(self) -> None:
        rule = RecurrenceRule(PMFrequency.WEEKLY, day_of_week=3)
        start, end = month_window(2025, 1)
        assert occurrences_in_window(rule, date(2025, 1, 8), start, end) == [
            date(2025, 1, 8),
            date(2025, 1, 15),
            date(2025, 1, 22),
            date(2025, 1, 29),
        ]

    def test_anchor_after_window_yields_nothing(self) -> None:
        rule = RecurrenceRule(PMFrequency.DAILY)
        assert occurrences_in_window(rule, date(2025, 3, 1), date(2025, 2, 1), date(2025, 2, 28)) == []

    def test_inverted_window_is_empty(self) -> None:
        rule = RecurrenceRule(PMFrequency.DAILY)
        assert occurrences_in_window(rule, date(2025, 1, 1), date(2025, 1, 10), date(2025, 1, 1)) == []

    def test_distant_window_daily(self) -> None:
        rule = RecurrenceRule(PMFrequency.DAILY)
        start, end = month_window(9998, 12)
        occurrences = occurrences_in_window(rule, date(2025, 1, 8), start, end)
        assert len(occurrences) == 31
        assert occurrences[0] == date(9998, 12, 1)
        assert occurrences[-1] == date(9998, 12, 31)

    def test_distant_window_weekly_keeps_weekday(self) -> None:
        rule = RecurrenceRule(PMFrequency.WEEKLY, day_of_week=3)
        start, end = month_window(9998, 12)
        occurrences = occurrences_in_window(rule, date(2025, 1, 8), start, end)
        assert len(occurrences) in (4, 5)
        assert all(d.isoweekday() % 7 == 3 for d in occurrences)
        assert occurrences[0] - start < timedelta(days=7)

    def test_distant_window_biweekly_stays_in_phase(self) -> None:
        rule = RecurrenceRule(PMFrequency.BIWEEKLY)
        anchor = date(2025, 1, 1)
        start, end = month_window(7000, 6)
        occurrences = occurrences_in_window(rule, anchor, start, end)
        assert occurrences
        assert all((d - anchor).days % 14 == 0 for d in occurrences)

    def test_distant_window_monthly_clamps_leap_day(self) -> None:
        rule = RecurrenceRule(PMFrequency.MONTHLY, day_of_month=31)
        start, end = month_window(2400, 2)
        assert occurrences_in_window(rule, date(2025, 1, 31), start, end) == [date(2400, 2, 29)]

    def test_distant_window_quarterly_alignment(self) -> None:
        rule = RecurrenceRule(PMFrequency.QUARTERLY, day_of_month=15, month_of_year=3)
        anchor = date(2025, 3, 15)
        assert occurrences_in_window(rule, anchor, *month_window(9000, 6)) == [date(9000, 6, 15)]
        assert occurrences_in_window(rule, anchor, *month_window(9000, 7)) == []

    def test_distant_window_annual_leap_day(self) -> None:
        rule = RecurrenceRule(PMFrequency.ANNUALLY, day_of_month=29, month_of_year=2)
        start, end = month_window(2800, 2)
        assert occurrences_in_window(rule, date(2025, 2, 28), start, end) == [date(2800, 2, 29)]

    def test_iter_occurrences_starts_at_anchor(self) -> None:
        rule = RecurrenceRule(PMFrequency.BIWEEKLY)
        occurrences = iter_occurrences(rule, date(2025, 1, 1))
        assert [next(occurrences) for _ in range(3)] == [
            date(2025, 1, 1),
            date(2025, 1, 15),
            date(2025, 1, 29),
        ]


class TestClassify:
    """Tests for due-state classification around 2025-06-10."""

    today = date(2025, 6, 10)

    def test_due_today(self) -> None:
        assert classify(date(2025, 6, 10), self.today) is DueStatus.DUE

    def test_overdue(self) -> None:
        assert classify(date(2025, 6, 9), self.today) is DueStatus.OVERDUE

    def test_long_overdue_never_expires(self) -> None:
        assert classify(date(2020, 1, 1), self.today) is DueStatus.OVERDUE

    def test_upcoming(self) -> None:
        assert classify(date(2025, 6, 11), self.today) is DueStatus.UPCOMING


class TestMonthWindow:
    """Tests for calendar month bounds."""

    def test_february_leap_year(self) -> None:
        assert month_window(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_december(self) -> None:
        assert month_window(2025, 12) == (date(2025, 12, 1), date(2025, 12, 31))


class TestRuleViolations:
    """Tests for frequency-specific field requirements."""

    def test_valid_weekly(self) -> None:
        assert rule_violations("weekly", 3, None, None) == []

    def test_weekly_requires_day_of_week(self) -> None:
        fields = [v.field for v in rule_violations("weekly", None, None, None)]
        assert fields == ["day_of_week"]

    @pytest.mark.parametrize("frequency", ["monthly", "quarterly", "semi_annually"])
    def test_month_based_requires_day_of_month(self, frequency: str) -> None:
        fields = [v.field for v in rule_violations(frequency, None, None, None)]
        assert fields == ["day_of_month"]

    def test_annually_requires_day_and_month(self) -> None:
        fields = {v.field for v in rule_violations("annually", None, None, None)}
        assert fields == {"day_of_month", "month_of_year"}

    def test_unknown_frequency(self) -> None:
        fields = [v.field for v in rule_violations("hourly", None, None, None)]
        assert fields == ["frequency"]

    def test_reports_every_range_violation(self) -> None:
        fields = {v.field for v in rule_violations("daily", 7, 32, 13)}
        assert fields == {"day_of_week", "day_of_month", "month_of_year"}

    def test_zero_day_of_month_is_out_of_range(self) -> None:
        violations = rule_violations("monthly", None, 0, None)
        assert [v.message for v in violations] == ["Must be between 1 and 31"]
