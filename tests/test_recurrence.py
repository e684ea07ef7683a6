"""
Tests for recurrence date calculation.
"""

from datetime import date, timedelta

import pytest

from gtdnota.recurrence import (
    RecurrencePattern,
    next_occurrence,
    parse_month_day_pairs,
    parse_month_days,
    parse_weekdays,
)


def test_weekly_next_listed_weekday():
    # 2025-10-31 is a Friday
    result = next_occurrence(RecurrencePattern.weekly, "Monday,Wednesday,Friday", date(2025, 10, 31))
    assert result == date(2025, 11, 3)


def test_weekly_same_weekday_is_one_week_later():
    result = next_occurrence(RecurrencePattern.weekly, "Friday", date(2025, 10, 31))
    assert result == date(2025, 11, 7)


def test_monthly_rolls_into_next_month():
    result = next_occurrence(RecurrencePattern.monthly, "5,15,25", date(2025, 10, 25))
    assert result == date(2025, 11, 5)


def test_monthly_skips_months_without_the_day():
    result = next_occurrence(RecurrencePattern.monthly, "31", date(2025, 1, 31))
    assert result == date(2025, 3, 31)


def test_yearly_month_day_pairs():
    result = next_occurrence(RecurrencePattern.yearly, "1-1,12-25", date(2025, 12, 25))
    assert result == date(2026, 1, 1)


def test_yearly_leap_day():
    result = next_occurrence(RecurrencePattern.yearly, "2-29", date(2024, 3, 1))
    assert result is None


def test_daily_ignores_config():
    assert next_occurrence(RecurrencePattern.daily, None, date(2025, 12, 31)) == date(2026, 1, 1)
    assert next_occurrence("daily", "whatever", date(2025, 1, 1)) == date(2025, 1, 2)


@pytest.mark.parametrize("pattern", ["weekly", "monthly", "yearly"])
def test_missing_or_empty_config_yields_none(pattern):
    assert next_occurrence(pattern, None, date(2025, 1, 1)) is None
    assert next_occurrence(pattern, "", date(2025, 1, 1)) is None


def test_unparseable_entries_are_skipped():
    assert next_occurrence("weekly", "monday, Funday , Wednesday", date(2025, 10, 31)) == date(2025, 11, 5)
    assert next_occurrence("monthly", "x,  10", date(2025, 10, 25)) == date(2025, 11, 10)
    assert next_occurrence("yearly", "13,2-x,3-1", date(2025, 1, 1)) == date(2025, 3, 1)


def test_wholly_unparseable_config_yields_none():
    assert next_occurrence("weekly", "Someday,Never", date(2025, 1, 1)) is None
    assert next_occurrence("monthly", "first,last", date(2025, 1, 1)) is None


def test_date_overflow_yields_none():
    assert next_occurrence("daily", None, date.max) is None
    assert next_occurrence("monthly", "1", date.max - timedelta(days=3)) is None


@pytest.mark.parametrize("pattern,config", [
    ("daily", None),
    ("weekly", "Tuesday,Saturday"),
    ("monthly", "1,10,20,28"),
    ("yearly", "3-14,7-4,11-30"),
])
def test_results_are_strictly_later(pattern, config):
    start = date(2024, 1, 1)
    for offset in range(0, 400, 7):
        from_date = start + timedelta(days=offset)
        result = next_occurrence(pattern, config, from_date)
        assert result is not None
        assert result > from_date


def test_parse_helpers():
    assert parse_weekdays(" Monday ,Sunday") == [0, 6]
    assert parse_month_days("1, 15,+25,-3") == [1, 15, 25]
    assert parse_month_day_pairs("12-25, 1-1 ,bad,1-2-3") == [(12, 25), (1, 1)]


def test_pattern_parse_error_message():
    with pytest.raises(ValueError, match="Valid patterns: daily, weekly, monthly, yearly"):
        RecurrencePattern.parse("hourly")


def test_requires_config():
    assert not RecurrencePattern.daily.requires_config
    assert RecurrencePattern.weekly.requires_config
