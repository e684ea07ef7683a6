"""
Recurrence date calculation for gtdnota.

A recurring nota carries a pattern (daily, weekly, monthly, yearly) and, for
every pattern except daily, a comma-separated configuration string:

- weekly: weekday names, e.g. "Monday,Wednesday,Friday"
- monthly: days of the month, e.g. "1,15,25"
- yearly: month-day pairs, e.g. "1-1,12-25"

Configuration parsing is lenient. Entries that do not parse are skipped, and
a configuration with no usable entry means there is no next occurrence.
"""

import re
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Iterator, List, Optional, Tuple, Union


class RecurrencePattern(str, Enum):
    """How a task repeats after completion."""

    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"

    @classmethod
    def parse(cls, value: str) -> "RecurrencePattern":
        """
        Parse a recurrence pattern name.

        Raises:
            ValueError: If the value is not one of the four pattern names
        """
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Invalid recurrence pattern '{value}'. "
                "Valid patterns: daily, weekly, monthly, yearly"
            ) from None

    @property
    def requires_config(self) -> bool:
        return self is not RecurrencePattern.daily


WEEKDAYS = {
    "Monday": 0,
    "Tuesday": 1,
    "Wednesday": 2,
    "Thursday": 3,
    "Friday": 4,
    "Saturday": 5,
    "Sunday": 6,
}

# Monthly and yearly patterns look at most one year ahead.
MAX_SCAN_DAYS = 366

_NUMBER = re.compile(r"\+?[0-9]+")


def _parse_number(text: str) -> Optional[int]:
    if not _NUMBER.fullmatch(text):
        return None
    return int(text)


def parse_weekdays(config: str) -> List[int]:
    """Parse weekday names into ``date.weekday()`` numbers."""
    days = []
    for part in config.split(","):
        weekday = WEEKDAYS.get(part.strip())
        if weekday is not None:
            days.append(weekday)
    return days


def parse_month_days(config: str) -> List[int]:
    """Parse day-of-month numbers."""
    days = []
    for part in config.split(","):
        day = _parse_number(part.strip())
        if day is not None:
            days.append(day)
    return days


def parse_month_day_pairs(config: str) -> List[Tuple[int, int]]:
    """Parse ``month-day`` pairs such as ``12-25``."""
    pairs = []
    for part in config.split(","):
        pieces = part.strip().split("-")
        if len(pieces) != 2:
            continue
        month = _parse_number(pieces[0])
        day = _parse_number(pieces[1])
        if month is None or day is None:
            continue
        pairs.append((month, day))
    return pairs


def _following_days(from_date: date, limit: int) -> Iterator[date]:
    """Yield up to ``limit`` consecutive days starting the day after ``from_date``."""
    current = from_date
    for _ in range(limit):
        try:
            current = current + timedelta(days=1)
        except OverflowError:
            return
        yield current


def _scan(from_date: date, limit: int, matches: Callable[[date], bool]) -> Optional[date]:
    for candidate in _following_days(from_date, limit):
        if matches(candidate):
            return candidate
    return None


def next_occurrence(pattern: Union[RecurrencePattern, str],
                    config: Optional[str],
                    from_date: date) -> Optional[date]:
    """
    Compute the next occurrence strictly after ``from_date``.

    Args:
        pattern: The recurrence pattern
        config: Pattern configuration (ignored for daily)
        from_date: The date to calculate from, usually the current start date

    Returns:
        The next occurrence, or None when the configuration is missing,
        empty or unparseable, or no matching day exists in the scan window
    """
    pattern = RecurrencePattern(pattern)

    if pattern is RecurrencePattern.daily:
        return next(_following_days(from_date, 1), None)

    if config is None:
        return None

    if pattern is RecurrencePattern.weekly:
        weekdays = set(parse_weekdays(config))
        if not weekdays:
            return None
        return _scan(from_date, 7, lambda d: d.weekday() in weekdays)

    if pattern is RecurrencePattern.monthly:
        month_days = set(parse_month_days(config))
        if not month_days:
            return None
        return _scan(from_date, MAX_SCAN_DAYS, lambda d: d.day in month_days)

    if pattern is RecurrencePattern.yearly:
        pairs = set(parse_month_day_pairs(config))
        if not pairs:
            return None
        return _scan(from_date, MAX_SCAN_DAYS, lambda d: (d.month, d.day) in pairs)

    raise AssertionError(f"Unhandled recurrence pattern: {pattern}")
