"""Calendar helpers: local calendar dates only, no timezone conversion."""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Tuple

from ..core.constants import (
    ACADEMIC_YEAR_END_DAY,
    ACADEMIC_YEAR_END_MONTH,
    ACADEMIC_YEAR_START_MONTH,
    MONTH_NAMES_FR,
)

END_OF_DAY = time(23, 59, 59, 999000)


def to_iso_date(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def day_of_week_monday_first(value: date) -> int:
    """Monday=1 ... Sunday=7."""
    return value.isoweekday()


def start_of_day(value: date) -> datetime:
    return datetime.combine(_as_date(value), time.min)


def end_of_day(value: date) -> datetime:
    """Inclusive upper bound of the day (23:59:59.999)."""
    return datetime.combine(_as_date(value), END_OF_DAY)


def add_days(value: date, n: int) -> date:
    return _as_date(value) + timedelta(days=n)


def add_months(value: date, n: int) -> date:
    """Shift by whole calendar months, clamping the day to the target month."""
    value = _as_date(value)
    month_index = value.year * 12 + (value.month - 1) + n
    year, month = divmod(month_index, 12)
    month += 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, last))


def week_range(value: date) -> Tuple[date, date]:
    """Monday..Sunday of the week containing `value`."""
    value = _as_date(value)
    monday = value - timedelta(days=day_of_week_monday_first(value) - 1)
    return monday, monday + timedelta(days=6)


def month_range(value: date) -> Tuple[date, date]:
    value = _as_date(value)
    last = calendar.monthrange(value.year, value.month)[1]
    return date(value.year, value.month, 1), date(value.year, value.month, last)


def iter_month_ranges(start: date, end: date):
    """Yield (first, last) date pairs covering [start, end], one per calendar month."""
    cursor = _as_date(start)
    end = _as_date(end)
    while cursor <= end:
        _, last = month_range(cursor)
        yield cursor, min(last, end)
        cursor = last + timedelta(days=1)


def academic_year_range(first_year: int) -> Tuple[date, date]:
    """[Sep 1 Y1, Aug 31 Y1+1]. Fixed convention."""
    return (
        date(first_year, ACADEMIC_YEAR_START_MONTH, 1),
        date(first_year + 1, ACADEMIC_YEAR_END_MONTH, ACADEMIC_YEAR_END_DAY),
    )


def academic_first_year_for(value: date) -> int:
    value = _as_date(value)
    return value.year if value.month >= ACADEMIC_YEAR_START_MONTH else value.year - 1


def month_label(value: date) -> str:
    """e.g. 'septembre 2024'."""
    return f"{MONTH_NAMES_FR[value.month - 1]} {value.year}"


def parse_hhmm(value: str) -> int:
    """Parse an 'HH:MM' string into minutes since midnight.

    Raises ValueError on anything that is not two numeric parts within range.
    """
    parts = (value or "").strip().split(":")
    if len(parts) != 2 or not parts[0].isdigit() or not parts[1].isdigit():
        raise ValueError(f"Invalid HH:MM value: {value!r}")
    hours, minutes = int(parts[0]), int(parts[1])
    if hours > 23 or minutes > 59:
        raise ValueError(f"Invalid HH:MM value: {value!r}")
    return hours * 60 + minutes


def minutes_between(start: str, end: str) -> int:
    """Duration from start to end in minutes, clamped to >= 0."""
    return max(0, parse_hhmm(end) - parse_hhmm(start))


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value
