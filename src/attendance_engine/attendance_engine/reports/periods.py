from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

from ..common.datetime_utils import (
    academic_first_year_for,
    academic_year_range,
    add_days,
    add_months,
    end_of_day,
    month_label,
    month_range,
    start_of_day,
    to_iso_date,
)
from ..common.validators import normalize_date_range, validate_academic_year_label
from ..core.constants import DEFAULT_LOOKBACK_DAYS
from ..core.enums import LookbackWindow
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Period:
    start: date
    end: date
    label: str

    def bounds(self) -> Tuple[datetime, datetime]:
        return start_of_day(self.start), end_of_day(self.end)


def _range_label(start: date, end: date) -> str:
    if start == end:
        return to_iso_date(start)
    return f"{to_iso_date(start)} → {to_iso_date(end)}"


def custom_period(start: date, end: date) -> Period:
    start, end = normalize_date_range(start, end)
    return Period(start=start, end=end, label=_range_label(start, end))


def day_period(on_date: date) -> Period:
    return Period(start=on_date, end=on_date, label=to_iso_date(on_date))


def month_period(ref: date) -> Period:
    first, last = month_range(ref)
    return Period(start=first, end=last, label=month_label(first))


def lookback_period(
    window: LookbackWindow,
    *,
    today: date,
    academic_year_label: Optional[str] = None,
) -> Period:
    """Default windows end today (inclusive); the academic year is Sep 1 to Aug 31."""

    if window == LookbackWindow.WEEK:
        return custom_period(add_days(today, -(DEFAULT_LOOKBACK_DAYS - 1)), today)
    if window == LookbackWindow.DAYS_30:
        return custom_period(add_days(today, -29), today)
    if window == LookbackWindow.QUARTER:
        return custom_period(add_days(add_months(today, -3), 1), today)
    if window == LookbackWindow.HALF_YEAR:
        return custom_period(add_days(add_months(today, -6), 1), today)

    if academic_year_label:
        label, first_year = validate_academic_year_label(academic_year_label)
    else:
        first_year = academic_first_year_for(today)
        label = f"{first_year}-{first_year + 1}"
    start, end = academic_year_range(first_year)
    return Period(start=start, end=end, label=f"Année {label}")


def resolve_period(
    *,
    today: date,
    start: Optional[date] = None,
    end: Optional[date] = None,
    window: Optional[LookbackWindow] = None,
    academic_year_label: Optional[str] = None,
) -> Period:
    """Explicit bounds win; a single bound is paired with today; otherwise a lookback window."""

    if start and end:
        return custom_period(start, end)
    if start:
        return custom_period(start, today)
    if end:
        return custom_period(add_days(end, -(DEFAULT_LOOKBACK_DAYS - 1)), end)
    return lookback_period(window or LookbackWindow.WEEK, today=today, academic_year_label=academic_year_label)


def parse_window(value: Optional[str]) -> Optional[LookbackWindow]:
    if value is None or not value.strip():
        return None
    try:
        return LookbackWindow(value.strip())
    except ValueError:
        raise ValidationError("Période invalide (week, 30d, quarter, half_year, academic_year)")


def parse_month(value: Optional[str], *, today: date) -> date:
    """'YYYY-MM' -> first day of that month; blank means the current month."""
    if value is None or not value.strip():
        return today.replace(day=1)
    try:
        return datetime.strptime(value.strip(), "%Y-%m").date()
    except ValueError:
        raise ValidationError("Mois invalide (YYYY-MM)")

