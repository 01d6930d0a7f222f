from datetime import date, datetime

import pytest

from src.attendance_engine.attendance_engine.core.enums import LookbackWindow
from src.attendance_engine.attendance_engine.core.exceptions import ValidationError
from src.attendance_engine.attendance_engine.reports.periods import (
    lookback_period,
    month_period,
    parse_month,
    parse_window,
    resolve_period,
)

TODAY = date(2024, 11, 20)


@pytest.mark.parametrize(
    "window, start",
    [
        (LookbackWindow.WEEK, date(2024, 11, 14)),
        (LookbackWindow.DAYS_30, date(2024, 10, 22)),
        (LookbackWindow.QUARTER, date(2024, 8, 21)),
        (LookbackWindow.HALF_YEAR, date(2024, 5, 21)),
    ],
)
def test_lookback_windows_end_today(window, start):
    period = lookback_period(window, today=TODAY)
    assert (period.start, period.end) == (start, TODAY)


def test_academic_year_window():
    period = lookback_period(LookbackWindow.ACADEMIC_YEAR, today=TODAY)
    assert (period.start, period.end) == (date(2024, 9, 1), date(2025, 8, 31))
    assert period.label == "Année 2024-2025"

    explicit = lookback_period(LookbackWindow.ACADEMIC_YEAR, today=TODAY, academic_year_label="2022-2023")
    assert explicit.start == date(2022, 9, 1)


def test_explicit_bounds_win_and_are_normalized():
    period = resolve_period(today=TODAY, start=date(2024, 9, 30), end=date(2024, 9, 1), window=LookbackWindow.DAYS_30)
    assert (period.start, period.end) == (date(2024, 9, 1), date(2024, 9, 30))


def test_default_is_last_week():
    period = resolve_period(today=TODAY)
    assert (period.start, period.end) == (date(2024, 11, 14), TODAY)


def test_month_period_bounds_are_inclusive():
    period = month_period(date(2024, 2, 10))
    assert period.label == "février 2024"
    assert period.bounds() == (datetime(2024, 2, 1), datetime(2024, 2, 29, 23, 59, 59, 999000))


def test_parse_helpers():
    assert parse_window("quarter") == LookbackWindow.QUARTER
    assert parse_window("") is None
    assert parse_month("2024-09", today=TODAY) == date(2024, 9, 1)
    assert parse_month(None, today=TODAY) == date(2024, 11, 1)
    with pytest.raises(ValidationError):
        parse_window("fortnight")
    with pytest.raises(ValidationError):
        parse_month("09/2024", today=TODAY)
