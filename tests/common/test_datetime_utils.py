from datetime import date, datetime

import pytest

from src.attendance_engine.attendance_engine.common.datetime_utils import (
    academic_first_year_for,
    academic_year_range,
    add_months,
    day_of_week_monday_first,
    end_of_day,
    iter_month_ranges,
    minutes_between,
    month_label,
    parse_hhmm,
    parse_iso_date,
    start_of_day,
    to_iso_date,
    week_range,
)


def test_iso_date_has_no_timezone_shift():
    d = date(2024, 12, 31)
    assert to_iso_date(d) == "2024-12-31"
    assert parse_iso_date("2024-12-31") == d


def test_day_of_week_is_monday_first():
    assert day_of_week_monday_first(date(2024, 9, 2)) == 1  # Monday
    assert day_of_week_monday_first(date(2024, 9, 3)) == 2
    assert day_of_week_monday_first(date(2024, 9, 8)) == 7  # Sunday


def test_day_bounds_are_inclusive():
    d = date(2024, 9, 3)
    assert start_of_day(d) == datetime(2024, 9, 3, 0, 0, 0)
    assert end_of_day(d) == datetime(2024, 9, 3, 23, 59, 59, 999000)


def test_week_range_runs_monday_to_sunday():
    assert week_range(date(2024, 9, 5)) == (date(2024, 9, 2), date(2024, 9, 8))
    assert week_range(date(2024, 9, 8)) == (date(2024, 9, 2), date(2024, 9, 8))


def test_add_months_clamps_day():
    assert add_months(date(2024, 5, 31), -3) == date(2024, 2, 29)
    assert add_months(date(2024, 1, 15), -6) == date(2023, 7, 15)


def test_academic_year_is_september_to_august():
    assert academic_year_range(2024) == (date(2024, 9, 1), date(2025, 8, 31))
    assert academic_first_year_for(date(2024, 9, 1)) == 2024
    assert academic_first_year_for(date(2025, 8, 31)) == 2024


def test_iter_month_ranges_covers_partial_months():
    ranges = list(iter_month_ranges(date(2024, 9, 15), date(2024, 11, 3)))
    assert ranges == [
        (date(2024, 9, 15), date(2024, 9, 30)),
        (date(2024, 10, 1), date(2024, 10, 31)),
        (date(2024, 11, 1), date(2024, 11, 3)),
    ]


def test_month_label_is_french():
    assert month_label(date(2024, 9, 1)) == "septembre 2024"


def test_parse_hhmm_and_minutes_between():
    assert parse_hhmm("08:30") == 510
    assert minutes_between("08:00", "10:00") == 120
    assert minutes_between("10:00", "08:00") == 0
    with pytest.raises(ValueError):
        parse_hhmm("8h30")
    with pytest.raises(ValueError):
        parse_hhmm("24:00")
