from datetime import date

from src.attendance_engine.attendance_engine.attendance.model import AbsenceEntry, AttendanceRecord
from src.attendance_engine.attendance_engine.core.enums import Semester
from src.attendance_engine.attendance_engine.reports.absence_aggregator import (
    AbsenceScope,
    aggregate_absences,
    filter_summaries,
    session_absentees,
)


def _entry(student_id, name, start="08:00", end="10:00"):
    return AbsenceEntry(student_id=student_id, student_full_name=name, start=start, end=end)


def _record(on_date, absences, *, class_id="C1", class_label="L1 Info", start="08:00", end="10:00", year="2024-2025"):
    return AttendanceRecord(
        academic_year_id=year,
        class_id=class_id,
        class_label=class_label,
        semester=Semester.S1,
        date=on_date,
        day_of_week=on_date.isoweekday(),
        start=start,
        end=end,
        subject_id="algo",
        subject_label="Algorithms",
        absences={sid: tuple(entries) for sid, entries in absences.items()},
    )


def _scope(start=date(2024, 9, 1), end=date(2024, 9, 30), **kw):
    return AbsenceScope(start=start, end=end, **kw)


def test_session_rows_sorted_by_count_desc():
    record = _record(
        date(2024, 9, 3),
        {
            "M1234": [_entry("M1234", "Ana")],
            "M5678": [_entry("M5678", "Bo"), _entry("M5678", "Bo")],
        },
    )

    rows = session_absentees(record)

    assert [(r.student_id, r.total_count, len(r.entries)) for r in rows] == [("M5678", 2, 2), ("M1234", 1, 1)]


def test_session_without_record_has_no_absentees():
    assert session_absentees(None) == []


def test_range_accumulates_across_records():
    week1 = _record(date(2024, 9, 3), {"M1234": [_entry("M1234", "Ana")]})
    week2 = _record(date(2024, 9, 10), {"M1234": [_entry("M1234", "Ana"), _entry("M1234", "Ana", "10:00", "11:00")]})

    rows = aggregate_absences([week2, week1], _scope())

    assert len(rows) == 1
    row = rows[0]
    assert row.total_count == 3
    assert len(row.entries) == 3
    assert row.total_minutes == 120 + 120 + 60
    assert [d.date for d in row.entries] == [date(2024, 9, 3), date(2024, 9, 10), date(2024, 9, 10)]


def test_range_is_additive_over_disjoint_subranges():
    records = [
        _record(date(2024, 9, 2), {"A": [_entry("A", "Ana")], "B": [_entry("B", "Bo")]}),
        _record(date(2024, 9, 16), {"A": [_entry("A", "Ana")]}),
        _record(date(2024, 9, 30), {"B": [_entry("B", "Bo")], "C": [_entry("C", "Cy")]}),
    ]

    whole = {r.student_id: r.total_count for r in aggregate_absences(records, _scope())}
    first = {r.student_id: r.total_count for r in aggregate_absences(records, _scope(end=date(2024, 9, 15)))}
    second = {r.student_id: r.total_count for r in aggregate_absences(records, _scope(start=date(2024, 9, 16)))}

    for student_id, count in whole.items():
        assert count == first.get(student_id, 0) + second.get(student_id, 0)


def test_aggregation_is_idempotent_and_order_independent():
    records = [
        _record(date(2024, 9, 3), {"A": [_entry("A", "Ana")]}),
        _record(date(2024, 9, 4), {"B": [_entry("B", "Bo")], "A": [_entry("A", "Ana")]}),
    ]
    assert aggregate_absences(records, _scope()) == aggregate_absences(list(reversed(records)), _scope())
    assert aggregate_absences(records, _scope()) == aggregate_absences(records, _scope())


def test_range_bounds_are_inclusive():
    records = [
        _record(date(2024, 8, 31), {"A": [_entry("A", "Ana")]}),
        _record(date(2024, 9, 1), {"A": [_entry("A", "Ana")]}),
        _record(date(2024, 9, 30), {"A": [_entry("A", "Ana")]}),
        _record(date(2024, 10, 1), {"A": [_entry("A", "Ana")]}),
    ]
    assert aggregate_absences(records, _scope())[0].total_count == 2


def test_class_scope_filters_records():
    records = [
        _record(date(2024, 9, 3), {"A": [_entry("A", "Ana")]}, class_id="C1"),
        _record(date(2024, 9, 3), {"B": [_entry("B", "Bo")]}, class_id="C2", class_label="L2"),
    ]
    rows = aggregate_absences(records, _scope(class_id="C2"))
    assert [(r.student_id, r.class_label) for r in rows] == [("B", "L2")]


def test_ties_break_on_name_ignoring_case_and_accents():
    record = _record(
        date(2024, 9, 3),
        {
            "3": [_entry("3", "zoé")],
            "1": [_entry("1", "Émile")],
            "2": [_entry("2", "adam")],
        },
    )
    assert [r.student_full_name for r in session_absentees(record)] == ["adam", "Émile", "zoé"]


def test_empty_range_and_zero_absence_students():
    assert aggregate_absences([], _scope()) == []
    record = _record(date(2024, 9, 3), {"A": []})
    assert aggregate_absences([record], _scope()) == []


def test_full_name_comes_from_earliest_session():
    records = [
        _record(date(2024, 9, 10), {"A": [_entry("A", "Ana Maria Diop")]}),
        _record(date(2024, 9, 3), {"A": [_entry("A", "Ana Diop")]}),
    ]
    assert aggregate_absences(records, _scope())[0].student_full_name == "Ana Diop"


def test_filter_summaries_by_name_or_id():
    record = _record(date(2024, 9, 3), {"M1": [_entry("M1", "Ana Diop")], "M2": [_entry("M2", "Bo Sall")]})
    rows = session_absentees(record)
    assert [r.student_id for r in filter_summaries(rows, "diop")] == ["M1"]
    assert [r.student_id for r in filter_summaries(rows, "m2")] == ["M2"]
    assert filter_summaries(rows, "") == rows
