from datetime import date

from src.attendance_engine.attendance_engine.core.enums import Semester, SessionSource
from src.attendance_engine.attendance_engine.schedules.materializer import materialize_day
from src.attendance_engine.attendance_engine.schedules.model import ScheduleSlot

TUESDAY = date(2024, 9, 3)
SUNDAY = date(2024, 9, 8)


def _slot(day, subject, start, end, **kw):
    return ScheduleSlot(day_of_week=day, subject_id=subject, subject_label=subject.title(), start=start, end=end, **kw)


def _materialize(slots, on_date):
    return materialize_day(slots, class_id="C1", academic_year_id="2024-2025", semester=Semester.S1, on_date=on_date)


def test_only_slots_of_that_weekday_are_materialized():
    slots = [_slot(2, "algorithms", "08:00", "10:00"), _slot(3, "networks", "08:00", "10:00")]

    sessions = _materialize(slots, TUESDAY)

    assert [s.subject_id for s in sessions] == ["algorithms"]
    s = sessions[0]
    assert s.date == TUESDAY
    assert s.day_of_week == 2
    assert s.class_id == "C1"
    assert s.semester == Semester.S1
    assert s.source == SessionSource.TIMETABLE


def test_sunday_never_has_sessions():
    slots = [_slot(d, "x", "08:00", "10:00") for d in range(1, 8)]
    assert _materialize(slots, SUNDAY) == []


def test_empty_template_gives_empty_day():
    assert _materialize([], TUESDAY) == []


def test_sessions_sorted_by_start_then_end_stable_on_ties():
    slots = [
        _slot(2, "late", "14:00", "16:00"),
        _slot(2, "long", "08:00", "12:00"),
        _slot(2, "first_tie", "08:00", "10:00"),
        _slot(2, "second_tie", "08:00", "10:00"),
    ]

    sessions = _materialize(slots, TUESDAY)

    assert [s.subject_id for s in sessions] == ["first_tie", "second_tie", "long", "late"]


def test_occurrence_key_matches_attendance_identity():
    s = _materialize([_slot(2, "algorithms", "08:00", "10:00")], TUESDAY)[0]
    assert s.key.to_dict() == {
        "class_id": "C1",
        "academic_year_id": "2024-2025",
        "semester": "S1",
        "date": "2024-09-03",
        "subject_id": "algorithms",
        "start": "08:00",
        "end": "10:00",
    }
