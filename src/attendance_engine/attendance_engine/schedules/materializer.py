"""Turn a weekly timetable into the sessions of one calendar date."""

from __future__ import annotations

from datetime import date
from typing import Iterable, List

from ..common.datetime_utils import day_of_week_monday_first
from ..core.constants import SUNDAY
from ..core.enums import Semester, SessionSource
from .model import ScheduleSlot, SessionOccurrence


def sort_sessions(sessions: Iterable[SessionOccurrence]) -> List[SessionOccurrence]:
    # Zero-padded "HH:MM" sorts correctly as text; sorted() is stable so
    # identical (start, end) keep their source order.
    return sorted(sessions, key=lambda s: (s.start, s.end))


def materialize_day(
    slots: Iterable[ScheduleSlot],
    *,
    class_id: str,
    academic_year_id: str,
    semester: Semester,
    on_date: date,
) -> List[SessionOccurrence]:
    day = day_of_week_monday_first(on_date)
    if day == SUNDAY:
        return []

    occurrences = [
        SessionOccurrence(
            class_id=class_id,
            academic_year_id=academic_year_id,
            date=on_date,
            day_of_week=day,
            semester=semester,
            subject_id=slot.subject_id,
            subject_label=slot.subject_label,
            start=slot.start,
            end=slot.end,
            room=slot.room,
            teacher_name=slot.teacher_name,
            source=SessionSource.TIMETABLE,
        )
        for slot in slots
        if int(slot.day_of_week) == day
    ]
    return sort_sessions(occurrences)
