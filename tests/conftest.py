from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

import pytest

from src.attendance_engine.attendance_engine.academic_years.model import AcademicYear
from src.attendance_engine.attendance_engine.attendance.model import AttendanceRecord
from src.attendance_engine.attendance_engine.calendar_rules.model import CalendarRules, SessionOverride
from src.attendance_engine.attendance_engine.container import wire_container
from src.attendance_engine.attendance_engine.core.enums import OverrideType, Semester
from src.attendance_engine.attendance_engine.schedules.model import ClassInfo, ScheduleSlot, SessionKey
from src.attendance_engine.attendance_engine.signins.model import Teacher, TeacherSignIn


class InMemoryAttendance:
    def __init__(self, records=(), *, supports_compound_filters: bool = True):
        self.supports_compound_filters = supports_compound_filters
        self._by_key: Dict[SessionKey, AttendanceRecord] = {}
        self._id = 0
        self.range_calls: List[dict] = []
        for record in records:
            self.save(record)

    def get(self, key: SessionKey) -> Optional[AttendanceRecord]:
        return self._by_key.get(key)

    def list_range(self, *, start: date, end: date, class_id=None, academic_year_id=None):
        self.range_calls.append(
            {"start": start, "end": end, "class_id": class_id, "academic_year_id": academic_year_id}
        )
        out = [r for r in self._by_key.values() if start <= r.date <= end]
        if class_id is not None:
            out = [r for r in out if r.class_id == class_id]
        if academic_year_id is not None:
            out = [r for r in out if r.academic_year_id == academic_year_id]
        return out

    def save(self, record: AttendanceRecord) -> int:
        existing = self._by_key.get(record.key)
        if existing and existing.record_id:
            record_id = existing.record_id
        else:
            self._id += 1
            record_id = self._id
        self._by_key[record.key] = replace(record, record_id=record_id)
        return record_id


class InMemorySchedules:
    def __init__(self, slots=None, classes=None):
        # (class_id, year_id, semester) -> [ScheduleSlot]
        self.slots: Dict[Tuple[str, str, Semester], List[ScheduleSlot]] = slots or {}
        self.classes: Dict[str, ClassInfo] = classes or {}

    def list_slots(self, *, class_id: str, academic_year_id: str, semester: Semester):
        return list(self.slots.get((class_id, academic_year_id, semester), []))

    def get_class(self, class_id: str) -> Optional[ClassInfo]:
        return self.classes.get(class_id)


class InMemoryCalendarRules:
    def __init__(self, rules=None):
        self.rules: Dict[str, CalendarRules] = rules or {}
        self._id = 0

    def load(self, academic_year_id: str) -> CalendarRules:
        return self.rules.get(academic_year_id, CalendarRules())

    def add_override(self, *, academic_year_id, override_type: OverrideType, class_id, subject_id, on_date, start, end,
                     subject_label=None, room=None, teacher_name=None, reason=None) -> int:
        self._id += 1
        current = self.load(academic_year_id)
        override = SessionOverride(
            override_id=self._id,
            override_type=override_type,
            class_id=class_id,
            subject_id=subject_id,
            date=on_date,
            start=start,
            end=end,
            subject_label=subject_label,
            room=room,
            teacher_name=teacher_name,
            reason=reason,
        )
        self.rules[academic_year_id] = replace(current, overrides=current.overrides + (override,))
        return self._id


class InMemoryAcademicYears:
    def __init__(self, years=()):
        self._years: Dict[str, AcademicYear] = {y.year_id: y for y in years}

    def list_all(self):
        return sorted(self._years.values(), key=lambda y: y.label, reverse=True)

    def get(self, year_id: str) -> Optional[AcademicYear]:
        return self._years.get(year_id)

    def create(self, *, label: str, start_date: date, end_date: date) -> AcademicYear:
        year = AcademicYear(year_id=label, label=label, start_date=start_date, end_date=end_date)
        self._years[label] = year
        return year


class InMemorySignIns:
    def __init__(self, signins=()):
        self.signins: List[TeacherSignIn] = list(signins)

    def list_between(self, *, start: datetime, end: datetime):
        return sorted(
            (s for s in self.signins if start <= s.signed_at <= end),
            key=lambda s: (s.signed_at, s.signin_id),
        )


class InMemoryTeachers:
    def __init__(self, teachers=()):
        self.teachers: List[Teacher] = list(teachers)

    def list_all(self):
        return list(self.teachers)


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def schedules_repo():
    return InMemorySchedules()


@pytest.fixture
def rules_repo():
    return InMemoryCalendarRules()


@pytest.fixture
def years_repo():
    return InMemoryAcademicYears()


@pytest.fixture
def signins_repo():
    return InMemorySignIns()


@pytest.fixture
def teachers_repo():
    return InMemoryTeachers()


@pytest.fixture
def container(attendance_repo, schedules_repo, rules_repo, years_repo, signins_repo, teachers_repo):
    return wire_container(
        academic_years_repo=years_repo,
        schedules_repo=schedules_repo,
        calendar_rules_repo=rules_repo,
        attendance_repo=attendance_repo,
        signins_repo=signins_repo,
        teachers_repo=teachers_repo,
        partition_workers=2,
        institution_name="Institut Test",
    )
