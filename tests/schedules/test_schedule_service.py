from dataclasses import replace
from datetime import date

import pytest

from src.attendance_engine.attendance_engine.calendar_rules.model import CalendarRules, ClosureRule, SessionOverride
from src.attendance_engine.attendance_engine.core.enums import ClosureScope, OverrideType, Semester, SessionSource
from src.attendance_engine.attendance_engine.core.exceptions import NotFoundError, ValidationError
from src.attendance_engine.attendance_engine.schedules.model import ClassInfo, ScheduleSlot, SessionKey
from src.attendance_engine.attendance_engine.schedules.service import ScheduleService

YEAR = "2024-2025"
TUESDAY = date(2024, 9, 3)


@pytest.fixture
def service(schedules_repo, rules_repo):
    schedules_repo.classes["C1"] = ClassInfo(class_id="C1", label="L1 Info", academic_year_id=YEAR, filiere_id="INFO")
    schedules_repo.slots[("C1", YEAR, Semester.S1)] = [
        ScheduleSlot(day_of_week=2, subject_id="algo", subject_label="Algorithms", start="08:00", end="10:00"),
        ScheduleSlot(day_of_week=2, subject_id="db", subject_label="Databases", start="10:15", end="12:15"),
    ]
    return ScheduleService(schedules_repo, rules_repo)


def _day(service, on_date=TUESDAY):
    return service.sessions_for_day(class_id="C1", academic_year_id=YEAR, semester=Semester.S1, on_date=on_date)


def test_day_sessions_are_tagged_with_scope(service):
    day = _day(service)
    assert [s.occurrence.subject_id for s in day.sessions] == ["algo", "db"]
    assert day.day_of_week == 2
    assert day.scope.to_dict()["kind"] == "day_sessions"
    assert not any(s.neutralized for s in day.sessions)


def test_cancel_override_neutralizes_session(service, rules_repo):
    rules_repo.rules[YEAR] = CalendarRules(
        overrides=(
            SessionOverride(
                override_id=1,
                override_type=OverrideType.CANCEL,
                class_id="C1",
                subject_id="algo",
                date=TUESDAY,
                start="08:00",
                end="10:00",
                reason="Enseignant absent",
            ),
        )
    )

    day = _day(service)

    algo = day.sessions[0]
    assert algo.neutralized
    assert algo.reason == "Enseignant absent"
    assert not day.sessions[1].neutralized


def test_filiere_closure_applies_through_class_info(service, rules_repo):
    rules_repo.rules[YEAR] = CalendarRules(
        closures=(
            ClosureRule(
                closure_id=1,
                scope=ClosureScope.FILIERE,
                filiere_id="INFO",
                start=TUESDAY,
                end=TUESDAY,
                label="Journée pédagogique",
            ),
        )
    )
    assert all(s.neutralized for s in _day(service).sessions)


def test_makeup_is_added_and_sorted(service):
    service.add_makeup(
        class_id="C1",
        academic_year_id=YEAR,
        subject_id="algo",
        on_date=TUESDAY,
        start="09:00",
        end="10:00",
    )

    sessions = _day(service).sessions

    assert [(s.occurrence.start, s.occurrence.source) for s in sessions] == [
        ("08:00", SessionSource.TIMETABLE),
        ("09:00", SessionSource.MAKEUP),
        ("10:15", SessionSource.TIMETABLE),
    ]
    assert sessions[1].occurrence.subject_label == "Algorithms"


def test_add_makeup_validates_times(service):
    with pytest.raises(ValidationError):
        service.add_makeup(class_id="C1", academic_year_id=YEAR, subject_id="algo", on_date=TUESDAY, start="10:00", end="09:00")
    with pytest.raises(ValidationError):
        service.add_makeup(class_id="C1", academic_year_id=YEAR, subject_id="algo", on_date=TUESDAY, start="9h", end="10:00")


def test_find_session_requires_exact_key(service):
    key = SessionKey(class_id="C1", academic_year_id=YEAR, semester=Semester.S1, date=TUESDAY, subject_id="algo", start="08:00", end="10:00")
    assert service.find_session(key).occurrence.subject_label == "Algorithms"

    with pytest.raises(NotFoundError):
        service.find_session(replace(key, end="09:59"))
