from datetime import date

from src.attendance_engine.attendance_engine.calendar_rules.model import CalendarRules, ClosureRule, SessionOverride
from src.attendance_engine.attendance_engine.calendar_rules.rules import evaluate_neutralization, extra_sessions_for_day
from src.attendance_engine.attendance_engine.core.enums import ClosureScope, OverrideType, Semester, SessionSource

D = date(2024, 11, 12)


def _evaluate(rules, **kw):
    params = dict(on_date=D, class_id="C1", subject_id="algo", start="08:00", end="10:00", filiere_id="INFO")
    params.update(kw)
    return evaluate_neutralization(rules, **params)


def test_no_rules_means_session_happens():
    assert not _evaluate(CalendarRules()).neutralized


def test_outside_academic_year_is_neutralized():
    rules = CalendarRules(year_start=date(2024, 9, 1), year_end=date(2025, 8, 31))
    assert _evaluate(rules, on_date=date(2024, 8, 31)).neutralized
    assert not _evaluate(rules, on_date=date(2024, 9, 1)).neutralized
    assert not _evaluate(rules, on_date=date(2025, 8, 31)).neutralized


def test_global_closure_covers_date_range():
    rules = CalendarRules(
        closures=(ClosureRule(closure_id=1, scope=ClosureScope.GLOBAL, start=date(2024, 11, 11), end=date(2024, 11, 15), label="Congés"),)
    )
    status = _evaluate(rules)
    assert status.neutralized
    assert status.reason == "Congés"
    assert not _evaluate(rules, on_date=date(2024, 11, 16)).neutralized


def test_closure_with_hours_needs_overlap():
    rules = CalendarRules(
        closures=(
            ClosureRule(closure_id=1, scope=ClosureScope.CLASS, class_id="C1", start=D, end=D, start_time="10:00", end_time="12:00"),
        )
    )
    assert not _evaluate(rules).neutralized  # 08:00-10:00 only touches the closure
    assert _evaluate(rules, start="09:00", end="11:00").neutralized
    assert not _evaluate(rules, class_id="C2", start="09:00", end="11:00").neutralized


def test_subject_and_filiere_scopes():
    rules = CalendarRules(
        closures=(
            ClosureRule(closure_id=1, scope=ClosureScope.SUBJECT, subject_id="db", start=D, end=D),
            ClosureRule(closure_id=2, scope=ClosureScope.FILIERE, filiere_id="MATH", start=D, end=D),
        )
    )
    assert not _evaluate(rules).neutralized
    assert _evaluate(rules, subject_id="db").neutralized
    assert _evaluate(rules, filiere_id="MATH").neutralized


def test_reschedule_neutralizes_source_and_adds_target():
    target = date(2024, 11, 14)
    rules = CalendarRules(
        overrides=(
            SessionOverride(
                override_id=1,
                override_type=OverrideType.RESCHEDULE,
                class_id="C1",
                subject_id="algo",
                date=D,
                start="08:00",
                end="10:00",
                new_date=target,
                new_start="14:00",
                new_end="16:00",
            ),
        )
    )

    status = _evaluate(rules)
    assert status.neutralized
    assert status.replaced == (target, "14:00", "16:00")

    extra = extra_sessions_for_day(
        rules, class_id="C1", academic_year_id="2024-2025", semester=Semester.S1, on_date=target, subject_labels={"algo": "Algorithms"}
    )
    assert len(extra) == 1
    assert (extra[0].start, extra[0].end, extra[0].source) == ("14:00", "16:00", SessionSource.RESCHEDULED)
    assert extra[0].subject_label == "Algorithms"
    assert extra[0].day_of_week == 4
