"""Decide whether a session actually takes place, and which extra sessions a day gets.

A session is neutralized when it falls outside the academic year bounds, is
covered by a closure, or was cancelled / rescheduled by an override. Makeup
overrides and reschedule targets add sessions to the day they land on.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from ..common.datetime_utils import day_of_week_monday_first, parse_hhmm
from ..core.enums import ClosureScope, OverrideType, Semester, SessionSource
from ..schedules.model import SessionOccurrence
from .model import NOT_NEUTRALIZED, CalendarRules, ClosureRule, Neutralization, SessionOverride


def _times_overlap(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    return parse_hhmm(a_start) < parse_hhmm(b_end) and parse_hhmm(b_start) < parse_hhmm(a_end)


def _closure_applies(
    rule: ClosureRule,
    *,
    on_date: date,
    class_id: str,
    subject_id: str,
    start: str,
    end: str,
    filiere_id: Optional[str],
) -> bool:
    if not (rule.start <= on_date <= rule.end):
        return False

    if rule.scope == ClosureScope.FILIERE and rule.filiere_id != filiere_id:
        return False
    if rule.scope == ClosureScope.CLASS and rule.class_id != class_id:
        return False
    if rule.scope == ClosureScope.SUBJECT and (rule.class_id not in (None, class_id) or rule.subject_id != subject_id):
        return False

    if rule.start_time and rule.end_time:
        return _times_overlap(rule.start_time, rule.end_time, start, end)
    return True


def _same_session(o: SessionOverride, *, on_date: date, class_id: str, subject_id: str, start: str, end: str) -> bool:
    return (
        o.class_id == class_id
        and o.subject_id == subject_id
        and o.date == on_date
        and o.start == start
        and o.end == end
    )


def evaluate_neutralization(
    rules: CalendarRules,
    *,
    on_date: date,
    class_id: str,
    subject_id: str,
    start: str,
    end: str,
    filiere_id: Optional[str] = None,
) -> Neutralization:
    if rules.year_start and on_date < rules.year_start:
        return Neutralization(neutralized=True, reason="Hors année académique")
    if rules.year_end and on_date > rules.year_end:
        return Neutralization(neutralized=True, reason="Hors année académique")

    for rule in rules.closures:
        if _closure_applies(
            rule,
            on_date=on_date,
            class_id=class_id,
            subject_id=subject_id,
            start=start,
            end=end,
            filiere_id=filiere_id,
        ):
            return Neutralization(neutralized=True, reason=rule.label or "Fermeture")

    for o in rules.overrides:
        if not _same_session(o, on_date=on_date, class_id=class_id, subject_id=subject_id, start=start, end=end):
            continue
        if o.override_type == OverrideType.CANCEL:
            return Neutralization(neutralized=True, reason=o.reason or "Séance annulée")
        if o.override_type == OverrideType.RESCHEDULE and o.new_date and o.new_start and o.new_end:
            return Neutralization(
                neutralized=True,
                reason=o.reason or "Séance reportée",
                replaced=(o.new_date, o.new_start, o.new_end),
            )

    return NOT_NEUTRALIZED


def evaluate_session(rules: CalendarRules, session: SessionOccurrence, *, filiere_id: Optional[str] = None) -> Neutralization:
    return evaluate_neutralization(
        rules,
        on_date=session.date,
        class_id=session.class_id,
        subject_id=session.subject_id,
        start=session.start,
        end=session.end,
        filiere_id=filiere_id,
    )


def extra_sessions_for_day(
    rules: CalendarRules,
    *,
    class_id: str,
    academic_year_id: str,
    semester: Semester,
    on_date: date,
    subject_labels: Optional[dict] = None,
) -> List[SessionOccurrence]:
    """Makeup sessions dated `on_date` plus reschedule targets landing on it."""

    labels = subject_labels or {}
    day = day_of_week_monday_first(on_date)
    out: List[SessionOccurrence] = []

    for o in rules.overrides:
        if o.class_id != class_id:
            continue

        if o.override_type == OverrideType.MAKEUP and o.date == on_date:
            start, end, source = o.start, o.end, SessionSource.MAKEUP
        elif o.override_type == OverrideType.RESCHEDULE and o.new_date == on_date and o.new_start and o.new_end:
            start, end, source = o.new_start, o.new_end, SessionSource.RESCHEDULED
        else:
            continue

        out.append(
            SessionOccurrence(
                class_id=class_id,
                academic_year_id=academic_year_id,
                date=on_date,
                day_of_week=day,
                semester=semester,
                subject_id=o.subject_id,
                subject_label=o.subject_label or labels.get(o.subject_id, ""),
                start=start,
                end=end,
                room=o.room or "",
                teacher_name=o.teacher_name or "",
                source=source,
            )
        )
    return out
