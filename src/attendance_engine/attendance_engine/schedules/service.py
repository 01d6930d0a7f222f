from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from ..calendar_rules.model import CalendarRules
from ..calendar_rules.repository import CalendarRulesRepository
from ..calendar_rules.rules import evaluate_session, extra_sessions_for_day
from ..common.datetime_utils import day_of_week_monday_first, minutes_between
from ..common.scoping import QueryScope
from ..common.validators import require_hhmm, require_non_empty
from ..core.enums import OverrideType, Semester
from ..core.exceptions import NotFoundError, ValidationError
from .materializer import materialize_day, sort_sessions
from .model import ScheduledSession, SessionKey
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DaySchedule:
    scope: QueryScope
    date: date
    day_of_week: int
    sessions: List[ScheduledSession]


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository, rules: Optional[CalendarRulesRepository] = None):
        self._schedules = schedules
        self._rules = rules

    def _load_rules(self, academic_year_id: str) -> CalendarRules:
        if not self._rules:
            return CalendarRules()
        return self._rules.load(academic_year_id)

    def sessions_for_day(
        self,
        *,
        class_id: str,
        academic_year_id: str,
        semester: Semester,
        on_date: date,
    ) -> DaySchedule:
        scope = QueryScope.of(
            "day_sessions",
            class_id=class_id,
            academic_year_id=academic_year_id,
            semester=semester,
            date=on_date,
        )

        slots = self._schedules.list_slots(class_id=class_id, academic_year_id=academic_year_id, semester=semester)
        base = materialize_day(
            slots,
            class_id=class_id,
            academic_year_id=academic_year_id,
            semester=semester,
            on_date=on_date,
        )

        rules = self._load_rules(academic_year_id)
        labels = {s.subject_id: s.subject_label for s in slots}
        extra = extra_sessions_for_day(
            rules,
            class_id=class_id,
            academic_year_id=academic_year_id,
            semester=semester,
            on_date=on_date,
            subject_labels=labels,
        )

        class_info = self._schedules.get_class(class_id)
        filiere_id = class_info.filiere_id if class_info else None

        sessions = []
        for occurrence in sort_sessions(base + extra):
            status = evaluate_session(rules, occurrence, filiere_id=filiere_id)
            sessions.append(
                ScheduledSession(
                    occurrence=occurrence,
                    neutralized=status.neutralized,
                    reason=status.reason,
                    replaced=status.replaced,
                )
            )

        logger.debug("Materialized %d session(s) for %s", len(sessions), scope.to_dict())
        return DaySchedule(scope=scope, date=on_date, day_of_week=day_of_week_monday_first(on_date), sessions=sessions)

    def find_session(self, key: SessionKey) -> ScheduledSession:
        day = self.sessions_for_day(
            class_id=key.class_id,
            academic_year_id=key.academic_year_id,
            semester=key.semester,
            on_date=key.date,
        )
        for session in day.sessions:
            if session.occurrence.key == key:
                return session
        raise NotFoundError("Aucune séance ne correspond à ce créneau")

    def add_makeup(
        self,
        *,
        class_id: str,
        academic_year_id: str,
        subject_id: str,
        on_date: date,
        start: str,
        end: str,
        subject_label: Optional[str] = None,
        room: Optional[str] = None,
        teacher_name: Optional[str] = None,
    ) -> int:
        if not self._rules:
            raise ValidationError("Les rattrapages ne sont pas disponibles")

        subject_id = require_non_empty(subject_id, "Matière")
        start = require_hhmm(start, "Début")
        end = require_hhmm(end, "Fin")
        if minutes_between(start, end) <= 0:
            raise ValidationError("L'heure de fin doit être après l'heure de début")

        return self._rules.add_override(
            academic_year_id=academic_year_id,
            override_type=OverrideType.MAKEUP,
            class_id=class_id,
            subject_id=subject_id,
            on_date=on_date,
            start=start,
            end=end,
            subject_label=(subject_label or "").strip() or None,
            room=(room or "").strip() or None,
            teacher_name=(teacher_name or "").strip() or None,
            reason="Rattrapage",
        )
