from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..calendar_rules.model import CalendarRules
from ..calendar_rules.repository import CalendarRulesRepository
from ..calendar_rules.rules import evaluate_neutralization
from ..common.scoping import QueryScope
from ..core.constants import DEFAULT_PARTITION_WORKERS
from ..schedules.model import ScheduledSession
from ..schedules.repository import ScheduleRepository
from ..signins.repository import SignInRepository, TeacherRepository
from .absence_aggregator import (
    AbsenceScope,
    StudentAbsenceSummary,
    aggregate_absences,
    filter_summaries,
    session_absentees,
)
from .calculator.base import HoursCalculator
from .calculator.standard_calculator import StoredOrDerivedHoursCalculator
from .hours_aggregator import TeacherDayGroup, TeacherHoursSummary, aggregate_teacher_hours, group_day_rows
from .partitions import fetch_partitioned, month_partitions
from .periods import Period, day_period

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionAbsenceReport:
    scope: QueryScope
    session: ScheduledSession
    class_label: str
    rows: List[StudentAbsenceSummary]


@dataclass(frozen=True)
class AbsenceRangeReport:
    scope: QueryScope
    period: Period
    scope_label: str
    rows: List[StudentAbsenceSummary]


@dataclass(frozen=True)
class TeacherHoursReport:
    scope: QueryScope
    period: Period
    summaries: List[TeacherHoursSummary]


@dataclass(frozen=True)
class TeacherDayReport:
    scope: QueryScope
    period: Period
    groups: List[TeacherDayGroup]


class AbsenceReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        schedules: Optional[ScheduleRepository] = None,
        rules: Optional[CalendarRulesRepository] = None,
        partition_workers: int = DEFAULT_PARTITION_WORKERS,
    ):
        self._attendance = attendance
        self._schedules = schedules
        self._rules = rules
        self._partition_workers = int(partition_workers)

    def _class_label(self, class_id: Optional[str]) -> str:
        if not class_id:
            return "Toutes les classes"
        info = self._schedules.get_class(class_id) if self._schedules else None
        return info.label if info else class_id

    def session_report(self, session: ScheduledSession) -> SessionAbsenceReport:
        occurrence = session.occurrence
        scope = QueryScope.of("session_absentees", **occurrence.key.to_dict())

        if session.neutralized:
            rows: List[StudentAbsenceSummary] = []
            class_label = self._class_label(occurrence.class_id)
        else:
            record = self._attendance.get(occurrence.key)
            rows = session_absentees(record)
            class_label = record.class_label if record and record.class_label else self._class_label(occurrence.class_id)

        return SessionAbsenceReport(scope=scope, session=session, class_label=class_label, rows=rows)

    def _fetch(self, period: Period, class_id: Optional[str], academic_year_id: Optional[str]) -> List[AttendanceRecord]:
        compound = getattr(self._attendance, "supports_compound_filters", True)

        def fetch(partition):
            start, end = partition
            if compound:
                return self._attendance.list_range(
                    start=start, end=end, class_id=class_id, academic_year_id=academic_year_id
                )
            # Overfetch on the date range; scope filtering happens client-side.
            return self._attendance.list_range(start=start, end=end)

        return fetch_partitioned(
            fetch,
            month_partitions(period.start, period.end),
            max_workers=self._partition_workers,
        )

    def _drop_neutralized(self, records: List[AttendanceRecord]) -> List[AttendanceRecord]:
        if not self._rules:
            return records

        rules_by_year: Dict[str, CalendarRules] = {}
        filiere_by_class: Dict[str, Optional[str]] = {}
        kept = []
        for record in records:
            if record.academic_year_id not in rules_by_year:
                rules_by_year[record.academic_year_id] = self._rules.load(record.academic_year_id)
            if record.class_id not in filiere_by_class:
                info = self._schedules.get_class(record.class_id) if self._schedules else None
                filiere_by_class[record.class_id] = info.filiere_id if info else None

            status = evaluate_neutralization(
                rules_by_year[record.academic_year_id],
                on_date=record.date,
                class_id=record.class_id,
                subject_id=record.subject_id,
                start=record.start,
                end=record.end,
                filiere_id=filiere_by_class[record.class_id],
            )
            if status.neutralized:
                logger.debug("Ignoring neutralized session %s (%s)", record.key.to_dict(), status.reason)
                continue
            kept.append(record)
        return kept

    def range_report(
        self,
        *,
        period: Period,
        class_id: Optional[str] = None,
        academic_year_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> AbsenceRangeReport:
        scope = QueryScope.of(
            "absence_range",
            start=period.start,
            end=period.end,
            class_id=class_id,
            academic_year_id=academic_year_id,
            search=search or None,
        )

        records = self._drop_neutralized(self._fetch(period, class_id, academic_year_id))
        rows = aggregate_absences(
            records,
            AbsenceScope(start=period.start, end=period.end, class_id=class_id, academic_year_id=academic_year_id),
        )
        return AbsenceRangeReport(
            scope=scope,
            period=period,
            scope_label=self._class_label(class_id),
            rows=filter_summaries(rows, search),
        )


class TeacherHoursReportService:
    def __init__(
        self,
        signins: SignInRepository,
        teachers: Optional[TeacherRepository] = None,
        *,
        calculator: Optional[HoursCalculator] = None,
    ):
        self._signins = signins
        self._teachers = teachers
        self._calculator = calculator or StoredOrDerivedHoursCalculator()

    def _directory(self):
        if not self._teachers:
            return {}
        return {t.teacher_id: t for t in self._teachers.list_all()}

    def month_report(self, period: Period) -> TeacherHoursReport:
        start, end = period.bounds()
        signins = self._signins.list_between(start=start, end=end)
        summaries = aggregate_teacher_hours(signins, calculator=self._calculator, directory=self._directory())
        scope = QueryScope.of("teacher_hours", start=period.start, end=period.end)
        return TeacherHoursReport(scope=scope, period=period, summaries=summaries)

    def teacher_detail(self, teacher_id: str, period: Period) -> Optional[TeacherHoursSummary]:
        for summary in self.month_report(period).summaries:
            if summary.teacher_id == teacher_id:
                return summary
        return None

    def day_report(self, on_date: date) -> TeacherDayReport:
        period = day_period(on_date)
        start, end = period.bounds()
        signins = self._signins.list_between(start=start, end=end)
        groups = group_day_rows(signins, calculator=self._calculator, directory=self._directory())
        scope = QueryScope.of("teacher_day", date=on_date)
        return TeacherDayReport(scope=scope, period=period, groups=groups)
