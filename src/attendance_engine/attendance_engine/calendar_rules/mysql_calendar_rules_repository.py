from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.enums import ClosureScope, OverrideType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_hhmm
from .model import CalendarRules, ClosureRule, SessionOverride
from .repository import CalendarRulesRepository


class MySQLCalendarRulesRepository(CalendarRulesRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load(self, academic_year_id: str) -> CalendarRules:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT start_date, end_date FROM academic_years WHERE year_id=%s",
                (academic_year_id,),
            )
            year = fetchone(cur) or {}

            cur.execute(
                """
                SELECT closure_id, scope, filiere_id, class_id, subject_id,
                       start_date, end_date, start_time, end_time, label
                FROM closures
                WHERE academic_year_id=%s
                ORDER BY closure_id ASC
                """,
                (academic_year_id,),
            )
            closures = tuple(
                ClosureRule(
                    closure_id=int(r["closure_id"]),
                    scope=ClosureScope(r["scope"]),
                    start=r["start_date"],
                    end=r["end_date"],
                    filiere_id=r.get("filiere_id"),
                    class_id=r.get("class_id"),
                    subject_id=r.get("subject_id"),
                    start_time=normalize_hhmm(r.get("start_time")),
                    end_time=normalize_hhmm(r.get("end_time")),
                    label=r.get("label"),
                )
                for r in fetchall(cur)
            )

            cur.execute(
                """
                SELECT override_id, override_type, class_id, subject_id, session_date, start_time, end_time,
                       new_date, new_start, new_end, subject_label, room, teacher_name, reason
                FROM session_overrides
                WHERE academic_year_id=%s
                ORDER BY override_id ASC
                """,
                (academic_year_id,),
            )
            overrides = tuple(
                SessionOverride(
                    override_id=int(r["override_id"]),
                    override_type=OverrideType(r["override_type"]),
                    class_id=str(r["class_id"]),
                    subject_id=str(r["subject_id"]),
                    date=r["session_date"],
                    start=normalize_hhmm(r["start_time"]),
                    end=normalize_hhmm(r["end_time"]),
                    new_date=r.get("new_date"),
                    new_start=normalize_hhmm(r.get("new_start")),
                    new_end=normalize_hhmm(r.get("new_end")),
                    subject_label=r.get("subject_label"),
                    room=r.get("room"),
                    teacher_name=r.get("teacher_name"),
                    reason=r.get("reason"),
                )
                for r in fetchall(cur)
            )

        return CalendarRules(
            closures=closures,
            overrides=overrides,
            year_start=year.get("start_date"),
            year_end=year.get("end_date"),
        )

    def add_override(
        self,
        *,
        academic_year_id: str,
        override_type: OverrideType,
        class_id: str,
        subject_id: str,
        on_date: date,
        start: str,
        end: str,
        subject_label: Optional[str] = None,
        room: Optional[str] = None,
        teacher_name: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO session_overrides(
                    academic_year_id, override_type, class_id, subject_id, session_date,
                    start_time, end_time, subject_label, room, teacher_name, reason
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    academic_year_id,
                    override_type.value,
                    class_id,
                    subject_id,
                    on_date,
                    start,
                    end,
                    subject_label,
                    room,
                    teacher_name,
                    reason,
                ),
            )
            return int(cur.lastrowid)
