from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Semester
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_hhmm
from .model import ClassInfo, ScheduleSlot
from .repository import ScheduleRepository


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_slots(self, *, class_id: str, academic_year_id: str, semester: Semester) -> Sequence[ScheduleSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.day_of_week, s.subject_id, s.subject_label, s.start_time, s.end_time, s.room, s.teacher_name
                FROM schedule_slots s
                JOIN timetables t ON t.timetable_id = s.timetable_id
                WHERE t.class_id=%s AND t.academic_year_id=%s AND t.semester=%s
                ORDER BY t.timetable_id ASC, s.position ASC, s.slot_id ASC
                """,
                (class_id, academic_year_id, semester.value),
            )
            rows = fetchall(cur)
            return [
                ScheduleSlot(
                    day_of_week=int(r["day_of_week"]),
                    subject_id=str(r["subject_id"]),
                    subject_label=r.get("subject_label") or "",
                    start=normalize_hhmm(r["start_time"]),
                    end=normalize_hhmm(r["end_time"]),
                    room=r.get("room") or "",
                    teacher_name=r.get("teacher_name") or "",
                )
                for r in rows
            ]

    def get_class(self, class_id: str) -> Optional[ClassInfo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT class_id, label, academic_year_id, filiere_id FROM classes WHERE class_id=%s",
                (class_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return ClassInfo(
                class_id=str(r["class_id"]),
                label=r["label"],
                academic_year_id=str(r["academic_year_id"]),
                filiere_id=r.get("filiere_id"),
            )
