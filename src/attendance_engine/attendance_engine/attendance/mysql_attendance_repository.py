from __future__ import annotations

import json
import logging
from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json, normalize_hhmm
from ..schedules.model import SessionKey
from .codec import absences_to_document, record_from_document
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    record_id, academic_year_id, class_id, class_label, semester, session_date,
    day_of_week, start_time, end_time, room, teacher_name, subject_id, subject_label, absences
"""


class MySQLAttendanceRepository(AttendanceRepository):
    supports_compound_filters = True

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_record(r: dict) -> Optional[AttendanceRecord]:
        try:
            absences = load_json(r.get("absences"), {})
        except ValueError as e:
            logger.warning(
                "Skipping malformed record %s (%s, %s): unreadable absences column (%s)",
                r.get("record_id"),
                r.get("class_id"),
                r.get("session_date"),
                e,
            )
            return None

        return record_from_document(
            {
                "record_id": r["record_id"],
                "academic_year_id": r["academic_year_id"],
                "class_id": r["class_id"],
                "class_label": r.get("class_label"),
                "semester": r["semester"],
                "date": r["session_date"],
                "day_of_week": r.get("day_of_week"),
                "start": normalize_hhmm(r["start_time"]),
                "end": normalize_hhmm(r["end_time"]),
                "room": r.get("room"),
                "teacher_name": r.get("teacher_name"),
                "subject_id": r["subject_id"],
                "subject_label": r.get("subject_label"),
                "absences": absences,
            }
        )

    def get(self, key: SessionKey) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE class_id=%s AND academic_year_id=%s AND semester=%s AND session_date=%s
                  AND subject_id=%s AND start_time=%s AND end_time=%s
                """,
                (key.class_id, key.academic_year_id, key.semester.value, key.date, key.subject_id, key.start, key.end),
            )
            r = fetchone(cur)
            if not r:
                return None
            return self._to_record(r)

    def list_range(
        self,
        *,
        start: date,
        end: date,
        class_id: Optional[str] = None,
        academic_year_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["session_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if class_id is not None:
            clauses.append("class_id=%s")
            params.append(class_id)
        if academic_year_id is not None:
            clauses.append("academic_year_id=%s")
            params.append(academic_year_id)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY session_date ASC, start_time ASC, end_time ASC, record_id ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)
            records = (self._to_record(r) for r in rows)
            return [rec for rec in records if rec is not None]

    def save(self, record: AttendanceRecord) -> int:
        payload = json.dumps(absences_to_document(record), ensure_ascii=False)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    academic_year_id, class_id, class_label, semester, session_date, day_of_week,
                    start_time, end_time, room, teacher_name, subject_id, subject_label, absences
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    class_label=VALUES(class_label), room=VALUES(room), teacher_name=VALUES(teacher_name),
                    subject_label=VALUES(subject_label), absences=VALUES(absences)
                """,
                (
                    record.academic_year_id,
                    record.class_id,
                    record.class_label,
                    record.semester.value,
                    record.date,
                    record.day_of_week,
                    record.start,
                    record.end,
                    record.room,
                    record.teacher_name,
                    record.subject_id,
                    record.subject_label,
                    payload,
                ),
            )

            # If it was an update, lastrowid can be 0; fetch record_id.
            if cur.lastrowid:
                return int(cur.lastrowid)

            key = record.key
            cur.execute(
                """
                SELECT record_id FROM attendance_records
                WHERE class_id=%s AND academic_year_id=%s AND semester=%s AND session_date=%s
                  AND subject_id=%s AND start_time=%s AND end_time=%s
                """,
                (key.class_id, key.academic_year_id, key.semester.value, key.date, key.subject_id, key.start, key.end),
            )
            r = fetchone(cur)
            return int(r["record_id"]) if r else 0
