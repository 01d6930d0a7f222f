from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_hhmm
from .model import Teacher, TeacherSignIn
from .repository import SignInRepository, TeacherRepository


class MySQLSignInRepository(SignInRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_between(self, *, start: datetime, end: datetime) -> Sequence[TeacherSignIn]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    ts.signin_id, ts.teacher_id, ts.teacher_name, ts.class_id, c.label AS class_label,
                    ts.subject_id, ts.subject_label, ts.start_time, ts.end_time, ts.hours,
                    ts.signed_at, ts.room, ts.session_date
                FROM teacher_signins ts
                LEFT JOIN classes c ON c.class_id = ts.class_id
                WHERE ts.signed_at BETWEEN %s AND %s
                ORDER BY ts.signed_at ASC, ts.signin_id ASC
                """,
                (start, end),
            )
            rows = fetchall(cur)
            return [
                TeacherSignIn(
                    signin_id=int(r["signin_id"]),
                    teacher_id=str(r.get("teacher_id") or ""),
                    teacher_name=r.get("teacher_name") or "",
                    class_id=str(r.get("class_id") or ""),
                    class_label=r.get("class_label"),
                    subject_id=str(r.get("subject_id") or ""),
                    subject_label=r.get("subject_label") or "",
                    start=normalize_hhmm(r.get("start_time")) or "",
                    end=normalize_hhmm(r.get("end_time")) or "",
                    hours=r.get("hours"),
                    signed_at=r["signed_at"],
                    room=r.get("room") or "",
                    date=r.get("session_date"),
                )
                for r in rows
            ]


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT teacher_id, first_name, last_name FROM teachers ORDER BY last_name, first_name")
            return [
                Teacher(
                    teacher_id=str(r["teacher_id"]),
                    first_name=r.get("first_name") or "",
                    last_name=r.get("last_name") or "",
                )
                for r in fetchall(cur)
            ]
