from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AcademicYear
from .repository import AcademicYearRepository


def _to_year(r: dict) -> AcademicYear:
    return AcademicYear(
        year_id=str(r["year_id"]),
        label=r["label"],
        start_date=r.get("start_date"),
        end_date=r.get("end_date"),
    )


class MySQLAcademicYearRepository(AcademicYearRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[AcademicYear]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT year_id, label, start_date, end_date FROM academic_years ORDER BY label DESC")
            return [_to_year(r) for r in fetchall(cur)]

    def get(self, year_id: str) -> Optional[AcademicYear]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT year_id, label, start_date, end_date FROM academic_years WHERE year_id=%s",
                (year_id,),
            )
            r = fetchone(cur)
            return _to_year(r) if r else None

    def create(self, *, label: str, start_date: date, end_date: date) -> AcademicYear:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO academic_years(year_id, label, start_date, end_date) VALUES(%s,%s,%s,%s)",
                (label, label, start_date, end_date),
            )
        return AcademicYear(year_id=label, label=label, start_date=start_date, end_date=end_date)
