from datetime import date

from src.attendance_engine.attendance_engine.attendance.mysql_attendance_repository import MySQLAttendanceRepository


def _row(record_id, absences, *, day_of_week=2):
    return {
        "record_id": record_id,
        "academic_year_id": "2024-2025",
        "class_id": "C1",
        "class_label": "L1 Info",
        "semester": "S1",
        "session_date": date(2024, 9, 3),
        "day_of_week": day_of_week,
        "start_time": "08:00:00",
        "end_time": "10:00:00",
        "room": "A101",
        "teacher_name": "",
        "subject_id": "algo",
        "subject_label": "Algorithms",
        "absences": absences,
    }


class FakeCursor:
    def __init__(self, rows):
        self._rows = rows
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append((sql, params))

    def fetchall(self):
        return list(self._rows)

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def close(self):
        pass


class FakeConnection:
    def __init__(self, rows):
        self._rows = rows
        self.committed = False

    def cursor(self, dictionary=False):
        return FakeCursor(self._rows)

    def commit(self):
        self.committed = True

    def rollback(self):
        pass

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, rows):
        self._rows = rows

    def connect(self):
        return FakeConnection(self._rows)


ANA = '{"M1": [{"student_id": "M1", "student_full_name": "Ana", "start": "08:00", "end": "10:00"}]}'


def test_corrupt_absences_column_skips_only_that_record(caplog):
    repo = MySQLAttendanceRepository(FakeConnFactory([_row(1, ANA), _row(2, '{"M1": ['), _row(3, b"")]))

    records = repo.list_range(start=date(2024, 9, 1), end=date(2024, 9, 30))

    assert [r.record_id for r in records] == [1, 3]
    assert records[0].absences["M1"][0].student_full_name == "Ana"
    assert records[1].absences == {}
    assert "unreadable absences" in caplog.text


def test_legacy_day_of_week_text_does_not_abort_the_query():
    repo = MySQLAttendanceRepository(FakeConnFactory([_row(1, ANA, day_of_week="mardi")]))

    records = repo.list_range(start=date(2024, 9, 1), end=date(2024, 9, 30))

    assert records[0].day_of_week == 2
    assert records[0].start == "08:00"
