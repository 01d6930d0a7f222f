from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Mapping, Optional, Tuple

from ..core.enums import Semester
from ..schedules.model import SessionKey


@dataclass(frozen=True)
class AbsenceEntry:
    """Entité métier : une absence d'un étudiant à une séance."""

    student_id: str
    student_full_name: str
    start: str
    end: str
    academic_year_label: str = ""
    semester: Optional[Semester] = None
    subject_id: str = ""
    subject_label: str = ""
    room: str = ""
    teacher_name: str = ""
    timestamp: Optional[datetime] = None
    kind: str = "absence"


@dataclass(frozen=True)
class AttendanceRecord:
    """Entité métier : feuille d'émargement d'une séance.

    Fixed session metadata plus an explicit student_id -> entries mapping.
    A student appears in `absences` only with at least one entry.
    """

    academic_year_id: str
    class_id: str
    class_label: str
    semester: Semester
    date: date
    day_of_week: int
    start: str
    end: str
    subject_id: str
    subject_label: str
    room: str = ""
    teacher_name: str = ""
    absences: Mapping[str, Tuple[AbsenceEntry, ...]] = field(default_factory=dict)
    record_id: Optional[int] = None

    @property
    def key(self) -> SessionKey:
        return SessionKey(
            class_id=self.class_id,
            academic_year_id=self.academic_year_id,
            semester=self.semester,
            date=self.date,
            subject_id=self.subject_id,
            start=self.start,
            end=self.end,
        )

    @property
    def absent_count(self) -> int:
        return sum(len(entries) for entries in self.absences.values())

    def with_absence(self, entry: AbsenceEntry) -> "AttendanceRecord":
        absences = dict(self.absences)
        absences[entry.student_id] = tuple(absences.get(entry.student_id, ())) + (entry,)
        return replace(self, absences=absences)

    def without_student(self, student_id: str) -> "AttendanceRecord":
        absences = {k: v for k, v in self.absences.items() if k != student_id}
        return replace(self, absences=absences)
