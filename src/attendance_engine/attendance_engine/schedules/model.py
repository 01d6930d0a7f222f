from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from ..common.datetime_utils import to_iso_date
from ..core.enums import Semester, SessionSource


@dataclass(frozen=True)
class ClassInfo:
    class_id: str
    label: str
    academic_year_id: str
    filiere_id: Optional[str] = None


@dataclass(frozen=True)
class ScheduleSlot:
    """Entité métier : créneau hebdomadaire de l'emploi du temps d'une classe."""

    day_of_week: int  # 1..6, Monday=1
    subject_id: str
    subject_label: str
    start: str  # "HH:MM"
    end: str
    room: str = ""
    teacher_name: str = ""


@dataclass(frozen=True)
class SessionKey:
    """Composite identity shared by a session occurrence and its attendance record."""

    class_id: str
    academic_year_id: str
    semester: Semester
    date: date
    subject_id: str
    start: str
    end: str

    def to_dict(self) -> dict:
        return {
            "class_id": self.class_id,
            "academic_year_id": self.academic_year_id,
            "semester": self.semester.value,
            "date": to_iso_date(self.date),
            "subject_id": self.subject_id,
            "start": self.start,
            "end": self.end,
        }


@dataclass(frozen=True)
class SessionOccurrence:
    """Séance concrète (date + créneau), recalculée à chaque requête."""

    class_id: str
    academic_year_id: str
    date: date
    day_of_week: int
    semester: Semester
    subject_id: str
    subject_label: str
    start: str
    end: str
    room: str = ""
    teacher_name: str = ""
    source: SessionSource = SessionSource.TIMETABLE

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

    def to_dict(self) -> dict:
        return {
            **self.key.to_dict(),
            "day_of_week": self.day_of_week,
            "subject_label": self.subject_label,
            "room": self.room,
            "teacher_name": self.teacher_name,
            "source": self.source.value,
        }


@dataclass(frozen=True)
class ScheduledSession:
    occurrence: SessionOccurrence
    neutralized: bool = False
    reason: Optional[str] = None
    replaced: Optional[Tuple[date, str, str]] = None

    def to_dict(self) -> dict:
        out = {**self.occurrence.to_dict(), "neutralized": self.neutralized, "reason": self.reason}
        if self.replaced:
            new_date, new_start, new_end = self.replaced
            out["replaced"] = {"date": to_iso_date(new_date), "start": new_start, "end": new_end}
        return out
