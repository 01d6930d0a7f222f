from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union


@dataclass(frozen=True)
class Teacher:
    teacher_id: str
    first_name: str
    last_name: str

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def sort_name(self) -> str:
        return f"{self.last_name} {self.first_name}".strip()


@dataclass(frozen=True)
class TeacherSignIn:
    """Entité métier : émargement d'un professeur pour une séance."""

    signin_id: int
    teacher_id: str
    teacher_name: str
    class_id: str
    subject_id: str
    subject_label: str
    start: str
    end: str
    signed_at: datetime
    hours: Optional[Union[Decimal, float, int]] = None
    room: str = ""
    date: Optional[date] = None
    class_label: Optional[str] = None
