from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Semester
from .model import ClassInfo, ScheduleSlot


class ScheduleRepository(Protocol):
    def list_slots(self, *, class_id: str, academic_year_id: str, semester: Semester) -> Sequence[ScheduleSlot]:
        """All slots of every timetable stored for (class, year, semester), in stored order."""

        raise NotImplementedError

    def get_class(self, class_id: str) -> Optional[ClassInfo]:
        raise NotImplementedError
