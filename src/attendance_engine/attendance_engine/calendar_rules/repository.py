from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ..core.enums import OverrideType
from .model import CalendarRules


class CalendarRulesRepository(Protocol):
    def load(self, academic_year_id: str) -> CalendarRules:
        """Closures, overrides and year bounds of one academic year."""

        raise NotImplementedError

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
        raise NotImplementedError
