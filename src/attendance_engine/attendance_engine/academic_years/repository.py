from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AcademicYear


class AcademicYearRepository(Protocol):
    def list_all(self) -> Sequence[AcademicYear]:
        """Label descending (most recent year first)."""

        raise NotImplementedError

    def get(self, year_id: str) -> Optional[AcademicYear]:
        raise NotImplementedError

    def create(self, *, label: str, start_date: date, end_date: date) -> AcademicYear:
        raise NotImplementedError
