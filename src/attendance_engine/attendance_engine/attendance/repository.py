from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..schedules.model import SessionKey
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    # False for stores that cannot combine equality and date-range
    # predicates in one query; callers then fetch by date only and filter.
    supports_compound_filters: bool

    def get(self, key: SessionKey) -> Optional[AttendanceRecord]:
        """Exact match on all seven key fields; None when attendance was never taken."""

        raise NotImplementedError

    def list_range(
        self,
        *,
        start: date,
        end: date,
        class_id: Optional[str] = None,
        academic_year_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records whose date lies in [start, end] (both inclusive)."""

        raise NotImplementedError

    def save(self, record: AttendanceRecord) -> int:
        """Create or replace the record for its session key. Returns record_id."""

        raise NotImplementedError
