from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class AcademicYear:
    """Entité métier : année académique ('YYYY-YYYY'), immuable une fois créée."""

    year_id: str
    label: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def first_year(self) -> int:
        return int(self.label.split("-")[0])
