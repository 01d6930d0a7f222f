from __future__ import annotations

from typing import Sequence

from ..common.datetime_utils import academic_year_range
from ..common.validators import validate_academic_year_label
from ..core.exceptions import NotFoundError, ValidationError
from .model import AcademicYear
from .repository import AcademicYearRepository


class AcademicYearService:
    def __init__(self, years: AcademicYearRepository):
        self._years = years

    def list_years(self) -> Sequence[AcademicYear]:
        return self._years.list_all()

    def get_year(self, year_id: str) -> AcademicYear:
        year = self._years.get(year_id)
        if not year:
            raise NotFoundError("Année académique introuvable")
        return year

    def create_year(self, raw_label: str) -> AcademicYear:
        label, first_year = validate_academic_year_label(raw_label)
        if self._years.get(label):
            raise ValidationError("Cette année académique existe déjà.")

        start, end = academic_year_range(first_year)
        return self._years.create(label=label, start_date=start, end_date=end)
