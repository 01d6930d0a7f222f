from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from ..schedules.model import SessionKey, SessionOccurrence
from .model import AbsenceEntry, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Write path for session attendance, keyed like the session it belongs to."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def get_record(self, key: SessionKey) -> Optional[AttendanceRecord]:
        return self._attendance.get(key)

    @staticmethod
    def _new_record(occurrence: SessionOccurrence, class_label: str) -> AttendanceRecord:
        return AttendanceRecord(
            academic_year_id=occurrence.academic_year_id,
            class_id=occurrence.class_id,
            class_label=class_label,
            semester=occurrence.semester,
            date=occurrence.date,
            day_of_week=occurrence.day_of_week,
            start=occurrence.start,
            end=occurrence.end,
            subject_id=occurrence.subject_id,
            subject_label=occurrence.subject_label,
            room=occurrence.room,
            teacher_name=occurrence.teacher_name,
        )

    def mark_absent(
        self,
        occurrence: SessionOccurrence,
        *,
        student_id: str,
        student_full_name: str,
        class_label: str,
        academic_year_label: str,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        student_id = require_non_empty(student_id, "Matricule")
        student_full_name = (student_full_name or "").strip()
        if not student_full_name:
            raise ValidationError("Nom complet de l'étudiant requis")

        record = self._attendance.get(occurrence.key) or self._new_record(occurrence, class_label)
        entry = AbsenceEntry(
            student_id=student_id,
            student_full_name=student_full_name,
            start=occurrence.start,
            end=occurrence.end,
            academic_year_label=academic_year_label,
            semester=occurrence.semester,
            subject_id=occurrence.subject_id,
            subject_label=occurrence.subject_label,
            room=occurrence.room,
            teacher_name=occurrence.teacher_name,
            timestamp=now or now_local(),
        )
        updated = record.with_absence(entry)
        self._attendance.save(updated)
        logger.info("Marked %s absent for %s", student_id, occurrence.key.to_dict())
        return updated

    def clear_absences(self, key: SessionKey, *, student_id: str) -> bool:
        """Drop every entry of one student for the session. False if nothing to clear."""

        record = self._attendance.get(key)
        if not record or student_id not in record.absences:
            return False
        self._attendance.save(record.without_student(student_id))
        return True
