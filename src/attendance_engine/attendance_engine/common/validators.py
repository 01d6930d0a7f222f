from __future__ import annotations

import re
from datetime import date
from typing import Optional, Tuple

from ..core.enums import Semester
from ..core.exceptions import ValidationError
from .datetime_utils import parse_hhmm, parse_iso_date

_YEAR_LABEL_RE = re.compile(r"^\d{4}-\d{4}$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} invalide")
    return value.strip()


def require_hhmm(value: str, field_name: str) -> str:
    """Validate a clock time and return it zero-padded ("8:00" -> "08:00")."""
    try:
        minutes = parse_hhmm(value)
    except ValueError:
        raise ValidationError(f"{field_name} : heure invalide (HH:MM)")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def require_semester(value) -> Semester:
    try:
        return Semester(str(value or "").strip().upper())
    except ValueError:
        raise ValidationError("Semestre invalide (S1..S6)")


def parse_date_param(value: Optional[str], field_name: str) -> Optional[date]:
    """Parse an optional YYYY-MM-DD query parameter; blank means absent."""
    if value is None or not value.strip():
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{field_name} : date invalide (YYYY-MM-DD)")


def sanitize_label(value: str) -> str:
    return re.sub(r"[<>]", "", value or "").strip()


def validate_academic_year_label(raw: str) -> Tuple[str, int]:
    """Return (label, first_year) for a 'YYYY-YYYY' label whose right year is left + 1."""
    label = sanitize_label(raw)
    if not label:
        raise ValidationError("Saisissez une année académique (ex: 2025-2026).")
    if not _YEAR_LABEL_RE.match(label):
        raise ValidationError("Format invalide. Utilisez YYYY-YYYY (ex: 2025-2026).")

    left, right = (int(part) for part in label.split("-"))
    if right != left + 1:
        raise ValidationError("L'année de droite doit être égale à l'année de gauche + 1.")
    return label, left


def normalize_date_range(start: date, end: date) -> Tuple[date, date]:
    """Order a date range so that start <= end (reversed input is swapped)."""
    if start > end:
        return end, start
    return start, end
