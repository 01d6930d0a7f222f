from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from ..core.enums import ClosureScope, OverrideType


@dataclass(frozen=True)
class ClosureRule:
    """Fermeture : période (et éventuellement plage horaire) sans cours."""

    closure_id: int
    scope: ClosureScope
    start: date
    end: date
    filiere_id: Optional[str] = None
    class_id: Optional[str] = None
    subject_id: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    label: Optional[str] = None


@dataclass(frozen=True)
class SessionOverride:
    """Annulation, report ou rattrapage d'une séance."""

    override_id: int
    override_type: OverrideType
    class_id: str
    subject_id: str
    date: date
    start: str
    end: str
    new_date: Optional[date] = None
    new_start: Optional[str] = None
    new_end: Optional[str] = None
    subject_label: Optional[str] = None
    room: Optional[str] = None
    teacher_name: Optional[str] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class CalendarRules:
    closures: Tuple[ClosureRule, ...] = ()
    overrides: Tuple[SessionOverride, ...] = ()
    year_start: Optional[date] = None
    year_end: Optional[date] = None


@dataclass(frozen=True)
class Neutralization:
    neutralized: bool
    reason: Optional[str] = None
    replaced: Optional[Tuple[date, str, str]] = None


NOT_NEUTRALIZED = Neutralization(neutralized=False)
