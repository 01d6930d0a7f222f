from __future__ import annotations

from enum import Enum


class Semester(str, Enum):
    """Période d'enseignement qui découpe l'année académique."""

    S1 = "S1"
    S2 = "S2"
    S3 = "S3"
    S4 = "S4"
    S5 = "S5"
    S6 = "S6"


class LookbackWindow(str, Enum):
    """Fenêtres de période par défaut proposées pour les bilans."""

    WEEK = "week"
    DAYS_30 = "30d"
    QUARTER = "quarter"
    HALF_YEAR = "half_year"
    ACADEMIC_YEAR = "academic_year"


class SessionSource(str, Enum):
    """Origine d'une séance matérialisée pour une date."""

    TIMETABLE = "timetable"
    MAKEUP = "makeup"
    RESCHEDULED = "rescheduled"


class OverrideType(str, Enum):
    CANCEL = "cancel"
    RESCHEDULE = "reschedule"
    MAKEUP = "makeup"


class ClosureScope(str, Enum):
    GLOBAL = "global"
    FILIERE = "filiere"
    CLASS = "class"
    SUBJECT = "subject"
