"""Teacher hour totals: teacher -> class -> subject -> hours."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..common.text_utils import collation_key
from ..core.constants import UNKNOWN_LABEL
from ..signins.model import Teacher, TeacherSignIn
from .calculator.base import HoursCalculator
from .calculator.standard_calculator import StoredOrDerivedHoursCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TeacherHoursSummary:
    teacher_id: str
    teacher_name: str
    sort_name: str
    total_hours: Fraction
    by_class: Dict[str, Dict[str, Fraction]]

    def leaf_total(self) -> Fraction:
        return sum((h for subjects in self.by_class.values() for h in subjects.values()), Fraction(0))


@dataclass(frozen=True)
class TeacherDayRow:
    signin: TeacherSignIn
    class_label: str
    hours: Fraction


@dataclass(frozen=True)
class TeacherDayGroup:
    teacher_id: str
    teacher_name: str
    sort_name: str
    rows: Tuple[TeacherDayRow, ...]
    total_hours: Fraction


def teacher_key(signin: TeacherSignIn) -> str:
    return signin.teacher_id or signin.teacher_name or UNKNOWN_LABEL


def class_label_of(signin: TeacherSignIn) -> str:
    return signin.class_label or signin.class_id or UNKNOWN_LABEL


def subject_label_of(signin: TeacherSignIn) -> str:
    return signin.subject_label or signin.subject_id or UNKNOWN_LABEL


def _names(key: str, fallback_name: str, directory: Mapping[str, Teacher]) -> Tuple[str, str]:
    teacher = directory.get(key)
    if teacher:
        return teacher.display_name, teacher.sort_name
    name = fallback_name or key
    return name, name


def _measured(
    signins: Iterable[TeacherSignIn], calculator: HoursCalculator
) -> Iterable[Tuple[TeacherSignIn, Fraction]]:
    for signin in signins:
        try:
            hours = calculator.hours(signin)
        except ValueError:
            logger.warning(
                "Skipping sign-in %s of %s: no stored hours and invalid start/end (%r-%r)",
                signin.signin_id,
                teacher_key(signin),
                signin.start,
                signin.end,
            )
            continue
        yield signin, hours


def _ranking_key(total: Fraction, sort_name: str, key: str):
    return (-total, collation_key(sort_name), key)


def aggregate_teacher_hours(
    signins: Iterable[TeacherSignIn],
    *,
    calculator: Optional[HoursCalculator] = None,
    directory: Optional[Mapping[str, Teacher]] = None,
) -> List[TeacherHoursSummary]:
    """Totals per teacher, hours descending then last+first name ascending."""

    calculator = calculator or StoredOrDerivedHoursCalculator()
    directory = directory or {}

    totals: Dict[str, Fraction] = {}
    buckets: Dict[str, Dict[str, Dict[str, Fraction]]] = {}
    names: Dict[str, str] = {}

    for signin, hours in _measured(signins, calculator):
        key = teacher_key(signin)
        names.setdefault(key, signin.teacher_name)
        totals[key] = totals.get(key, Fraction(0)) + hours
        subjects = buckets.setdefault(key, {}).setdefault(class_label_of(signin), {})
        subject = subject_label_of(signin)
        subjects[subject] = subjects.get(subject, Fraction(0)) + hours

    summaries = []
    for key, total in totals.items():
        display, sort_name = _names(key, names.get(key, ""), directory)
        summaries.append(
            TeacherHoursSummary(
                teacher_id=key,
                teacher_name=display,
                sort_name=sort_name,
                total_hours=total,
                by_class=buckets[key],
            )
        )

    summaries.sort(key=lambda s: _ranking_key(s.total_hours, s.sort_name, s.teacher_id))
    return summaries


def group_day_rows(
    signins: Iterable[TeacherSignIn],
    *,
    calculator: Optional[HoursCalculator] = None,
    directory: Optional[Mapping[str, Teacher]] = None,
) -> List[TeacherDayGroup]:
    """Raw sign-ins per teacher, sorted by start time, each group with its total."""

    calculator = calculator or StoredOrDerivedHoursCalculator()
    directory = directory or {}

    grouped: Dict[str, List[TeacherDayRow]] = {}
    names: Dict[str, str] = {}
    for signin, hours in _measured(signins, calculator):
        key = teacher_key(signin)
        names.setdefault(key, signin.teacher_name)
        grouped.setdefault(key, []).append(TeacherDayRow(signin=signin, class_label=class_label_of(signin), hours=hours))

    groups = []
    for key, rows in grouped.items():
        rows.sort(key=lambda r: (r.signin.start, r.signin.end))
        display, sort_name = _names(key, names.get(key, ""), directory)
        groups.append(
            TeacherDayGroup(
                teacher_id=key,
                teacher_name=display,
                sort_name=sort_name,
                rows=tuple(rows),
                total_hours=sum((r.hours for r in rows), Fraction(0)),
            )
        )

    groups.sort(key=lambda g: _ranking_key(g.total_hours, g.sort_name, g.teacher_id))
    return groups
