"""Per-student absence summaries built from attendance records.

Pure functions: every call builds its own accumulation map from the records
it is given and returns fresh summaries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..attendance.model import AbsenceEntry, AttendanceRecord
from ..common.datetime_utils import minutes_between
from ..common.text_utils import collation_key, matches_search
from ..core.constants import UNKNOWN_LABEL


@dataclass(frozen=True)
class AbsenceDetail:
    entry: AbsenceEntry
    class_label: str
    date: date
    minutes: int


@dataclass(frozen=True)
class StudentAbsenceSummary:
    student_id: str
    student_full_name: str
    class_label: str
    total_count: int
    total_minutes: int
    entries: Tuple[AbsenceDetail, ...]


@dataclass(frozen=True)
class AbsenceScope:
    """Which records a range aggregation accepts. Bounds are inclusive."""

    start: date
    end: date
    class_id: Optional[str] = None
    academic_year_id: Optional[str] = None

    def contains(self, record: AttendanceRecord) -> bool:
        if not (self.start <= record.date <= self.end):
            return False
        if self.class_id is not None and record.class_id != self.class_id:
            return False
        if self.academic_year_id is not None and record.academic_year_id != self.academic_year_id:
            return False
        return True


@dataclass
class _Tally:
    full_name: str
    class_label: str
    count: int = 0
    minutes: int = 0
    details: List[AbsenceDetail] = field(default_factory=list)


def rank_summaries(rows: Iterable[StudentAbsenceSummary]) -> List[StudentAbsenceSummary]:
    """Count descending, then full name (case/accent-insensitive), then student id."""
    return sorted(rows, key=lambda r: (-r.total_count, collation_key(r.student_full_name), r.student_id))


def scan_order(records: Iterable[AttendanceRecord]) -> List[AttendanceRecord]:
    # Deterministic traversal: the first entry seen for a student (its display
    # name) comes from the earliest session, whatever order the store used.
    return sorted(records, key=lambda r: (r.date, r.start, r.end, r.class_id, r.subject_id))


def _detail(entry: AbsenceEntry, record: AttendanceRecord) -> AbsenceDetail:
    return AbsenceDetail(
        entry=entry,
        class_label=record.class_label,
        date=record.date,
        minutes=minutes_between(entry.start, entry.end),
    )


def _accumulate(tallies: Dict[str, _Tally], record: AttendanceRecord) -> None:
    for student_id, entries in record.absences.items():
        if not entries:
            continue
        tally = tallies.get(student_id)
        if tally is None:
            tally = _Tally(full_name=entries[0].student_full_name or UNKNOWN_LABEL, class_label=record.class_label)
            tallies[student_id] = tally
        tally.class_label = record.class_label or tally.class_label
        for entry in entries:
            detail = _detail(entry, record)
            tally.count += 1
            tally.minutes += detail.minutes
            tally.details.append(detail)


def _finalize(tallies: Dict[str, _Tally]) -> List[StudentAbsenceSummary]:
    return rank_summaries(
        StudentAbsenceSummary(
            student_id=student_id,
            student_full_name=t.full_name,
            class_label=t.class_label,
            total_count=t.count,
            total_minutes=t.minutes,
            entries=tuple(t.details),
        )
        for student_id, t in tallies.items()
    )


def session_absentees(record: Optional[AttendanceRecord]) -> List[StudentAbsenceSummary]:
    """One row per absent student of a single session; no record means no absentees."""
    if record is None:
        return []
    tallies: Dict[str, _Tally] = {}
    _accumulate(tallies, record)
    return _finalize(tallies)


def aggregate_absences(records: Iterable[AttendanceRecord], scope: AbsenceScope) -> List[StudentAbsenceSummary]:
    tallies: Dict[str, _Tally] = {}
    for record in scan_order(r for r in records if scope.contains(r)):
        _accumulate(tallies, record)
    return _finalize(tallies)


def filter_summaries(rows: Sequence[StudentAbsenceSummary], query: Optional[str]) -> List[StudentAbsenceSummary]:
    if not query or not query.strip():
        return list(rows)
    return [r for r in rows if matches_search(query, r.student_id, r.student_full_name)]
