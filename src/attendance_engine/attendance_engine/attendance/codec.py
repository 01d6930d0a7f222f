"""Convert attendance documents to and from AttendanceRecord.

Documents come in two shapes: the current one, with an explicit
``absences`` mapping, and the legacy one where every list-valued field that
is not session metadata is a student id. Both are accepted on read; only
the explicit shape is written.

Entries that cannot be parsed are skipped and logged so one bad entry never
sinks a whole aggregation.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..common.datetime_utils import day_of_week_monday_first, parse_hhmm, parse_iso_date, to_iso_date
from ..core.enums import Semester
from .model import AbsenceEntry, AttendanceRecord

logger = logging.getLogger(__name__)

FIXED_FIELDS = frozenset(
    {
        "record_id",
        "academic_year_id",
        "class_id",
        "class_label",
        "semester",
        "date",
        "day_of_week",
        "start",
        "end",
        "room",
        "teacher_name",
        "subject_id",
        "subject_label",
        "absences",
        "created_at",
        "updated_at",
    }
)


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return parse_iso_date(value[:10])
        except ValueError:
            return None
    return None


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _valid_hhmm(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parse_hhmm(value)
    except ValueError:
        return False
    return True


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _as_semester(value: Any) -> Optional[Semester]:
    try:
        return Semester(str(value or "").strip().upper())
    except ValueError:
        return None


def parse_entries(student_id: str, raw: Any, *, context: str = "") -> Tuple[AbsenceEntry, ...]:
    if not isinstance(raw, list):
        logger.warning("Skipping absences of %s in %s: expected a list, got %s", student_id, context, type(raw).__name__)
        return ()

    out: List[AbsenceEntry] = []
    for index, item in enumerate(raw):
        if not isinstance(item, Mapping):
            logger.warning("Skipping absence #%d of %s in %s: not an object", index, student_id, context)
            continue
        start, end = item.get("start"), item.get("end")
        if not _valid_hhmm(start) or not _valid_hhmm(end):
            logger.warning("Skipping absence #%d of %s in %s: missing or invalid start/end", index, student_id, context)
            continue

        out.append(
            AbsenceEntry(
                student_id=student_id,
                student_full_name=str(item.get("student_full_name") or ""),
                start=start.strip(),
                end=end.strip(),
                academic_year_label=str(item.get("academic_year_label") or ""),
                semester=_as_semester(item.get("semester")),
                subject_id=str(item.get("subject_id") or ""),
                subject_label=str(item.get("subject_label") or ""),
                room=str(item.get("room") or ""),
                teacher_name=str(item.get("teacher_name") or ""),
                timestamp=_as_datetime(item.get("timestamp")),
                kind=str(item.get("kind") or "absence"),
            )
        )
    return tuple(out)


def _absence_fields(doc: Mapping[str, Any]) -> Dict[str, Any]:
    explicit = doc.get("absences")
    if isinstance(explicit, Mapping):
        return dict(explicit)
    # Legacy documents: any list-valued non-metadata field is a student id.
    return {k: v for k, v in doc.items() if k not in FIXED_FIELDS and isinstance(v, list)}


def record_from_document(doc: Mapping[str, Any]) -> Optional[AttendanceRecord]:
    """Build a record, or return None (logged) when session metadata is unusable."""

    context = f"record {doc.get('record_id') or '?'} ({doc.get('class_id')}, {doc.get('date')})"

    on_date = _as_date(doc.get("date"))
    semester = _as_semester(doc.get("semester"))
    class_id = str(doc.get("class_id") or "").strip()
    start, end = doc.get("start"), doc.get("end")
    if on_date is None or semester is None or not class_id or not _valid_hhmm(start) or not _valid_hhmm(end):
        logger.warning("Skipping malformed %s: missing date/semester/class/start/end", context)
        return None

    absences: Dict[str, Tuple[AbsenceEntry, ...]] = {}
    for student_id, raw in _absence_fields(doc).items():
        entries = parse_entries(str(student_id), raw, context=context)
        if entries:
            absences[str(student_id)] = entries

    record_id = _as_int(doc.get("record_id"))
    if doc.get("record_id") is not None and record_id is None:
        logger.warning("Ignoring invalid record_id in %s", context)

    day_of_week = _as_int(doc.get("day_of_week"))
    if day_of_week is None or not 1 <= day_of_week <= 7:
        if doc.get("day_of_week") not in (None, ""):
            logger.warning("Recomputing day_of_week of %s from its date (got %r)", context, doc.get("day_of_week"))
        day_of_week = day_of_week_monday_first(on_date)

    return AttendanceRecord(
        record_id=record_id,
        academic_year_id=str(doc.get("academic_year_id") or ""),
        class_id=class_id,
        class_label=str(doc.get("class_label") or ""),
        semester=semester,
        date=on_date,
        day_of_week=day_of_week,
        start=start.strip(),
        end=end.strip(),
        subject_id=str(doc.get("subject_id") or ""),
        subject_label=str(doc.get("subject_label") or ""),
        room=str(doc.get("room") or ""),
        teacher_name=str(doc.get("teacher_name") or ""),
        absences=absences,
    )


def entry_to_document(entry: AbsenceEntry) -> dict:
    return {
        "kind": entry.kind,
        "timestamp": entry.timestamp.isoformat() if entry.timestamp else None,
        "academic_year_label": entry.academic_year_label,
        "semester": entry.semester.value if entry.semester else None,
        "start": entry.start,
        "end": entry.end,
        "room": entry.room,
        "teacher_name": entry.teacher_name,
        "subject_id": entry.subject_id,
        "subject_label": entry.subject_label,
        "student_id": entry.student_id,
        "student_full_name": entry.student_full_name,
    }


def absences_to_document(record: AttendanceRecord) -> dict:
    return {sid: [entry_to_document(e) for e in entries] for sid, entries in record.absences.items() if entries}


def record_to_document(record: AttendanceRecord) -> dict:
    return {
        "record_id": record.record_id,
        "academic_year_id": record.academic_year_id,
        "class_id": record.class_id,
        "class_label": record.class_label,
        "semester": record.semester.value,
        "date": to_iso_date(record.date),
        "day_of_week": record.day_of_week,
        "start": record.start,
        "end": record.end,
        "room": record.room,
        "teacher_name": record.teacher_name,
        "subject_id": record.subject_id,
        "subject_label": record.subject_label,
        "absences": absences_to_document(record),
    }
