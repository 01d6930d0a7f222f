"""Renderer-neutral report tables.

A table is a header (title, period, scope), a column schema and ordered
rows. Hours are rounded half-up to two decimals here and nowhere else;
aggregates keep exact values.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from fractions import Fraction
from typing import Any, Dict, List, Tuple, Union

from ..common.datetime_utils import to_iso_date
from ..core.constants import HOURS_DECIMALS
from .service import AbsenceRangeReport, SessionAbsenceReport, TeacherDayReport, TeacherHoursReport


def round_hours(value: Union[Fraction, Decimal, float, int]) -> Decimal:
    """Half-up rounding to HOURS_DECIMALS places, computed exactly."""
    if isinstance(value, float):
        value = Decimal(repr(value))
    exact = Fraction(value)
    scale = 10 ** HOURS_DECIMALS
    sign = -1 if exact < 0 else 1
    scaled = math.floor(abs(exact) * scale + Fraction(1, 2))
    return Decimal(sign * scaled).scaleb(-HOURS_DECIMALS)


@dataclass(frozen=True)
class ExportColumn:
    key: str
    label: str
    numeric: bool = False


@dataclass(frozen=True)
class ExportTable:
    title: str
    period_label: str
    scope_label: str
    columns: Tuple[ExportColumn, ...]
    rows: Tuple[Dict[str, Any], ...]
    totals: Dict[str, Any] = field(default_factory=dict)
    institution: str = ""

    @property
    def fieldnames(self) -> List[str]:
        return [c.key for c in self.columns]

    @property
    def empty(self) -> bool:
        return not self.rows

    def to_dict(self) -> dict:
        def plain(value):
            return str(value) if isinstance(value, Decimal) else value

        return {
            "header": {
                "institution": self.institution,
                "title": self.title,
                "period": self.period_label,
                "scope": self.scope_label,
            },
            "columns": [{"key": c.key, "label": c.label, "numeric": c.numeric} for c in self.columns],
            "rows": [{k: plain(v) for k, v in row.items()} for row in self.rows],
            "totals": {k: plain(v) for k, v in self.totals.items()},
            "empty": self.empty,
        }


_STUDENT_COLUMNS = (
    ExportColumn("rank", "#", numeric=True),
    ExportColumn("student_id", "Matricule"),
    ExportColumn("student_full_name", "Nom & Prénom"),
    ExportColumn("class_label", "Classe"),
    ExportColumn("count", "Absences", numeric=True),
    ExportColumn("hours", "Heures", numeric=True),
)


def _student_rows(rows) -> Tuple[Dict[str, Any], ...]:
    return tuple(
        {
            "rank": i,
            "student_id": r.student_id,
            "student_full_name": r.student_full_name,
            "class_label": r.class_label,
            "count": r.total_count,
            "hours": round_hours(Fraction(r.total_minutes, 60)),
        }
        for i, r in enumerate(rows, start=1)
    )


def session_absentees_table(report: SessionAbsenceReport, *, institution: str = "") -> ExportTable:
    occ = report.session.occurrence
    return ExportTable(
        title=f"Absents : {occ.subject_label} ({occ.start}-{occ.end})",
        period_label=to_iso_date(occ.date),
        scope_label=report.class_label,
        columns=_STUDENT_COLUMNS,
        rows=_student_rows(report.rows),
        totals={"count": sum(r.total_count for r in report.rows)},
        institution=institution,
    )


def absence_summary_table(report: AbsenceRangeReport, *, institution: str = "") -> ExportTable:
    return ExportTable(
        title="Bilan des absences",
        period_label=report.period.label,
        scope_label=report.scope_label,
        columns=_STUDENT_COLUMNS,
        rows=_student_rows(report.rows),
        totals={"count": sum(r.total_count for r in report.rows)},
        institution=institution,
    )


def absence_details_table(report: AbsenceRangeReport, *, institution: str = "") -> ExportTable:
    rows = []
    for summary in report.rows:
        for d in sorted(summary.entries, key=lambda x: (x.date, x.entry.start, x.entry.end)):
            rows.append(
                {
                    "student_id": summary.student_id,
                    "student_full_name": summary.student_full_name,
                    "date": to_iso_date(d.date),
                    "start": d.entry.start,
                    "end": d.entry.end,
                    "subject_label": d.entry.subject_label,
                    "class_label": d.class_label,
                    "teacher_name": d.entry.teacher_name,
                    "room": d.entry.room,
                }
            )
    return ExportTable(
        title="Détail des absences",
        period_label=report.period.label,
        scope_label=report.scope_label,
        columns=(
            ExportColumn("student_id", "Matricule"),
            ExportColumn("student_full_name", "Nom & Prénom"),
            ExportColumn("date", "Date"),
            ExportColumn("start", "Début"),
            ExportColumn("end", "Fin"),
            ExportColumn("subject_label", "Matière"),
            ExportColumn("class_label", "Classe"),
            ExportColumn("teacher_name", "Enseignant"),
            ExportColumn("room", "Salle"),
        ),
        rows=tuple(rows),
        totals={"count": len(rows)},
        institution=institution,
    )


def teacher_hours_table(report: TeacherHoursReport, *, institution: str = "") -> ExportTable:
    rows = []
    for s in report.summaries:
        for class_label, subjects in s.by_class.items():
            for subject_label, hours in subjects.items():
                rows.append(
                    {
                        "teacher_id": s.teacher_id,
                        "teacher_name": s.teacher_name,
                        "teacher_total": round_hours(s.total_hours),
                        "class_label": class_label,
                        "subject_label": subject_label,
                        "hours": round_hours(hours),
                    }
                )
    return ExportTable(
        title="Émargements des professeurs",
        period_label=report.period.label,
        scope_label="Tous les professeurs",
        columns=(
            ExportColumn("teacher_id", "Id"),
            ExportColumn("teacher_name", "Professeur"),
            ExportColumn("teacher_total", "Total heures", numeric=True),
            ExportColumn("class_label", "Classe"),
            ExportColumn("subject_label", "Matière"),
            ExportColumn("hours", "Heures", numeric=True),
        ),
        rows=tuple(rows),
        totals={"hours": round_hours(sum((s.total_hours for s in report.summaries), Fraction(0)))},
        institution=institution,
    )


def teacher_day_table(report: TeacherDayReport, *, institution: str = "") -> ExportTable:
    rows = []
    for g in report.groups:
        for r in g.rows:
            rows.append(
                {
                    "teacher_name": g.teacher_name,
                    "subject_label": r.signin.subject_label or r.signin.subject_id,
                    "class_label": r.class_label,
                    "room": r.signin.room,
                    "slot": f"{r.signin.start}-{r.signin.end}",
                    "hours": round_hours(r.hours),
                    "is_total": False,
                }
            )
        rows.append(
            {
                "teacher_name": g.teacher_name,
                "subject_label": "",
                "class_label": "",
                "room": "",
                "slot": "Total",
                "hours": round_hours(g.total_hours),
                "is_total": True,
            }
        )
    return ExportTable(
        title="Émargements du jour",
        period_label=report.period.label,
        scope_label="Tous les professeurs",
        columns=(
            ExportColumn("teacher_name", "Professeur"),
            ExportColumn("subject_label", "Matière"),
            ExportColumn("class_label", "Classe"),
            ExportColumn("room", "Salle"),
            ExportColumn("slot", "Créneau"),
            ExportColumn("hours", "Heures", numeric=True),
            ExportColumn("is_total", "Total"),
        ),
        rows=tuple(rows),
        totals={"hours": round_hours(sum((g.total_hours for g in report.groups), Fraction(0)))},
        institution=institution,
    )
