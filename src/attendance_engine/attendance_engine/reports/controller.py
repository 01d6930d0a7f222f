from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, to_iso_date
from ..common.http import csv_response, required_date, session_key_from
from ..common.validators import parse_date_param
from ..container import Container
from ..core.exceptions import NotFoundError
from . import export
from .absence_aggregator import StudentAbsenceSummary
from .export import round_hours
from .hours_aggregator import TeacherDayGroup, TeacherHoursSummary
from .periods import Period, month_period, parse_month, parse_window, resolve_period


def _period_to_dict(period: Period) -> dict:
    return {"start": to_iso_date(period.start), "end": to_iso_date(period.end), "label": period.label}


def _student_to_dict(row: StudentAbsenceSummary) -> dict:
    return {
        "student_id": row.student_id,
        "student_full_name": row.student_full_name,
        "class_label": row.class_label,
        "count": row.total_count,
        "minutes": row.total_minutes,
        "entries": [
            {
                "date": to_iso_date(d.date),
                "start": d.entry.start,
                "end": d.entry.end,
                "subject_label": d.entry.subject_label,
                "class_label": d.class_label,
                "teacher_name": d.entry.teacher_name,
                "room": d.entry.room,
                "minutes": d.minutes,
            }
            for d in row.entries
        ],
    }


def _teacher_to_dict(summary: TeacherHoursSummary) -> dict:
    return {
        "teacher_id": summary.teacher_id,
        "teacher_name": summary.teacher_name,
        "total_hours": str(round_hours(summary.total_hours)),
        "classes": [
            {
                "class_label": class_label,
                "subjects": [
                    {"subject_label": subject, "hours": str(round_hours(hours))}
                    for subject, hours in subjects.items()
                ],
            }
            for class_label, subjects in summary.by_class.items()
        ],
    }


def _day_group_to_dict(group: TeacherDayGroup) -> dict:
    return {
        "teacher_id": group.teacher_id,
        "teacher_name": group.teacher_name,
        "total_hours": str(round_hours(group.total_hours)),
        "rows": [
            {
                "subject_label": r.signin.subject_label or r.signin.subject_id,
                "class_label": r.class_label,
                "room": r.signin.room,
                "start": r.signin.start,
                "end": r.signin.end,
                "hours": str(round_hours(r.hours)),
            }
            for r in group.rows
        ],
    }


def register(app: Flask, container: Container) -> None:
    institution = container.institution_name

    def _session_report(class_id: str):
        key = session_key_from(request.args, class_id=class_id)
        session = container.schedule_service.find_session(key)
        return container.absence_report_service.session_report(session)

    def _range_report():
        today = now_local().date()
        period = resolve_period(
            today=today,
            start=parse_date_param(request.args.get("start"), "Début"),
            end=parse_date_param(request.args.get("end"), "Fin"),
            window=parse_window(request.args.get("window")),
            academic_year_label=request.args.get("academic_year_label") or None,
        )
        return container.absence_report_service.range_report(
            period=period,
            class_id=request.args.get("class_id") or None,
            academic_year_id=request.args.get("year") or None,
            search=request.args.get("search") or None,
        )

    def _month() -> Period:
        return month_period(parse_month(request.args.get("month"), today=now_local().date()))

    @app.route("/api/classes/<class_id>/session-absentees", methods=["GET"], endpoint="api_session_absentees")
    def api_session_absentees(class_id: str):
        report = _session_report(class_id)
        return jsonify(
            {
                "success": True,
                "scope": report.scope.to_dict(),
                "session": report.session.to_dict(),
                "class_label": report.class_label,
                "rows": [_student_to_dict(r) for r in report.rows],
                "empty": not report.rows,
            }
        )

    @app.route("/api/classes/<class_id>/session-absentees.csv", methods=["GET"], endpoint="api_session_absentees_csv")
    def api_session_absentees_csv(class_id: str):
        report = _session_report(class_id)
        occ = report.session.occurrence
        filename = f"absents_{class_id}_{occ.date.strftime('%Y%m%d')}_{occ.start.replace(':', '')}.csv"
        return csv_response(app, table=export.session_absentees_table(report, institution=institution), filename=filename)

    @app.route("/api/reports/absences", methods=["GET"], endpoint="api_absence_report")
    def api_absence_report():
        report = _range_report()
        return jsonify(
            {
                "success": True,
                "scope": report.scope.to_dict(),
                "period": _period_to_dict(report.period),
                "scope_label": report.scope_label,
                "rows": [_student_to_dict(r) for r in report.rows],
                "empty": not report.rows,
            }
        )

    @app.route("/api/reports/absences.csv", methods=["GET"], endpoint="api_absence_report_csv")
    def api_absence_report_csv():
        report = _range_report()
        table = (
            export.absence_details_table(report, institution=institution)
            if request.args.get("details") == "1"
            else export.absence_summary_table(report, institution=institution)
        )
        filename = f"absences_{report.period.start.strftime('%Y%m%d')}_{report.period.end.strftime('%Y%m%d')}.csv"
        return csv_response(app, table=table, filename=filename)

    @app.route("/api/reports/teacher-hours", methods=["GET"], endpoint="api_teacher_hours")
    def api_teacher_hours():
        report = container.teacher_hours_report_service.month_report(_month())
        return jsonify(
            {
                "success": True,
                "scope": report.scope.to_dict(),
                "period": _period_to_dict(report.period),
                "teachers": [_teacher_to_dict(s) for s in report.summaries],
                "empty": not report.summaries,
            }
        )

    @app.route("/api/reports/teacher-hours.csv", methods=["GET"], endpoint="api_teacher_hours_csv")
    def api_teacher_hours_csv():
        report = container.teacher_hours_report_service.month_report(_month())
        filename = f"emargements_{report.period.start.strftime('%Y%m')}.csv"
        return csv_response(app, table=export.teacher_hours_table(report, institution=institution), filename=filename)

    @app.route("/api/reports/teacher-hours/<teacher_id>", methods=["GET"], endpoint="api_teacher_hours_detail")
    def api_teacher_hours_detail(teacher_id: str):
        period = _month()
        summary = container.teacher_hours_report_service.teacher_detail(teacher_id, period)
        if summary is None:
            raise NotFoundError("Aucun émargement pour ce professeur sur la période")
        return jsonify({"success": True, "period": _period_to_dict(period), "teacher": _teacher_to_dict(summary)})

    @app.route("/api/reports/teacher-day", methods=["GET"], endpoint="api_teacher_day")
    def api_teacher_day():
        on_date = parse_date_param(request.args.get("date"), "Date") or now_local().date()
        report = container.teacher_hours_report_service.day_report(on_date)
        return jsonify(
            {
                "success": True,
                "scope": report.scope.to_dict(),
                "period": _period_to_dict(report.period),
                "groups": [_day_group_to_dict(g) for g in report.groups],
                "empty": not report.groups,
            }
        )

    @app.route("/api/reports/teacher-day.csv", methods=["GET"], endpoint="api_teacher_day_csv")
    def api_teacher_day_csv():
        on_date = required_date(request.args, "date", "Date")
        report = container.teacher_hours_report_service.day_report(on_date)
        filename = f"emargements_{on_date.strftime('%Y%m%d')}.csv"
        return csv_response(app, table=export.teacher_day_table(report, institution=institution), filename=filename)
