from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, to_iso_date
from ..common.http import json_body, required_date
from ..common.validators import parse_date_param, require_non_empty, require_semester
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes/<class_id>/sessions", methods=["GET"], endpoint="api_class_sessions")
    def api_class_sessions(class_id: str):
        """Sessions of a class for one day (Sunday and empty timetables give an empty list)."""

        year_id = require_non_empty(request.args.get("year") or "", "Année académique")
        semester = require_semester(request.args.get("semester"))
        on_date = parse_date_param(request.args.get("date"), "Date") or now_local().date()

        day = container.schedule_service.sessions_for_day(
            class_id=class_id,
            academic_year_id=year_id,
            semester=semester,
            on_date=on_date,
        )
        return jsonify(
            {
                "success": True,
                "scope": day.scope.to_dict(),
                "date": to_iso_date(day.date),
                "day_of_week": day.day_of_week,
                "sessions": [s.to_dict() for s in day.sessions],
                "empty": not day.sessions,
            }
        )

    @app.route("/api/classes/<class_id>/makeups", methods=["POST"], endpoint="api_class_makeups")
    def api_class_makeups(class_id: str):
        data = json_body()
        override_id = container.schedule_service.add_makeup(
            class_id=class_id,
            academic_year_id=require_non_empty(str(data.get("year") or ""), "Année académique"),
            subject_id=str(data.get("subject") or ""),
            on_date=required_date(data, "date", "Date"),
            start=str(data.get("start") or ""),
            end=str(data.get("end") or ""),
            subject_label=data.get("subject_label"),
            room=data.get("room"),
            teacher_name=data.get("teacher_name"),
        )
        return jsonify({"success": True, "id": override_id}), 201
