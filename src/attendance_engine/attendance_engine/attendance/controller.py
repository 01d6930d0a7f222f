from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, session_key_from
from ..container import Container
from ..core.exceptions import ValidationError
from .codec import absences_to_document


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes/<class_id>/absences", methods=["POST"], endpoint="api_mark_absent")
    def api_mark_absent(class_id: str):
        data = json_body()
        key = session_key_from(data, class_id=class_id)

        session = container.schedule_service.find_session(key)
        if session.neutralized:
            raise ValidationError(f"Séance neutralisée : {session.reason or 'fermeture'}")

        year = container.academic_year_service.get_year(key.academic_year_id)
        class_info = container.schedules_repo.get_class(class_id)

        record = container.attendance_service.mark_absent(
            session.occurrence,
            student_id=str(data.get("student_id") or ""),
            student_full_name=str(data.get("student_full_name") or ""),
            class_label=class_info.label if class_info else class_id,
            academic_year_label=year.label,
        )
        return jsonify({"success": True, "absences": absences_to_document(record)}), 201

    @app.route("/api/classes/<class_id>/absences/delete", methods=["POST"], endpoint="api_clear_absences")
    def api_clear_absences(class_id: str):
        data = json_body()
        key = session_key_from(data, class_id=class_id)
        cleared = container.attendance_service.clear_absences(key, student_id=str(data.get("student_id") or ""))
        return jsonify({"success": True, "cleared": cleared})
