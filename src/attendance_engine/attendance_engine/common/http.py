from __future__ import annotations

import csv
import io
import logging

from flask import Flask, jsonify, request

from ..core.exceptions import NotFoundError, StoreUnavailableError, ValidationError
from ..schedules.model import SessionKey
from .validators import parse_date_param, require_hhmm, require_non_empty, require_semester

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation_error(e: ValidationError):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return jsonify({"success": False, "message": str(e)}), 404

    @app.errorhandler(StoreUnavailableError)
    def _store_unavailable(e: StoreUnavailableError):
        # Partial results are never returned; the caller may retry the whole query.
        logger.error("Store unavailable on %s %s: %s", request.method, request.path, e)
        return jsonify({"success": False, "retry": True, "message": "Source de données indisponible, réessayez."}), 503


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Corps JSON attendu")
    return data


def required_date(source: dict, name: str, label: str):
    value = parse_date_param(source.get(name), label)
    if value is None:
        raise ValidationError(f"{label} requis (YYYY-MM-DD)")
    return value


def session_key_from(source: dict, *, class_id: str):
    """Build a SessionKey from request args or body: year, semester, date, subject, start, end."""
    return SessionKey(
        class_id=class_id,
        academic_year_id=require_non_empty(source.get("year") or "", "Année académique"),
        semester=require_semester(source.get("semester")),
        date=required_date(source, "date", "Date"),
        subject_id=require_non_empty(source.get("subject") or "", "Matière"),
        start=require_hhmm(source.get("start") or "", "Début"),
        end=require_hhmm(source.get("end") or "", "Fin"),
    )


def csv_response(app: Flask, *, table, filename: str):
    """Write an ExportTable to a CSV attachment (UTF-8 with BOM for spreadsheet apps)."""

    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=table.fieldnames, extrasaction="ignore")
    writer.writerow({c.key: c.label for c in table.columns})
    for row in table.rows:
        writer.writerow(row)
    if table.totals:
        writer.writerow({**{k: "" for k in table.fieldnames}, **{k: v for k, v in table.totals.items() if k in table.fieldnames}})

    csv_bytes = out.getvalue().encode("utf-8-sig")
    return app.response_class(
        csv_bytes,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
