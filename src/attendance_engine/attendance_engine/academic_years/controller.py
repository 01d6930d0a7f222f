from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import to_iso_date
from ..common.http import json_body
from ..container import Container
from .model import AcademicYear


def _year_to_dict(year: AcademicYear) -> dict:
    return {
        "id": year.year_id,
        "label": year.label,
        "start_date": to_iso_date(year.start_date) if year.start_date else None,
        "end_date": to_iso_date(year.end_date) if year.end_date else None,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/academic-years", methods=["GET"], endpoint="api_academic_years")
    def api_academic_years():
        years = container.academic_year_service.list_years()
        return jsonify({"success": True, "years": [_year_to_dict(y) for y in years]})

    @app.route("/api/academic-years", methods=["POST"], endpoint="api_academic_years_create")
    def api_academic_years_create():
        data = json_body()
        year = container.academic_year_service.create_year(str(data.get("label") or ""))
        return jsonify({"success": True, "year": _year_to_dict(year)}), 201
