from __future__ import annotations

from dataclasses import asdict

from flask import Flask, g, jsonify, request

from ..common.auth import login_required
from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_mapping
from ..core.exceptions import ValidationError
from ..container import Container
from .model import DTRLog, MonthlySummary

_PUNCH_FIELDS = ("am_in", "am_out", "pm_in", "pm_out", "remarks")


def _log_json(log: DTRLog) -> dict:
    data = asdict(log)
    data["log_date"] = log.log_date.isoformat()
    data["created_at"] = log.created_at.isoformat() if log.created_at else None
    data["updated_at"] = log.updated_at.isoformat() if log.updated_at else None
    return data


def _summary_json(summary: MonthlySummary) -> dict:
    return {
        "days": [
            {
                "date": d.log_date.isoformat(),
                "am_in": d.am_in,
                "am_out": d.am_out,
                "pm_in": d.pm_in,
                "pm_out": d.pm_out,
                "tardiness_minutes": d.tardiness_minutes,
                "undertime_minutes": d.undertime_minutes,
                "is_incomplete": d.is_incomplete,
                "remarks": d.remarks,
            }
            for d in summary.days
        ],
        "total_tardiness": summary.total_tardiness,
        "total_undertime": summary.total_undertime,
        "total_tardiness_hm": list(summary.total_tardiness_hm),
        "total_undertime_hm": list(summary.total_undertime_hm),
        "incomplete_dates": [d.isoformat() for d in summary.incomplete_dates],
    }


def register(app: Flask, container: Container) -> None:
    auth = login_required(container.employees_repo)

    @app.route("/api/dtr/<employee_id>/<int:year>/<int:month>", methods=["GET"], endpoint="dtr_summary")
    @auth
    def dtr_summary(employee_id: str, year: int, month: int):
        summary = container.dtr_service.monthly_summary(g.actor, employee_id=employee_id, year=year, month=month)
        return jsonify(_summary_json(summary))

    @app.route("/api/dtr", methods=["POST"], endpoint="dtr_encode")
    @auth
    def dtr_encode():
        payload = require_mapping(request.get_json(silent=True) or {})
        try:
            log_date = parse_iso_date(str(payload.get("log_date") or ""))
        except ValueError:
            raise ValidationError("log_date must be YYYY-MM-DD") from None
        log_id = container.dtr_service.encode(
            g.actor,
            employee_id=str(payload.get("employee_id") or ""),
            log_date=log_date,
            **{k: payload.get(k) for k in _PUNCH_FIELDS},
        )
        return jsonify({"log_id": log_id}), 201

    @app.route("/api/dtr/<log_id>", methods=["PATCH"], endpoint="dtr_update")
    @auth
    def dtr_update(log_id: str):
        payload = require_mapping(request.get_json(silent=True) or {})
        changes = {k: payload[k] for k in _PUNCH_FIELDS if k in payload}
        updated = container.dtr_service.update(g.actor, log_id=log_id, **changes)
        return jsonify(_log_json(updated))

    @app.route("/api/dtr/<log_id>", methods=["DELETE"], endpoint="dtr_delete")
    @auth
    def dtr_delete(log_id: str):
        container.dtr_service.delete(g.actor, log_id=log_id)
        return "", 204
