from __future__ import annotations

import uuid

from flask import Flask, g, jsonify, request

from ..common.auth import login_required
from ..common.validators import require_mapping, require_text
from ..core.enums import FormAction, FormKind, FormStatus, OutputCategory
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container
from .model import LineScores, PerformanceForm, RatingLine


def _iso(value):
    return value.isoformat() if value else None


def _form_json(form: PerformanceForm, actions=()) -> dict:
    return {
        "form_id": form.form_id,
        "kind": form.kind.value,
        "owner_id": form.owner_id,
        "division": form.division,
        "cycle_id": form.cycle_id,
        "status": form.status.value,
        "final_rating": form.final_rating,
        "adjectival_rating": form.adjectival_rating.value if form.adjectival_rating else None,
        "supervisor_id": form.supervisor_id,
        "reviewed_by": form.reviewed_by,
        "approved_by": form.approved_by,
        "review_comments": form.review_comments,
        "final_remarks": form.final_remarks,
        "submitted_at": _iso(form.submitted_at),
        "reviewed_at": _iso(form.reviewed_at),
        "finalized_at": _iso(form.finalized_at),
        "updated_at": _iso(form.updated_at),
        "lines": [
            {
                "line_id": ln.line_id,
                "category": ln.category.value,
                "output_order": ln.output_order,
                "output_description": ln.output_description,
                "success_indicator": ln.success_indicator,
                "actual_accomplishment": ln.actual_accomplishment,
                "quantity": ln.quantity,
                "quality": ln.quality,
                "timeliness": ln.timeliness,
                "average": ln.average,
                "remarks": ln.remarks,
            }
            for ln in form.lines
        ],
        "available_actions": [a.value for a in actions],
    }


def _parse_enum(enum_cls, raw, label: str):
    try:
        return enum_cls(raw)
    except ValueError:
        raise ValidationError(f"Invalid {label}: {raw}") from None


def _parse_lines(raw) -> list[RatingLine]:
    """Content only; sub-scores are written by the rating actions."""
    if not isinstance(raw, list):
        raise ValidationError("lines must be a list")
    lines = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValidationError("Each line must be an object")
        try:
            order = int(item.get("output_order", i + 1))
        except (TypeError, ValueError):
            raise ValidationError("output_order must be an integer") from None
        lines.append(
            RatingLine(
                line_id=str(item.get("line_id") or uuid.uuid4()),
                category=_parse_enum(OutputCategory, item.get("category"), "category"),
                output_order=order,
                output_description=require_text(item.get("output_description"), "Output description") or "",
                success_indicator=require_text(item.get("success_indicator"), "Success indicator"),
                actual_accomplishment=require_text(item.get("actual_accomplishment"), "Actual accomplishment"),
                remarks=require_text(item.get("remarks"), "Remarks"),
            )
        )
    return lines


def _parse_scores(raw) -> list[LineScores]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError("scores must be a list")
    scores = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("line_id"):
            raise ValidationError("Each score needs a line_id")
        scores.append(
            LineScores(
                line_id=str(item["line_id"]),
                quantity=item.get("quantity"),
                quality=item.get("quality"),
                timeliness=item.get("timeliness"),
            )
        )
    return scores


def register(app: Flask, container: Container) -> None:
    auth = login_required(container.employees_repo)
    service = container.performance_service

    def _respond(form: PerformanceForm, status: int = 200):
        return jsonify(_form_json(form, service.available_actions(g.actor, form))), status

    @app.route("/api/forms", methods=["GET"], endpoint="forms_list")
    @auth
    def forms_list():
        kind = _parse_enum(FormKind, request.args.get("kind", FormKind.IPCR.value), "form kind")
        status = request.args.get("status")
        forms = service.list_forms(
            g.actor,
            kind=kind,
            cycle_id=request.args.get("cycle_id"),
            status=_parse_enum(FormStatus, status, "status") if status else None,
        )
        return jsonify([_form_json(f) for f in forms])

    @app.route("/api/forms", methods=["POST"], endpoint="forms_create")
    @auth
    def forms_create():
        payload = require_mapping(request.get_json(silent=True) or {})
        form_id = service.create_form(
            g.actor,
            kind=_parse_enum(FormKind, payload.get("kind"), "form kind"),
            cycle_id=str(payload.get("cycle_id") or ""),
            supervisor_id=require_text(payload.get("supervisor_id"), "supervisor_id"),
        )
        return _respond(service.get_form(g.actor, form_id), 201)

    @app.route("/api/forms/<form_id>", methods=["GET"], endpoint="forms_detail")
    @auth
    def forms_detail(form_id: str):
        return _respond(service.get_form(g.actor, form_id))

    @app.route("/api/forms/<form_id>/lines", methods=["PUT"], endpoint="forms_save_lines")
    @auth
    def forms_save_lines(form_id: str):
        payload = require_mapping(request.get_json(silent=True) or {})
        form = service.save_lines(g.actor, form_id, _parse_lines(payload.get("lines")))
        return _respond(form)

    @app.route("/api/forms/<form_id>/<action>", methods=["POST"], endpoint="forms_action")
    @auth
    def forms_action(form_id: str, action: str):
        try:
            form_action = FormAction(action)
        except ValueError:
            raise NotFoundError(f"Unknown action: {action}") from None
        payload = require_mapping(request.get_json(silent=True) or {})
        form = service.transition(
            g.actor,
            form_id,
            form_action,
            remarks=require_text(payload.get("remarks"), "Remarks"),
            scores=_parse_scores(payload.get("scores")),
        )
        return _respond(form)
