from __future__ import annotations

from typing import Any

from flask import jsonify, request

from ..errors import ChapterSmithError, InvalidPayload
from ..services.chapter_plan import plan_chapter
from ..services.chapters import save_chapter
from . import bp


def _json_payload() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidPayload("Send a JSON object in the request body.")
    return payload


def _int_field(payload: dict, key: str) -> Any:
    """Accept numeric strings from form-backed clients; leave anything else for validation."""

    value = payload.get(key)
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    if value is None:
        raise InvalidPayload(f"'{key}' is required.", field=key)
    return value


@bp.route("/prepare", methods=["POST"])
def prepare():
    try:
        payload = _json_payload()
        plan = plan_chapter(
            _int_field(payload, "project_id"),
            _int_field(payload, "number"),
            override_pov=payload.get("override_pov"),
        )
    except ChapterSmithError as exc:
        return jsonify(exc.to_payload()), exc.status_code

    return jsonify(plan.to_dict())


@bp.route("/save", methods=["POST"])
def save():
    try:
        payload = _json_payload()
        result = save_chapter(
            _int_field(payload, "project_id"),
            _int_field(payload, "number"),
            payload.get("title"),
            payload.get("content"),
            payload.get("pov_used"),
        )
    except ChapterSmithError as exc:
        return jsonify(exc.to_payload()), exc.status_code

    return jsonify(result.to_dict())
