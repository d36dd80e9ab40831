from __future__ import annotations

import io

from flask import jsonify, request, send_file

from ..errors import ChapterSmithError, InvalidPayload
from ..services.chapters import get_chapter, list_chapters
from ..services.manuscript import export_manuscript
from ..services.projects import (
    create_project,
    delete_project,
    get_project,
    list_projects,
    update_project,
)
from . import bp

_TRUTHY = {"1", "true", "yes", "on"}


def _json_payload() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidPayload("Send a JSON object in the request body.")
    return payload


@bp.route("", methods=["GET"])
def index():
    projects = list_projects()
    return jsonify([project.to_dict(include_chapters=False) for project in projects])


@bp.route("", methods=["POST"])
def create():
    try:
        payload = _json_payload()
        project = create_project(
            title=payload.get("title"),
            outline=payload.get("outline"),
            chapter_count=payload.get("chapter_count"),
            pov_mode=payload.get("pov_mode"),
            genre=payload.get("genre"),
        )
    except ChapterSmithError as exc:
        return jsonify(exc.to_payload()), exc.status_code

    return jsonify(project.to_dict()), 201


@bp.route("/<int:project_id>", methods=["GET"])
def detail(project_id: int):
    try:
        project = get_project(project_id)
    except ChapterSmithError as exc:
        return jsonify(exc.to_payload()), exc.status_code

    return jsonify(project.to_dict())


@bp.route("/<int:project_id>", methods=["PUT", "PATCH"])
def update(project_id: int):
    try:
        payload = _json_payload()
        project = update_project(project_id, payload)
    except ChapterSmithError as exc:
        return jsonify(exc.to_payload()), exc.status_code

    return jsonify(project.to_dict())


@bp.route("/<int:project_id>", methods=["DELETE"])
def delete(project_id: int):
    try:
        delete_project(project_id)
    except ChapterSmithError as exc:
        return jsonify(exc.to_payload()), exc.status_code

    return jsonify({"id": project_id, "deleted": True})


@bp.route("/<int:project_id>/chapters", methods=["GET"])
def chapters(project_id: int):
    try:
        entries = list_chapters(project_id)
    except ChapterSmithError as exc:
        return jsonify(exc.to_payload()), exc.status_code

    return jsonify([chapter.to_summary() for chapter in entries])


@bp.route("/<int:project_id>/chapters/<int:number>", methods=["GET"])
def chapter_detail(project_id: int, number: int):
    try:
        chapter = get_chapter(project_id, number)
    except ChapterSmithError as exc:
        return jsonify(exc.to_payload()), exc.status_code

    return jsonify(chapter.to_dict())


@bp.route("/<int:project_id>/export", methods=["GET"])
def export(project_id: int):
    try:
        manuscript = export_manuscript(project_id)
    except ChapterSmithError as exc:
        return jsonify(exc.to_payload()), exc.status_code

    if request.args.get("download", "").strip().lower() in _TRUTHY:
        return send_file(
            io.BytesIO(manuscript.content.encode("utf-8")),
            mimetype="text/markdown",
            as_attachment=True,
            download_name=manuscript.filename,
        )

    return jsonify(manuscript.to_dict())
