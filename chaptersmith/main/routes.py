from flask import current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import GENRES, MAX_CHAPTER_COUNT, MIN_CHAPTER_COUNT, POV_MODES
from . import bp


@bp.route("/api/health")
@bp.route("/test")
def health():
    database_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("Database health check failed")
        database_status = "unavailable"

    config = current_app.config
    payload = {
        "status": "ok" if database_status == "ok" else "degraded",
        "database": database_status,
        "options": {
            "pov_modes": list(POV_MODES),
            "genres": list(GENRES),
            "chapter_count": {"minimum": MIN_CHAPTER_COUNT, "maximum": MAX_CHAPTER_COUNT},
        },
        "word_count_policy": {
            "minimum": config.get("CHAPTER_MIN_WORDS"),
            "maximum": config.get("CHAPTER_MAX_WORDS"),
            "strict": bool(config.get("STRICT_WORD_COUNT")),
        },
    }
    return jsonify(payload), 200 if database_status == "ok" else 503
