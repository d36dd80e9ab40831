from flask import Blueprint

bp = Blueprint("chapters", __name__, url_prefix="/api/chapters")

from . import routes  # noqa: E402,F401
