"""The music blueprint."""

from flask import Blueprint

bp = Blueprint("music", __name__, url_prefix="/api/music")

from . import routes  # noqa: E402

__all__ = ["routes"]
