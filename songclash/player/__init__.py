"""The player blueprint."""

from flask import Blueprint

bp = Blueprint("player", __name__, url_prefix="/api/games")

from . import routes  # noqa: E402

__all__ = ["routes"]
