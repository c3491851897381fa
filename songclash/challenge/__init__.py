"""The challenge blueprint."""

from flask import Blueprint

bp = Blueprint("challenge", __name__, url_prefix="/api/challenges")

from . import routes  # noqa: E402

__all__ = ["routes"]
