from __future__ import annotations

from typing import Any

from flask import current_app, jsonify, request

from songclash.errors import ValidationError
from songclash.utils import request_context

from . import bp
from .provider import get_music_provider


@bp.route("/search", methods=["GET"])
def search() -> Any:
    """Search the configured music provider."""
    query = request.args.get("q", "")
    allow_explicit = request.args.get("allowExplicit", "true").lower() in (
        "true",
        "1",
        "t",
    )
    try:
        limit = int(request.args.get("limit", 10))
    except ValueError as e:
        raise ValidationError("limit must be a number.") from e

    provider = get_music_provider(
        current_app.config["MUSIC_PROVIDER"],
        base_url=current_app.config["DEEZER_API_BASE_URL"],
        timeout=current_app.config["MUSIC_SEARCH_TIMEOUT"],
    )
    tracks = provider.search_tracks(
        query, request_context("search_tracks"), allow_explicit=allow_explicit,
        limit=limit,
    )
    return jsonify({"success": True, "tracks": tracks})
