from __future__ import annotations

from typing import Any

from flask import jsonify, request

from songclash.utils import request_context

from . import bp
from .services import ChallengeService


@bp.route("", methods=["GET"])
def list_challenges() -> Any:
    """List the predefined challenge texts."""
    challenges = ChallengeService.list_challenges(request_context("list_challenges"))
    return jsonify({"success": True, "challenges": challenges})


@bp.route("/songs", methods=["GET"])
def predefined_songs() -> Any:
    """List the songs suggested for the challenge given as ``text``."""
    songs = ChallengeService.get_predefined_songs(
        request.args.get("text", ""), request_context("get_challenge_details")
    )
    return jsonify({"success": True, "predefinedSongs": songs})
