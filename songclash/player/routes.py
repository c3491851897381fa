from __future__ import annotations

from typing import Any

from songclash.utils import json_body, request_context, success

from . import bp
from .services import PlayerService


@bp.route("/<game_id>/join", methods=["POST"])
def join_game(game_id: str) -> Any:
    """Join a waiting game under the given name."""
    body = json_body()
    result = PlayerService.join_game(
        game_id, body.get("playerName"), request_context("join_game")
    )
    return success("Joined game.", 201, **result)
