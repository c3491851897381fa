"""Routes for the game blueprint."""

from __future__ import annotations

from typing import Any

from songclash.player.services import generate_player_id
from songclash.utils import json_body, request_context, success

from . import bp
from .services import GameService


@bp.route("", methods=["POST"])
def create_game() -> Any:
    """Create a game; the caller becomes its creator."""
    body = json_body()
    ctx = request_context("create_game")
    result = GameService.create_game(
        body.get("playerId") or generate_player_id(),
        ctx,
        settings=body.get("settings"),
        player_name=body.get("playerName"),
    )
    return success("Game created.", 201, **result)


@bp.route("/<game_id>/settings", methods=["POST"])
def update_settings(game_id: str) -> Any:
    """Update the settings of a waiting game."""
    body = json_body()
    settings = GameService.update_game_settings(
        game_id,
        body.get("settings"),
        body.get("playerId"),
        request_context("update_game_settings"),
    )
    return success("Game settings updated.", settings=settings)


@bp.route("/<game_id>/start", methods=["POST"])
def start_game(game_id: str) -> Any:
    """Start a waiting game."""
    body = json_body()
    GameService.start_game(
        game_id,
        request_context("start_game"),
        requesting_player_id=body.get("playerId"),
    )
    return success("Game started.")
