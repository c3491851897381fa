"""Routes for the round blueprint."""

from __future__ import annotations

from typing import Any

from songclash.utils import json_body, request_context, success

from . import bp
from .services import RoundService


@bp.route("/<game_id>/rounds/next", methods=["POST"])
def start_next_round(game_id: str) -> Any:
    """Start the next round, or finish the game after the last one."""
    status = RoundService.start_next_round(game_id, request_context("start_next_round"))
    return success("Game advanced.", status=status)


@bp.route("/<game_id>/rounds/<int:round_number>/challenge", methods=["POST"])
def set_challenge(game_id: str, round_number: int) -> Any:
    """Announce the challenge of a round."""
    body = json_body()
    challenge = RoundService.set_challenge(
        game_id,
        round_number,
        body.get("challenge"),
        body.get("playerId"),
        request_context("set_challenge"),
    )
    return success("Challenge set.", challenge=challenge)


@bp.route("/<game_id>/selection/start", methods=["POST"])
def start_selection(game_id: str) -> Any:
    body = json_body()
    RoundService.start_selection_phase(
        game_id,
        request_context("start_selection_phase"),
        requesting_player_id=body.get("playerId"),
    )
    return success("Song selection started.")


@bp.route("/<game_id>/nominations", methods=["POST"])
def submit_nomination(game_id: str) -> Any:
    body = json_body()
    RoundService.submit_song_nomination(
        game_id,
        body.get("playerId"),
        body.get("nomination"),
        request_context("submit_song_nomination"),
    )
    return success("Song nominated.")


@bp.route("/<game_id>/playback/start", methods=["POST"])
def start_playback(game_id: str) -> Any:
    body = json_body()
    RoundService.start_playback_phase(
        game_id, body.get("playerId"), request_context("start_playback_phase")
    )
    return success("Playback started.")


@bp.route("/<game_id>/playback", methods=["POST"])
def control_playback(game_id: str) -> Any:
    """Apply a play, pause, next, prev or seek action."""
    body = json_body()
    playback = RoundService.control_playback(
        game_id,
        body.get("playerId"),
        body.get("action"),
        request_context("control_playback"),
        index=body.get("index"),
    )
    playback.pop("playbackEndTime", None)
    return success("Playback updated.", playback=playback)


@bp.route("/<game_id>/ranking/start", methods=["POST"])
def start_ranking(game_id: str) -> Any:
    body = json_body()
    RoundService.start_ranking_phase(
        game_id, body.get("playerId"), request_context("start_ranking_phase")
    )
    return success("Ranking started.")


@bp.route("/<game_id>/rankings", methods=["POST"])
def submit_ranking(game_id: str) -> Any:
    body = json_body()
    RoundService.submit_ranking(
        game_id,
        body.get("playerId"),
        body.get("rankings"),
        request_context("submit_ranking"),
    )
    return success("Ranking submitted.")


@bp.route("/<game_id>/rounds/finalize", methods=["POST"])
def finalize_round(game_id: str) -> Any:
    """Score the round with the rankings received so far."""
    body = json_body()
    RoundService.finalize_round(
        game_id, body.get("playerId"), request_context("finalize_round")
    )
    return success("Round finalized.")
