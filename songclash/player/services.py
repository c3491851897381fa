"""Service layer for players joining a game."""

from __future__ import annotations

import secrets
import string
import time
from typing import TYPE_CHECKING

from firebase_admin import firestore

from songclash.core.transactions import run_in_transaction
from songclash.errors import (
    DuplicateResourceError,
    FailedPreconditionError,
    InternalError,
    NotFoundError,
    ResourceExhaustedError,
)
from songclash.game import data as game_data
from songclash.game.models import WAITING
from songclash.game.validation import require_id, validate_player_name

from . import data as player_data

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.transaction import Transaction

    from songclash.core.context import RequestContext

_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase


def generate_player_id() -> str:
    """Generate a player ID such as ``player_1718000000000_k3x9a``."""
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(5))
    return f"player_{int(time.time() * 1000)}_{suffix}"


class PlayerService:
    """Service class for player-related operations."""

    @staticmethod
    def join_game(
        game_id: str,
        player_name: str,
        ctx: RequestContext,
        db: Client | None = None,
    ) -> dict[str, str]:
        """Add a player to a game that is still waiting for players."""
        ctx.logger.info(f"join_game called for game {game_id}")
        require_id(game_id, "Game ID")
        name = validate_player_name(player_name)

        db = db or firestore.client()
        player_id = generate_player_id()

        def _join(transaction: Transaction) -> None:
            game = game_data.get_game_by_id(db, game_id, ctx, transaction)
            if game is None:
                raise NotFoundError(f"Game {game_id} not found.")
            players = player_data.get_all_players(db, game_id, ctx, transaction)

            status = game.get("status")
            if status != WAITING:
                raise FailedPreconditionError(
                    f"Game is not waiting for players (status: {status})."
                )

            max_players = game.get("settings", {}).get("maxPlayers")
            if not max_players:
                ctx.logger.error(f"Missing maxPlayers setting in game {game_id}")
                raise InternalError("Game configuration error (missing maxPlayers).")

            player_count = max(game.get("playerCount", 0), len(players))
            if player_count >= max_players:
                raise ResourceExhaustedError(
                    f"Game is full ({player_count}/{max_players} players)."
                )

            if any(p.get("name", "").lower() == name.lower() for p in players):
                raise DuplicateResourceError(
                    f'Player name "{name}" is already taken in this game.'
                )

            # joinOrder is never reused, so it comes from the counter
            player_data.add_player_document(
                db,
                game_id,
                player_id,
                {
                    "name": name,
                    "score": 0,
                    "hasJoined": True,
                    "jokerAvailable": True,
                    "isCreator": False,
                    "joinOrder": player_count,
                },
                transaction,
                ctx,
            )
            game_data.update_game_details(
                db, game_id, {"playerCount": player_count + 1}, ctx, transaction
            )

        run_in_transaction(db, _join)
        ctx.logger.info(f"Player {player_id} joined game {game_id}")
        return {"gameId": game_id, "playerId": player_id}
