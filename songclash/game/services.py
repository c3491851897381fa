"""Service layer for the game lifecycle."""

from __future__ import annotations

import secrets
import string
from typing import TYPE_CHECKING, Any

from firebase_admin import firestore

from songclash.core.constants import (
    DEFAULT_GAME_SETTINGS,
    GAME_ID_LENGTH,
    MIN_PLAYERS_TO_START,
)
from songclash.core.transactions import run_in_transaction
from songclash.errors import (
    DuplicateResourceError,
    FailedPreconditionError,
    NotFoundError,
    PermissionDeniedError,
)
from songclash.player import data as player_data
from songclash.player.models import Player
from songclash.round import data as round_data
from songclash.round.models import ROUND_ANNOUNCING

from . import data as game_data
from .models import ANNOUNCING, WAITING, GameSettings, round_status
from .validation import require_id, validate_game_settings, validate_player_name

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.transaction import Transaction

    from songclash.core.context import RequestContext

    from .models import Game

_GAME_ID_ALPHABET = string.ascii_uppercase + string.digits
DEFAULT_CREATOR_NAME = "Player 1"


def generate_game_id() -> str:
    """Generate a short, upper-case game code players can type in."""
    return "".join(secrets.choice(_GAME_ID_ALPHABET) for _ in range(GAME_ID_LENGTH))


def choose_first_host(game: Game, players: list[Player]) -> str | None:
    """Pick the host of round 1: the creator, else the first player to join."""
    creator_id = game.get("creatorPlayerId")
    if creator_id and any(p["id"] == creator_id for p in players):
        return creator_id
    return players[0]["id"] if players else None


class GameService:
    """Service class for game-related operations."""

    @staticmethod
    def create_game(
        creator_player_id: str,
        ctx: RequestContext,
        settings: dict[str, Any] | None = None,
        player_name: str | None = None,
        db: Client | None = None,
    ) -> dict[str, str]:
        """Create a game in the waiting state with its creator as first player.

        Returns:
            ``{"gameId": ..., "playerId": ...}``
        """
        ctx.logger.info(f"create_game called by {creator_player_id}")
        require_id(creator_player_id, "Creator player ID")
        validated = validate_game_settings(
            DEFAULT_GAME_SETTINGS if settings is None else settings
        )
        name = validate_player_name(
            DEFAULT_CREATOR_NAME if player_name is None else player_name
        )

        db = db or firestore.client()
        game_id = generate_game_id()

        def _create(transaction: Transaction) -> None:
            if game_data.get_game_by_id(db, game_id, ctx, transaction) is not None:
                raise DuplicateResourceError(
                    f"Game ID {game_id} already exists. Please try again."
                )

            game_data.create_game_document(
                db,
                game_id,
                {
                    "status": WAITING,
                    "creatorPlayerId": creator_player_id,
                    "roundHostPlayerId": None,
                    "currentRound": 0,
                    "totalRounds": validated["rounds"],
                    "playerCount": 1,
                    "settings": dict(validated),
                    "challenge": None,
                },
                transaction,
                ctx,
            )
            player_data.add_player_document(
                db,
                game_id,
                creator_player_id,
                {
                    "name": name,
                    "score": 0,
                    "hasJoined": True,
                    "jokerAvailable": True,
                    "isCreator": True,
                    "joinOrder": 0,
                },
                transaction,
                ctx,
            )

        run_in_transaction(db, _create)
        ctx.logger.info(f"Game {game_id} created by {creator_player_id}")
        return {"gameId": game_id, "playerId": creator_player_id}

    @staticmethod
    def update_game_settings(
        game_id: str,
        settings: Any,
        requesting_player_id: str,
        ctx: RequestContext,
        db: Client | None = None,
    ) -> GameSettings:
        """Replace the settings of a waiting game. Creator only."""
        ctx.logger.info(
            f"update_game_settings called for game {game_id} "
            f"by {requesting_player_id}"
        )
        require_id(game_id, "Game ID")
        require_id(requesting_player_id, "Player ID")
        validated = validate_game_settings(settings)

        db = db or firestore.client()

        def _update(transaction: Transaction) -> None:
            game = game_data.get_game_by_id(db, game_id, ctx, transaction)
            if game is None:
                raise NotFoundError(f"Game {game_id} not found.")

            if game.get("creatorPlayerId") != requesting_player_id:
                ctx.logger.warning(
                    f"Player {requesting_player_id} is not the creator of "
                    f"game {game_id}"
                )
                raise PermissionDeniedError(
                    "Only the game creator can update settings."
                )

            status = game.get("status")
            if status != WAITING:
                raise FailedPreconditionError(
                    "Game settings can only be changed while the game is in "
                    f"the 'waiting' state (current: {status})."
                )

            game_data.update_game_details(
                db,
                game_id,
                {
                    "settings": dict(validated),
                    "totalRounds": validated["rounds"],
                    "updatedAt": firestore.SERVER_TIMESTAMP,
                },
                ctx,
                transaction,
            )

        run_in_transaction(db, _update)
        ctx.logger.info(f"Settings of game {game_id} updated")
        return validated

    @staticmethod
    def start_game(
        game_id: str,
        ctx: RequestContext,
        requesting_player_id: str | None = None,
        db: Client | None = None,
    ) -> None:
        """Move a waiting game into the announcing phase of round 1."""
        ctx.logger.info(f"start_game called for game {game_id}")
        require_id(game_id, "Game ID")
        db = db or firestore.client()

        def _start(transaction: Transaction) -> None:
            game = game_data.get_game_by_id(db, game_id, ctx, transaction)
            if game is None:
                raise NotFoundError(f"Game {game_id} not found.")
            players = player_data.get_all_players(db, game_id, ctx, transaction)

            status = game.get("status")
            if status != WAITING:
                raise FailedPreconditionError(
                    f"Game {game_id} is not in the 'waiting' state "
                    f"(current: {status})."
                )

            if len(players) < MIN_PLAYERS_TO_START:
                raise FailedPreconditionError(
                    f"Cannot start game {game_id}. Need at least "
                    f"{MIN_PLAYERS_TO_START} players (currently {len(players)})."
                )

            if (
                requesting_player_id is not None
                and requesting_player_id != game.get("creatorPlayerId")
            ):
                ctx.logger.warning(
                    f"Player {requesting_player_id} tried to start game {game_id}"
                )
                raise PermissionDeniedError("Only the game creator can start the game.")

            host_id = choose_first_host(game, players)
            total_rounds = game.get("settings", {}).get(
                "rounds", game.get("totalRounds")
            )

            game_data.update_game_details(
                db,
                game_id,
                {
                    "status": round_status(1, ANNOUNCING),
                    "currentRound": 1,
                    "totalRounds": total_rounds,
                    "roundHostPlayerId": host_id,
                    "challenge": None,
                    "startedAt": firestore.SERVER_TIMESTAMP,
                },
                ctx,
                transaction,
            )
            round_data.create_round_document(
                db,
                game_id,
                1,
                {
                    "status": ROUND_ANNOUNCING,
                    "hostPlayerId": host_id,
                    "challenge": None,
                    "playerSongs": {},
                    "rankings": {},
                },
                transaction,
                ctx,
            )

        run_in_transaction(db, _start)
        ctx.logger.info(f"Game {game_id} started")
