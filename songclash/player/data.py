"""Data access for player documents."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from songclash.core.constants import PLAYERS_SUBCOLLECTION
from songclash.game.data import get_game_ref

from .models import Player, join_order_key

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.collection import CollectionReference
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction

    from songclash.core.context import RequestContext


def get_players_ref(db: Client, game_id: str) -> CollectionReference:
    """Return the players subcollection of a game."""
    return get_game_ref(db, game_id).collection(PLAYERS_SUBCOLLECTION)


def get_player_ref(db: Client, game_id: str, player_id: str) -> DocumentReference:
    """Return the reference of a single player document."""
    return get_players_ref(db, game_id).document(player_id)


def _to_player(snapshot: DocumentSnapshot) -> Player:
    data = cast(dict[str, Any], snapshot.to_dict() or {})
    data["id"] = snapshot.id
    data.setdefault("score", 0)
    data.setdefault("name", "")
    return cast(Player, data)


def get_player_by_id(
    db: Client,
    game_id: str,
    player_id: str,
    ctx: RequestContext,
    transaction: Transaction | None = None,
) -> Player | None:
    """Fetch a single player, or None when the document is missing."""
    snapshot = cast(
        "DocumentSnapshot",
        get_player_ref(db, game_id, player_id).get(transaction=transaction),
    )
    if not snapshot.exists:
        ctx.logger.warning(f"Player {player_id} not found in game {game_id}.")
        return None
    return _to_player(snapshot)


def get_all_players(
    db: Client,
    game_id: str,
    ctx: RequestContext,
    transaction: Transaction | None = None,
) -> list[Player]:
    """Fetch every player of a game ordered by join order."""
    ctx.logger.debug(f"Reading all players of game {game_id}")
    snapshots = get_players_ref(db, game_id).stream(transaction=transaction)
    players = [_to_player(snap) for snap in snapshots if snap.exists]
    players.sort(key=join_order_key)
    return players


def add_player_document(
    db: Client,
    game_id: str,
    player_id: str,
    player_data: dict[str, Any],
    transaction: Transaction,
    ctx: RequestContext,
) -> None:
    """Queue the creation of a player document on ``transaction``."""
    ctx.logger.debug(f"Setting player {player_id} in game {game_id}")
    transaction.set(
        get_player_ref(db, game_id, player_id),
        {**player_data, "joinedAt": firestore.SERVER_TIMESTAMP},
    )


def update_player_details(
    db: Client,
    game_id: str,
    player_id: str,
    updates: dict[str, Any],
    ctx: RequestContext,
    transaction: Transaction | None = None,
) -> None:
    """Update fields of a player, inside ``transaction`` when one is given."""
    player_ref = get_player_ref(db, game_id, player_id)
    ctx.logger.debug(f"Updating player {player_id} in game {game_id}")
    if transaction is not None:
        transaction.update(player_ref, updates)
    else:
        player_ref.update(updates)
