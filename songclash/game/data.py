"""Data access for game documents."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from songclash.core.constants import GAMES_COLLECTION

from .models import Game

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction

    from songclash.core.context import RequestContext


def get_game_ref(db: Client, game_id: str) -> DocumentReference:
    """Return the reference of a game document."""
    return db.collection(GAMES_COLLECTION).document(game_id)


def get_game_by_id(
    db: Client,
    game_id: str,
    ctx: RequestContext,
    transaction: Transaction | None = None,
) -> Game | None:
    """Fetch a game, reading through ``transaction`` when one is given."""
    game_ref = get_game_ref(db, game_id)
    ctx.logger.debug(f"Reading game document {game_id}")
    snapshot = cast("DocumentSnapshot", game_ref.get(transaction=transaction))
    if not snapshot.exists:
        ctx.logger.warning(f"Game document {game_id} not found.")
        return None

    data = cast(dict[str, Any], snapshot.to_dict() or {})
    data["id"] = snapshot.id
    return cast(Game, data)


def create_game_document(
    db: Client,
    game_id: str,
    game_data: dict[str, Any],
    transaction: Transaction,
    ctx: RequestContext,
) -> None:
    """Queue the creation of a game document on ``transaction``."""
    game_ref = get_game_ref(db, game_id)
    ctx.logger.debug(f"Setting game document {game_id} within transaction")
    transaction.set(
        game_ref, {**game_data, "createdAt": firestore.SERVER_TIMESTAMP}
    )


def update_game_details(
    db: Client,
    game_id: str,
    updates: dict[str, Any],
    ctx: RequestContext,
    transaction: Transaction | None = None,
) -> None:
    """Update fields of a game, inside ``transaction`` when one is given."""
    game_ref = get_game_ref(db, game_id)
    ctx.logger.debug(f"Updating game document {game_id}: {sorted(updates)}")
    if transaction is not None:
        transaction.update(game_ref, updates)
    else:
        game_ref.update(updates)
