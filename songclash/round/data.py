"""Data access for round documents."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from songclash.core.constants import ROUNDS_SUBCOLLECTION
from songclash.game.data import get_game_ref

from .models import Round

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction

    from songclash.core.context import RequestContext


def get_round_ref(db: Client, game_id: str, round_number: int) -> DocumentReference:
    """Return the reference of a round; rounds are keyed by their number."""
    return (
        get_game_ref(db, game_id)
        .collection(ROUNDS_SUBCOLLECTION)
        .document(str(round_number))
    )


def get_round_by_number(
    db: Client,
    game_id: str,
    round_number: int,
    ctx: RequestContext,
    transaction: Transaction | None = None,
) -> Round | None:
    """Fetch a round, or None when it has not been created."""
    ctx.logger.debug(f"Reading round {round_number} of game {game_id}")
    snapshot = cast(
        "DocumentSnapshot",
        get_round_ref(db, game_id, round_number).get(transaction=transaction),
    )
    if not snapshot.exists:
        ctx.logger.warning(f"Round {round_number} of game {game_id} not found.")
        return None

    data = cast(dict[str, Any], snapshot.to_dict() or {})
    data["id"] = snapshot.id
    return cast(Round, data)


def create_round_document(
    db: Client,
    game_id: str,
    round_number: int,
    round_data: dict[str, Any],
    transaction: Transaction,
    ctx: RequestContext,
) -> None:
    """Queue the creation of a round document on ``transaction``."""
    ctx.logger.debug(f"Setting round {round_number} of game {game_id}")
    transaction.set(
        get_round_ref(db, game_id, round_number),
        {
            **round_data,
            "roundNumber": round_number,
            "createdAt": firestore.SERVER_TIMESTAMP,
        },
    )


def update_round_details(
    db: Client,
    game_id: str,
    round_number: int,
    updates: dict[str, Any],
    ctx: RequestContext,
    transaction: Transaction | None = None,
) -> None:
    """Update fields of a round, inside ``transaction`` when one is given."""
    round_ref = get_round_ref(db, game_id, round_number)
    ctx.logger.debug(f"Updating round {round_number} of game {game_id}")
    if transaction is not None:
        transaction.update(round_ref, updates)
    else:
        round_ref.update(updates)
