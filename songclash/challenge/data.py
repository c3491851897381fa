"""Data access for the challenge catalogue."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from songclash.core.constants import CHALLENGES_COLLECTION

from .models import Challenge

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.collection import CollectionReference
    from google.cloud.firestore_v1.transaction import Transaction

    from songclash.core.context import RequestContext


def get_challenges_ref(db: Client) -> CollectionReference:
    return db.collection(CHALLENGES_COLLECTION)


def _to_challenge(snapshot: DocumentSnapshot) -> Challenge:
    data = cast(dict[str, Any], snapshot.to_dict() or {})
    data["id"] = snapshot.id
    return cast(Challenge, data)


def get_challenge_by_text(
    db: Client,
    text: str,
    ctx: RequestContext,
    transaction: Transaction | None = None,
) -> Challenge | None:
    """Fetch the first challenge whose ``text`` matches exactly."""
    ctx.logger.debug(f"Looking up challenge '{text}'")
    query = (
        get_challenges_ref(db)
        .where(filter=firestore.FieldFilter("text", "==", text))
        .limit(1)
    )
    for snapshot in query.stream(transaction=transaction):
        return _to_challenge(snapshot)
    ctx.logger.warning(f"No challenge found with text '{text}'")
    return None


def get_all_challenges(db: Client, ctx: RequestContext) -> list[Challenge]:
    """Fetch every challenge that has a usable ``text`` field."""
    challenges: list[Challenge] = []
    for snapshot in get_challenges_ref(db).stream():
        challenge = _to_challenge(snapshot)
        if not isinstance(challenge.get("text"), str):
            ctx.logger.warning(
                f"Challenge document {snapshot.id} has no text; skipping"
            )
            continue
        challenges.append(challenge)
    return challenges
