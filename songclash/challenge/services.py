"""Read-only service for the predefined challenge catalogue."""

from __future__ import annotations

from typing import TYPE_CHECKING

from firebase_admin import firestore

from songclash.errors import ValidationError

from . import data as challenge_data

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from songclash.core.context import RequestContext

    from .models import PredefinedSong


class ChallengeService:
    """Service class for challenge lookups."""

    @staticmethod
    def list_challenges(ctx: RequestContext, db: Client | None = None) -> list[str]:
        """Return the text of every predefined challenge."""
        db = db or firestore.client()
        challenges = [c["text"] for c in challenge_data.get_all_challenges(db, ctx)]
        ctx.logger.info(f"Fetched {len(challenges)} predefined challenges")
        return challenges

    @staticmethod
    def get_predefined_songs(
        challenge_text: str, ctx: RequestContext, db: Client | None = None
    ) -> list[PredefinedSong]:
        """Songs suggested for a challenge; empty when it is not in the catalogue."""
        if not isinstance(challenge_text, str) or not challenge_text.strip():
            raise ValidationError("Challenge text is required.")
        db = db or firestore.client()
        challenge = challenge_data.get_challenge_by_text(db, challenge_text.strip(), ctx)
        if challenge is None:
            return []
        return list(challenge.get("predefinedSongs") or [])
