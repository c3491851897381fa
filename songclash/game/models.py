"""Data models for the game blueprint."""

from __future__ import annotations

import re
from typing import Any, Optional, TypedDict

from songclash.core.types import FirestoreDocument

WAITING = "waiting"
FINISHED = "finished"

# Round-local phases, in the order a round moves through them
ANNOUNCING = "announcing"
SELECTING = "selecting"
PLAYBACK = "playback"
RANKING = "ranking"
SCORING = "scoring"
ROUND_FINISHED = "finished"

ROUND_PHASES = (ANNOUNCING, SELECTING, PLAYBACK, RANKING, SCORING, ROUND_FINISHED)

_ROUND_STATUS_RE = re.compile(r"^round(\d+)_([a-z]+)$")


class GameSettings(TypedDict):
    """Settings chosen by the game creator while the game is waiting."""

    rounds: int
    maxPlayers: int
    allowExplicit: bool
    selectionTimeLimit: Optional[int]
    rankingTimeLimit: Optional[int]


class Game(FirestoreDocument, total=False):
    """A game document in Firestore."""

    status: str
    creatorPlayerId: str
    roundHostPlayerId: Optional[str]
    currentRound: int
    totalRounds: int
    playerCount: int
    settings: GameSettings
    challenge: Optional[str]
    startedAt: Any
    finishedAt: Any


def round_status(round_number: int, phase: str) -> str:
    """Build the game status for a phase of a round, e.g. ``round2_ranking``."""
    return f"round{round_number}_{phase}"


def parse_round_status(status: str | None) -> tuple[int, str] | None:
    """Split ``round{N}_{phase}`` into ``(N, phase)``; None for other statuses."""
    if not status:
        return None
    match = _ROUND_STATUS_RE.match(status)
    if not match or match.group(2) not in ROUND_PHASES:
        return None
    return int(match.group(1)), match.group(2)


def is_status_consistent(game: Game) -> bool:
    """Check that the status agrees with ``currentRound``."""
    status = game.get("status")
    current_round = game.get("currentRound", 0)
    if status == WAITING:
        return current_round == 0
    if status == FINISHED:
        return current_round > 0
    parsed = parse_round_status(status)
    return parsed is not None and parsed[0] == current_round
