"""Core data types for the songclash application."""

from typing import Any, Dict, List, TypedDict  # noqa: UP035

# trackId -> rank (1 is best) submitted by one player
Ranking = Dict[str, int]  # noqa: UP006
# playerId -> Ranking
RankingsByPlayer = Dict[str, Ranking]  # noqa: UP006


class _FirestoreDocumentBase(TypedDict):
    id: str
    createdAt: Any


class FirestoreDocument(_FirestoreDocumentBase, total=False):
    """Fields every game, round and player document may carry."""

    updatedAt: Any


class WinnerData(TypedDict):
    """Winners of a round and the score they tied on."""

    playerIds: List[str]  # noqa: UP006
    score: int
