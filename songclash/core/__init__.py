"""Core module for the songclash application."""

from .context import RequestContext, generate_trace_id
from .types import FirestoreDocument, Ranking, RankingsByPlayer, WinnerData

__all__ = [
    "FirestoreDocument",
    "Ranking",
    "RankingsByPlayer",
    "RequestContext",
    "WinnerData",
    "generate_trace_id",
]
