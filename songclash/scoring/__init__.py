"""Round scoring."""

from .engine import (
    RoundScore,
    aggregate_track_points,
    build_round_results,
    points_for_rank,
    score_round,
)

__all__ = [
    "RoundScore",
    "aggregate_track_points",
    "build_round_results",
    "points_for_rank",
    "score_round",
]
