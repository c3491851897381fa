"""Pure scoring functions for a round.

Point curve: a ranking of ``k`` tracks awards ``k`` points to the track
ranked 1st, ``k - 1`` to the 2nd, down to 1 point for the last. Every owner
of a track receives that track's aggregate total.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from songclash.core.types import Ranking, WinnerData
    from songclash.player.models import Player
    from songclash.round.models import PlayerSongSubmission, RoundResult


@dataclass(frozen=True)
class RoundScore:
    """The outcome of scoring one round."""

    track_points: dict[str, int] = field(default_factory=dict)
    player_points: dict[str, int] = field(default_factory=dict)
    winner_player_ids: list[str] = field(default_factory=list)
    winning_score: int = 0

    def winner_data(self) -> WinnerData:
        """Summary stored on the round as ``winnerData``."""
        return {
            "playerIds": list(self.winner_player_ids),
            "score": self.winning_score,
        }


def points_for_rank(rank: int, ranked_count: int) -> int:
    """Points earned by a track placed at ``rank`` out of ``ranked_count``."""
    if ranked_count <= 0 or rank < 1 or rank > ranked_count:
        return 0
    return ranked_count - rank + 1


def aggregate_track_points(
    rankings: Mapping[str, Ranking], track_ids: Iterable[str]
) -> dict[str, int]:
    """Sum the points every ranking gives to each track."""
    totals = {track_id: 0 for track_id in track_ids}
    for ranking in rankings.values():
        ranked_count = len(ranking)
        for track_id, rank in ranking.items():
            if track_id not in totals:
                continue
            totals[track_id] += points_for_rank(rank, ranked_count)
    return totals


def score_round(
    player_songs: Mapping[str, PlayerSongSubmission],
    rankings: Mapping[str, Ranking],
    songs_for_ranking: Iterable[Mapping[str, Any]],
) -> RoundScore:
    """Score a round from its nominations and submitted rankings."""
    track_ids = [str(song["trackId"]) for song in songs_for_ranking]
    track_points = aggregate_track_points(rankings, track_ids)

    player_points = {
        player_id: track_points.get(str(song.get("trackId")), 0)
        for player_id, song in player_songs.items()
    }

    winning_score = max(player_points.values(), default=0)
    if winning_score <= 0:
        return RoundScore(track_points, player_points, [], 0)

    winners = sorted(
        player_id
        for player_id, points in player_points.items()
        if points == winning_score
    )
    return RoundScore(track_points, player_points, winners, winning_score)


def build_round_results(
    score: RoundScore,
    player_songs: Mapping[str, PlayerSongSubmission],
    players: Iterable[Player],
) -> list[RoundResult]:
    """Build the per-player rows displayed once the round is finished."""
    winners = set(score.winner_player_ids)
    rows: list[RoundResult] = []
    for player in players:
        song = player_songs.get(player["id"])
        rows.append(
            {
                "playerId": player["id"],
                "playerName": player.get("name", ""),
                "songName": song.get("name") if song else None,
                "songArtist": song.get("artist") if song else None,
                "pointsAwarded": score.player_points.get(player["id"], 0),
                "isWinner": player["id"] in winners,
            }
        )
    rows.sort(key=lambda row: (-row["pointsAwarded"], row["playerName"]))
    return rows
