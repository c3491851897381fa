"""Common utilities for tests."""

from typing import Any, Optional

from songclash.core.context import RequestContext
from tests.mock_utils import patch_mockfirestore

__all__ = [
    "make_ctx",
    "patch_mockfirestore",
    "seed_challenge",
    "seed_game",
    "seed_players",
    "seed_round",
    "song",
]

SETTINGS = {
    "rounds": 3,
    "maxPlayers": 4,
    "allowExplicit": True,
    "selectionTimeLimit": 90,
    "rankingTimeLimit": 60,
}


def make_ctx(name: str = "test") -> RequestContext:
    return RequestContext.create(name, trace_id=f"{name}_trace")


def seed_game(db: Any, game_id: str = "GAME01", **fields: Any) -> dict[str, Any]:
    """Write a game document, defaulting to a waiting game created by p1."""
    data = {
        "status": "waiting",
        "creatorPlayerId": "p1",
        "roundHostPlayerId": None,
        "currentRound": 0,
        "totalRounds": SETTINGS["rounds"],
        "playerCount": 0,
        "settings": dict(SETTINGS),
        "challenge": None,
    }
    data.update(fields)
    db.collection("games").document(game_id).set(data)
    return data


def seed_players(
    db: Any,
    game_id: str = "GAME01",
    player_ids: tuple[str, ...] = ("p1", "p2", "p3"),
    scores: Optional[dict[str, int]] = None,
) -> None:
    """Write players in join order; the first one is the creator."""
    scores = scores or {}
    for order, player_id in enumerate(player_ids):
        (
            db.collection("games")
            .document(game_id)
            .collection("players")
            .document(player_id)
            .set(
                {
                    "name": f"Name {player_id}",
                    "score": scores.get(player_id, 0),
                    "hasJoined": True,
                    "jokerAvailable": True,
                    "isCreator": order == 0,
                    "joinOrder": order,
                }
            )
        )


def seed_round(
    db: Any, game_id: str = "GAME01", round_number: int = 1, **fields: Any
) -> dict[str, Any]:
    data = {
        "roundNumber": round_number,
        "status": "announcing",
        "hostPlayerId": "p1",
        "challenge": None,
        "playerSongs": {},
        "rankings": {},
    }
    data.update(fields)
    (
        db.collection("games")
        .document(game_id)
        .collection("rounds")
        .document(str(round_number))
        .set(data)
    )
    return data


def seed_challenge(
    db: Any, text: str = "Songs about rain", songs: Optional[list[dict]] = None,
    doc_id: str = "rain",
) -> None:
    if songs is None:
        songs = [
            {
                "trackId": "900",
                "title": "Purple Rain",
                "artist": "Prince",
                "previewUrl": "https://cdn.example/900.mp3",
                "albumImageUrl": "https://cdn.example/900.jpg",
            },
            {
                "trackId": "901",
                "title": "Umbrella",
                "artist": "Rihanna",
                "previewUrl": "",
            },
        ]
    db.collection("challenges").document(doc_id).set(
        {"text": text, "predefinedSongs": songs}
    )


def song(track_id: str, name: Optional[str] = None) -> dict[str, Any]:
    return {
        "trackId": track_id,
        "name": name or f"Song {track_id}",
        "artist": f"Artist {track_id}",
        "previewUrl": f"https://cdn.example/{track_id}.mp3",
        "albumImageUrl": None,
    }
