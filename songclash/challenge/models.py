"""Data models for the predefined challenge catalogue."""

from __future__ import annotations

from typing import Optional, TypedDict


class _PredefinedSongBase(TypedDict):
    trackId: str
    title: str
    artist: str
    previewUrl: str


class PredefinedSong(_PredefinedSongBase, total=False):
    """A song suggested for a challenge."""

    albumImageUrl: Optional[str]


class Challenge(TypedDict, total=False):
    """A document in the ``challenges`` collection."""

    id: str
    text: str
    predefinedSongs: list[PredefinedSong]


def find_predefined_song(challenge: Challenge, track_id: str) -> PredefinedSong | None:
    """Return the song of ``challenge`` with ``track_id``, if it lists one."""
    for predefined in challenge.get("predefinedSongs") or []:
        if str(predefined.get("trackId")) == str(track_id):
            return predefined
    return None
