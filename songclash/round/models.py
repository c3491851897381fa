"""Data models for the round blueprint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, TypedDict

from songclash.core.types import FirestoreDocument, RankingsByPlayer, WinnerData
from songclash.errors import ValidationError

# Round.status values
ROUND_ANNOUNCING = "announcing"
ROUND_SELECTING = "selecting_songs"
ROUND_PLAYBACK = "playback"
ROUND_RANKING = "ranking"
ROUND_SCORING = "scoring"
ROUND_FINISHED = "finished"

# Playback actions accepted by the round host
PLAY = "play"
PAUSE = "pause"
NEXT = "next"
PREV = "prev"
SEEK = "seek"
PLAYBACK_ACTIONS = (PLAY, PAUSE, NEXT, PREV, SEEK)


class PlayerSongSubmission(TypedDict, total=False):
    """A track nominated by one player."""

    trackId: str
    name: str
    artist: str
    previewUrl: str
    albumImageUrl: Optional[str]
    submittedAt: Any


class RankedSong(PlayerSongSubmission, total=False):
    """An entry of ``songsForRanking``: a nomination and who made it."""

    submittedBy: str


class RoundResult(TypedDict):
    """A display row of the results of a finished round."""

    playerId: str
    playerName: str
    songName: Optional[str]
    songArtist: Optional[str]
    pointsAwarded: int
    isWinner: bool


class Round(FirestoreDocument, total=False):
    """A round document in the ``rounds`` subcollection of a game."""

    roundNumber: int
    status: str
    challenge: Optional[str]
    hostPlayerId: Optional[str]
    playerSongs: dict[str, PlayerSongSubmission]
    songsForRanking: list[RankedSong]
    selectionStartTime: Any
    rankingStartTime: Any
    currentPlayingTrackIndex: int
    isPlaying: bool
    playbackEndTime: Any
    rankings: RankingsByPlayer
    results: list[RoundResult]
    winnerData: WinnerData


@dataclass
class SongNomination:
    """Track metadata submitted by a player during song selection."""

    track_id: str
    name: str
    artist: str
    preview_url: str
    album_image_url: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> SongNomination:
        """Build a nomination from a camelCase request payload."""
        if not isinstance(data, dict):
            raise ValidationError("Song nomination must be an object.")
        return cls(
            track_id=data.get("trackId", ""),
            name=data.get("name", ""),
            artist=data.get("artist", ""),
            preview_url=data.get("previewUrl", ""),
            album_image_url=data.get("albumImageUrl"),
        )

    def validate(self) -> None:
        """Raise ValidationError when a required field is missing."""
        for value, label in (
            (self.track_id, "Track ID"),
            (self.name, "Song name"),
            (self.artist, "Artist"),
            (self.preview_url, "Preview URL"),
        ):
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"{label} is required.")

    def to_submission(self) -> PlayerSongSubmission:
        """Convert to the stored ``playerSongs`` entry, without timestamp."""
        return PlayerSongSubmission(
            trackId=str(self.track_id),
            name=self.name.strip(),
            artist=self.artist.strip(),
            previewUrl=self.preview_url,
            albumImageUrl=self.album_image_url,
        )


@dataclass
class PredefinedNomination:
    """A pick from the songs the current challenge suggests."""

    track_id: str

    def validate(self) -> None:
        if not isinstance(self.track_id, str) or not self.track_id.strip():
            raise ValidationError("Predefined track ID is required.")


def nomination_from_dict(data: Any) -> SongNomination | PredefinedNomination:
    """Parse a nomination payload.

    Accepts ``{"predefinedTrackId": ...}``, ``{"searchResult": {...}}`` or
    the search result fields at the top level.
    """
    if not isinstance(data, dict):
        raise ValidationError("Song nomination must be an object.")
    if "predefinedTrackId" in data:
        track_id = data["predefinedTrackId"]
        return PredefinedNomination(
            track_id=str(track_id)
            if isinstance(track_id, (str, int)) and not isinstance(track_id, bool)
            else ""
        )
    if "searchResult" in data:
        return SongNomination.from_dict(data["searchResult"])
    return SongNomination.from_dict(data)
