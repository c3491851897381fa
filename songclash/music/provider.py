"""Music provider contract and factory."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, TypedDict

from songclash.errors import InternalError

if TYPE_CHECKING:
    from songclash.core.context import RequestContext


class MusicTrack(TypedDict):
    """Provider-neutral track metadata."""

    trackId: str
    name: str
    artistName: str
    albumName: Optional[str]
    previewUrl: Optional[str]
    albumImageUrl: Optional[str]
    durationMs: Optional[int]
    providerUrl: Optional[str]


class MusicProvider(Protocol):
    """What the game needs from a music catalogue."""

    def search_tracks(
        self,
        query: str,
        ctx: RequestContext,
        allow_explicit: bool = True,
        limit: int = 10,
    ) -> list[MusicTrack]:
        """Search the catalogue."""
        ...

    def get_track_details(
        self, track_id: str, ctx: RequestContext
    ) -> MusicTrack | None:
        """Fetch one track, or None when the provider does not know it."""
        ...


def get_music_provider(
    name: str = "deezer",
    base_url: str | None = None,
    timeout: float = 5.0,
) -> MusicProvider:
    """Return the provider registered under ``name``."""
    if name == "deezer":
        from .deezer import DEEZER_API_BASE_URL, DeezerMusicProvider

        return DeezerMusicProvider(base_url=base_url or DEEZER_API_BASE_URL, timeout=timeout)
    raise InternalError(f"Unknown music provider '{name}'.")
