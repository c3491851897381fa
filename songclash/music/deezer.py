"""Deezer implementation of the music provider."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING, Any

import httpx

from songclash.errors import InternalError, ValidationError

from .provider import MusicTrack

if TYPE_CHECKING:
    from songclash.core.context import RequestContext

DEEZER_API_BASE_URL = "https://api.deezer.com"
# Deezer reports unknown ids as HTTP 200 with this error code
DEEZER_NOT_FOUND_CODE = 800
MAX_SEARCH_LIMIT = 50


def map_deezer_track(raw: Any) -> MusicTrack | None:
    """Map a Deezer track object onto MusicTrack; None when unusable."""
    if not isinstance(raw, dict) or not raw.get("id") or not raw.get("title"):
        return None
    album = raw.get("album") or {}
    artist = raw.get("artist") or {}
    duration = raw.get("duration")
    return MusicTrack(
        trackId=str(raw["id"]),
        name=raw["title"],
        artistName=artist.get("name") or "Unknown Artist",
        albumName=album.get("title"),
        previewUrl=raw.get("preview") or None,
        albumImageUrl=album.get("cover_small") or album.get("cover"),
        durationMs=int(duration) * 1000 if duration else None,
        providerUrl=raw.get("link"),
    )


def is_explicit(raw: dict[str, Any]) -> bool:
    """Deezer flags explicit lyrics and covers with 1 (explicit) or 2."""
    return raw.get("explicit_lyrics") in (1, 2, True) or raw.get(
        "explicit_content_cover"
    ) in (1, 2)


class DeezerMusicProvider:
    """Music provider backed by the public Deezer API."""

    def __init__(
        self,
        base_url: str = DEEZER_API_BASE_URL,
        timeout: float = 5.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    def _get(self, path: str, ctx: RequestContext, **params: Any) -> Any:
        url = f"{self._base_url}{path}"
        ctx.logger.debug(f"Calling Deezer endpoint {url} {params}")
        try:
            if self._client is not None:
                response = self._client.get(url, params=params or None)
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    response = client.get(url, params=params or None)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == HTTPStatus.NOT_FOUND:
                return None
            ctx.logger.error(f"Deezer request to {url} failed with HTTP {status}")
            raise InternalError(
                f"Music provider request failed (HTTP {status})."
            ) from e
        except (httpx.RequestError, ValueError) as e:
            # ValueError covers bodies that are not JSON
            ctx.logger.error(f"Deezer request to {url} failed: {e}")
            raise InternalError("Music provider is unavailable.") from e

    def search_tracks(
        self,
        query: str,
        ctx: RequestContext,
        allow_explicit: bool = True,
        limit: int = 10,
    ) -> list[MusicTrack]:
        """Search Deezer, dropping explicit tracks unless allowed."""
        if not isinstance(query, str) or not query.strip():
            raise ValidationError("Search query is required.")
        limit = max(1, min(int(limit), MAX_SEARCH_LIMIT))
        ctx.logger.info(
            f"Searching Deezer for '{query}' (limit={limit}, "
            f"allow_explicit={allow_explicit})"
        )

        payload = self._get("/search", ctx, q=query.strip(), limit=limit) or {}
        if payload.get("error"):
            message = payload["error"].get("message") or "Unknown Deezer error"
            raise InternalError(f"Deezer search failed: {message}")

        raw_tracks = payload.get("data")
        if not isinstance(raw_tracks, list):
            ctx.logger.warning(f"Deezer search returned no data for '{query}'")
            return []

        tracks: list[MusicTrack] = []
        for raw in raw_tracks:
            track = map_deezer_track(raw)
            if track is None:
                continue
            if not allow_explicit and is_explicit(raw):
                continue
            tracks.append(track)
        ctx.logger.info(f"Deezer search for '{query}' returned {len(tracks)} tracks")
        return tracks

    def get_track_details(
        self, track_id: str, ctx: RequestContext
    ) -> MusicTrack | None:
        """Fetch a single Deezer track."""
        payload = self._get(f"/track/{track_id}", ctx)
        if payload is None:
            ctx.logger.warning(f"Deezer track {track_id} not found (HTTP 404)")
            return None

        error = payload.get("error")
        if error:
            if error.get("code") == DEEZER_NOT_FOUND_CODE:
                ctx.logger.warning(f"Deezer track {track_id} not found")
                return None
            raise InternalError(
                f"Deezer track lookup failed: {error.get('message') or 'Unknown error'}"
            )

        track = map_deezer_track(payload)
        if track is None:
            raise InternalError("Failed to process track details from Deezer.")
        return track
