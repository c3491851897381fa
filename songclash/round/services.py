"""Service layer for the per-round phase transitions.

Every operation re-reads the game, and the round or players it needs,
through the transaction it runs in. State checks come first, then the
caller's role, then the rules specific to the operation. Nothing is written
until every check has passed.
"""

from __future__ import annotations

import datetime
import random
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from firebase_admin import firestore

from songclash.challenge import data as challenge_data
from songclash.challenge.models import find_predefined_song
from songclash.core.constants import PREVIEW_DURATION_SECONDS
from songclash.core.transactions import run_in_transaction
from songclash.errors import (
    DuplicateResourceError,
    FailedPreconditionError,
    InternalError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from songclash.game import data as game_data
from songclash.game.models import (
    ANNOUNCING,
    FINISHED,
    PLAYBACK,
    RANKING,
    ROUND_FINISHED,
    SCORING,
    SELECTING,
    round_status,
)
from songclash.game.validation import require_id, validate_challenge_text
from songclash.player import data as player_data
from songclash.scoring import build_round_results, score_round

from . import data as round_data
from .models import (
    NEXT,
    PAUSE,
    PLAYBACK_ACTIONS,
    PREV,
    ROUND_ANNOUNCING,
    ROUND_PLAYBACK,
    ROUND_RANKING,
    ROUND_SCORING,
    ROUND_SELECTING,
    SEEK,
    PredefinedNomination,
    SongNomination,
    nomination_from_dict,
)
from .models import ROUND_FINISHED as ROUND_DONE

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.transaction import Transaction

    from songclash.core.context import RequestContext
    from songclash.core.types import Ranking
    from songclash.game.models import Game
    from songclash.player.models import Player

    from .models import PlayerSongSubmission, RankedSong, Round


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _playback_end_time() -> datetime.datetime:
    return _now() + datetime.timedelta(seconds=PREVIEW_DURATION_SECONDS)


def next_host_id(players: list[Player], current_host_id: str | None) -> str | None:
    """Return the player after the current host in join order, wrapping.

    ``players`` must already be sorted by join order. When the current host
    is unknown the first player hosts.
    """
    if not players:
        return None
    ids = [p["id"] for p in players]
    if current_host_id not in ids:
        return ids[0]
    return ids[(ids.index(current_host_id) + 1) % len(ids)]


def build_songs_for_ranking(
    game_id: str,
    round_number: int,
    player_songs: Mapping[str, PlayerSongSubmission],
) -> list[RankedSong]:
    """Freeze the nominations into the ordered pool players listen to and rank.

    The order is a shuffle seeded with the game and round, so the same
    nominations always produce the same pool. A track nominated by several
    players appears once.
    """
    submitters = sorted(player_songs)
    random.Random(f"{game_id}:{round_number}").shuffle(submitters)

    pool: list[RankedSong] = []
    seen: set[str] = set()
    for player_id in submitters:
        song = player_songs[player_id]
        track_id = str(song.get("trackId"))
        if track_id in seen:
            continue
        seen.add(track_id)
        entry: dict[str, Any] = {
            k: v for k, v in song.items() if k != "submittedAt"
        }
        entry["submittedBy"] = player_id
        pool.append(entry)  # type: ignore[arg-type]
    return pool


def validate_ranking(
    rankings: Any,
    songs_for_ranking: list[RankedSong],
    own_track_id: str | None,
) -> Ranking:
    """Check a ranking covers every pooled track but the player's own, 1..k."""
    if not isinstance(rankings, Mapping) or not rankings:
        raise ValidationError("Rankings object is required and cannot be empty.")

    expected = {str(s.get("trackId")) for s in songs_for_ranking}
    if own_track_id is not None:
        expected.discard(str(own_track_id))
    ranked = {str(track_id) for track_id in rankings}
    if ranked != expected:
        raise ValidationError(
            "Rankings must cover every song in the round except your own."
        )

    ranks = list(rankings.values())
    if any(not isinstance(r, int) or isinstance(r, bool) for r in ranks):
        raise ValidationError("Ranks must be whole numbers.")
    if sorted(ranks) != list(range(1, len(ranks) + 1)):
        raise ValidationError(
            f"Ranks must use each position from 1 to {len(ranks)} exactly once."
        )
    return {str(track_id): rank for track_id, rank in rankings.items()}


def _load_active_round(
    db: Client, game_id: str, ctx: RequestContext, transaction: Transaction
) -> tuple[Game, int, Round]:
    game = game_data.get_game_by_id(db, game_id, ctx, transaction)
    if game is None:
        raise NotFoundError(f"Game {game_id} not found.")

    round_number = game.get("currentRound") or 0
    if round_number <= 0:
        raise FailedPreconditionError(f"Game {game_id} is not in an active round.")

    round_doc = round_data.get_round_by_number(
        db, game_id, round_number, ctx, transaction
    )
    if round_doc is None:
        raise NotFoundError(f"Round {round_number} for game {game_id} not found.")
    return game, round_number, round_doc


def _require_phase(
    game: Game,
    round_doc: Round,
    round_number: int,
    game_phase: str,
    expected_round_status: str,
    label: str,
) -> None:
    # Both documents move together, but each is checked on its own
    if game.get("status") != round_status(round_number, game_phase):
        raise FailedPreconditionError(
            f"Game is not in the {label} phase (current: {game.get('status')})."
        )
    if round_doc.get("status") != expected_round_status:
        raise FailedPreconditionError(
            f"Round {round_number} is not in the {label} phase "
            f"(current: {round_doc.get('status')})."
        )


def _require_host(
    game: Game, requesting_player_id: str | None, action: str, ctx: RequestContext
) -> None:
    if requesting_player_id != game.get("roundHostPlayerId"):
        ctx.logger.warning(
            f"Player {requesting_player_id} is not the round host of game "
            f"{game.get('id')}"
        )
        raise PermissionDeniedError(f"Only the round host can {action}.")


def _resolve_predefined(  # noqa: PLR0913
    db: Client,
    game: Game,
    round_doc: Round,
    track_id: str,
    ctx: RequestContext,
    transaction: Transaction,
) -> PlayerSongSubmission:
    """Look up a predefined pick in the catalogue entry of the current challenge."""
    challenge_text = game.get("challenge") or round_doc.get("challenge")
    if not challenge_text:
        raise FailedPreconditionError(
            "Cannot nominate predefined song: Game has no current challenge text."
        )

    challenge = challenge_data.get_challenge_by_text(
        db, challenge_text, ctx, transaction
    )
    if challenge is None or not challenge.get("predefinedSongs"):
        raise NotFoundError(
            "Challenge details or predefined songs not found for "
            f'"{challenge_text}".'
        )

    predefined = find_predefined_song(challenge, track_id)
    if predefined is None:
        raise NotFoundError(
            f"Selected predefined track ID {track_id} not found in challenge "
            f'"{challenge_text}".'
        )
    if not predefined.get("previewUrl"):
        ctx.logger.error(f"Predefined track {track_id} has no preview URL")
        raise FailedPreconditionError(
            "Selected predefined track data is incomplete (missing preview URL)."
        )

    return {
        "trackId": str(predefined["trackId"]),
        "name": predefined.get("title", ""),
        "artist": predefined.get("artist", ""),
        "previewUrl": predefined["previewUrl"],
        "albumImageUrl": predefined.get("albumImageUrl"),
    }


def _close_selection(  # noqa: PLR0913
    db: Client,
    game_id: str,
    round_number: int,
    player_songs: Mapping[str, PlayerSongSubmission],
    players: list[Player],
    ctx: RequestContext,
    transaction: Transaction,
    round_updates: dict[str, Any] | None = None,
) -> None:
    """Freeze the pool and open playback, or score at once for a tiny pool."""
    pool = build_songs_for_ranking(game_id, round_number, player_songs)
    updates = dict(round_updates or {})
    updates["songsForRanking"] = pool

    if len(pool) <= 1:
        ctx.logger.info(
            f"Round {round_number} of game {game_id} has {len(pool)} song(s); "
            "skipping playback and ranking"
        )
        _score_and_finish(
            db, game_id, round_number, player_songs, {}, pool, players, ctx,
            transaction, updates,
        )
        return

    updates.update(
        {
            "status": ROUND_PLAYBACK,
            "currentPlayingTrackIndex": 0,
            "isPlaying": True,
            "playbackEndTime": _playback_end_time(),
        }
    )
    round_data.update_round_details(
        db, game_id, round_number, updates, ctx, transaction
    )
    game_data.update_game_details(
        db, game_id, {"status": round_status(round_number, PLAYBACK)}, ctx,
        transaction,
    )


def _score_and_finish(  # noqa: PLR0913
    db: Client,
    game_id: str,
    round_number: int,
    player_songs: Mapping[str, PlayerSongSubmission],
    rankings: Mapping[str, Ranking],
    songs_for_ranking: list[RankedSong],
    players: list[Player],
    ctx: RequestContext,
    transaction: Transaction,
    round_updates: dict[str, Any] | None = None,
) -> None:
    """Score the round and write the game, round and players together.

    The round and game pass through the ``scoring`` phase before landing on
    ``finished``; both writes belong to the same commit.
    """
    scoring_status = round_status(round_number, SCORING)
    ctx.logger.info(f"Game {game_id} entering {scoring_status}")
    round_data.update_round_details(
        db, game_id, round_number, {"status": ROUND_SCORING}, ctx, transaction
    )
    game_data.update_game_details(
        db, game_id, {"status": scoring_status}, ctx, transaction
    )

    score = score_round(player_songs, rankings, songs_for_ranking)
    results = build_round_results(score, player_songs, players)

    for player in players:
        points = score.player_points.get(player["id"], 0)
        if points <= 0:
            continue
        player_data.update_player_details(
            db,
            game_id,
            player["id"],
            {"score": player.get("score", 0) + points},
            ctx,
            transaction,
        )

    updates = dict(round_updates or {})
    updates.update(
        {
            "status": ROUND_DONE,
            "isPlaying": False,
            "results": results,
            "winnerData": score.winner_data(),
        }
    )
    round_data.update_round_details(
        db, game_id, round_number, updates, ctx, transaction
    )
    game_data.update_game_details(
        db, game_id, {"status": round_status(round_number, ROUND_FINISHED)}, ctx,
        transaction,
    )
    ctx.logger.info(
        f"Round {round_number} of game {game_id} scored; winners: "
        f"{score.winner_player_ids or 'none'}"
    )


class RoundService:
    """Service class for round-related operations."""

    @staticmethod
    def start_next_round(
        game_id: str, ctx: RequestContext, db: Client | None = None
    ) -> str:
        """Advance a finished round to the next one, or finish the game.

        Returns:
            The new game status.
        """
        ctx.logger.info(f"start_next_round called for game {game_id}")
        require_id(game_id, "Game ID")
        db = db or firestore.client()

        def _advance(transaction: Transaction) -> str:
            game = game_data.get_game_by_id(db, game_id, ctx, transaction)
            if game is None:
                raise NotFoundError(f"Game {game_id} not found.")
            players = player_data.get_all_players(db, game_id, ctx, transaction)

            current_round = game.get("currentRound") or 0
            status = game.get("status")
            if current_round <= 0 or status != round_status(
                current_round, ROUND_FINISHED
            ):
                raise FailedPreconditionError(
                    "Game is not in a finished round state "
                    f"(current: {status}). Cannot start next round."
                )

            total_rounds = game.get("totalRounds")
            if total_rounds and current_round >= total_rounds:
                game_data.update_game_details(
                    db,
                    game_id,
                    {"status": FINISHED, "finishedAt": firestore.SERVER_TIMESTAMP},
                    ctx,
                    transaction,
                )
                return FINISHED

            if not total_rounds or not game.get("settings"):
                ctx.logger.error(f"Game {game_id} has no configured round count")
                raise InternalError("Game configuration error (missing rounds).")
            if not players:
                raise InternalError("Cannot start next round with zero players.")

            next_round = current_round + 1
            host_id = next_host_id(players, game.get("roundHostPlayerId"))
            new_status = round_status(next_round, ANNOUNCING)
            game_data.update_game_details(
                db,
                game_id,
                {
                    "status": new_status,
                    "currentRound": next_round,
                    "roundHostPlayerId": host_id,
                    "challenge": None,
                },
                ctx,
                transaction,
            )
            round_data.create_round_document(
                db,
                game_id,
                next_round,
                {
                    "status": ROUND_ANNOUNCING,
                    "hostPlayerId": host_id,
                    "challenge": None,
                    "playerSongs": {},
                    "rankings": {},
                },
                transaction,
                ctx,
            )
            return new_status

        new_status = run_in_transaction(db, _advance)
        ctx.logger.info(f"Game {game_id} moved to {new_status}")
        return new_status

    @staticmethod
    def set_challenge(  # noqa: PLR0913
        game_id: str,
        round_number: int,
        challenge: Any,
        requesting_player_id: str,
        ctx: RequestContext,
        db: Client | None = None,
    ) -> str:
        """Record the round host's challenge on the game and the round."""
        ctx.logger.info(
            f"set_challenge called for game {game_id} round {round_number}"
        )
        require_id(game_id, "Game ID")
        require_id(requesting_player_id, "Player ID")
        text = validate_challenge_text(challenge)
        db = db or firestore.client()

        def _set(transaction: Transaction) -> None:
            game, current_round, round_doc = _load_active_round(
                db, game_id, ctx, transaction
            )
            if round_number != current_round:
                raise FailedPreconditionError(
                    f"Round {round_number} is not the current round "
                    f"(current: {current_round})."
                )
            _require_phase(
                game, round_doc, current_round, ANNOUNCING, ROUND_ANNOUNCING,
                "announcing",
            )
            _require_host(game, requesting_player_id, "set the challenge", ctx)

            game_data.update_game_details(
                db, game_id, {"challenge": text}, ctx, transaction
            )
            round_data.update_round_details(
                db, game_id, current_round, {"challenge": text}, ctx, transaction
            )

        run_in_transaction(db, _set)
        ctx.logger.info(f"Challenge set for game {game_id} round {round_number}")
        return text

    @staticmethod
    def start_selection_phase(
        game_id: str,
        ctx: RequestContext,
        requesting_player_id: str | None = None,
        db: Client | None = None,
    ) -> None:
        """Open song selection once the host has announced the challenge."""
        ctx.logger.info(f"start_selection_phase called for game {game_id}")
        require_id(game_id, "Game ID")
        db = db or firestore.client()

        def _start(transaction: Transaction) -> None:
            game, round_number, round_doc = _load_active_round(
                db, game_id, ctx, transaction
            )
            _require_phase(
                game, round_doc, round_number, ANNOUNCING, ROUND_ANNOUNCING,
                "announcing",
            )
            if requesting_player_id is not None:
                _require_host(
                    game, requesting_player_id, "start the song selection phase",
                    ctx,
                )
            if not (round_doc.get("challenge") or game.get("challenge")):
                raise FailedPreconditionError(
                    "A challenge must be set before song selection can start."
                )

            game_data.update_game_details(
                db, game_id, {"status": round_status(round_number, SELECTING)},
                ctx, transaction,
            )
            round_data.update_round_details(
                db,
                game_id,
                round_number,
                {
                    "status": ROUND_SELECTING,
                    "selectionStartTime": firestore.SERVER_TIMESTAMP,
                },
                ctx,
                transaction,
            )

        run_in_transaction(db, _start)
        ctx.logger.info(f"Selection phase started for game {game_id}")

    @staticmethod
    def submit_song_nomination(
        game_id: str,
        player_id: str,
        nomination: Any,
        ctx: RequestContext,
        db: Client | None = None,
    ) -> None:
        """Store a player's nomination; the last one closes selection.

        ``nomination`` is either a search result or a ``predefinedTrackId``
        picked from the songs the current challenge suggests.
        """
        ctx.logger.info(
            f"submit_song_nomination called for game {game_id} by {player_id}"
        )
        require_id(game_id, "Game ID")
        require_id(player_id, "Player ID")
        if not isinstance(nomination, (SongNomination, PredefinedNomination)):
            nomination = nomination_from_dict(nomination)
        nomination.validate()
        db = db or firestore.client()

        def _submit(transaction: Transaction) -> None:
            game, round_number, round_doc = _load_active_round(
                db, game_id, ctx, transaction
            )
            players = player_data.get_all_players(db, game_id, ctx, transaction)
            player = player_data.get_player_by_id(
                db, game_id, player_id, ctx, transaction
            )
            _require_phase(
                game, round_doc, round_number, SELECTING, ROUND_SELECTING,
                "song selection",
            )
            if player is None:
                raise NotFoundError(f"Player {player_id} not found in game {game_id}.")

            player_songs = dict(round_doc.get("playerSongs") or {})
            if player_id in player_songs:
                raise DuplicateResourceError(
                    f"Player {player_id} has already submitted a song for "
                    f"round {round_number}."
                )

            if isinstance(nomination, PredefinedNomination):
                submission = _resolve_predefined(
                    db, game, round_doc, nomination.track_id, ctx, transaction
                )
            else:
                submission = nomination.to_submission()
            submission["submittedAt"] = _now()
            player_songs[player_id] = submission
            nomination_update = {f"playerSongs.{player_id}": submission}

            if all(p["id"] in player_songs for p in players):
                ctx.logger.info(
                    f"All players nominated in game {game_id}; closing selection"
                )
                _close_selection(
                    db, game_id, round_number, player_songs, players, ctx,
                    transaction, nomination_update,
                )
                return

            round_data.update_round_details(
                db, game_id, round_number, nomination_update, ctx, transaction
            )

        run_in_transaction(db, _submit)
        ctx.logger.info(f"Nomination stored for {player_id} in game {game_id}")

    @staticmethod
    def start_playback_phase(
        game_id: str,
        requesting_player_id: str,
        ctx: RequestContext,
        db: Client | None = None,
    ) -> None:
        """Close song selection early with whatever has been nominated."""
        ctx.logger.info(f"start_playback_phase called for game {game_id}")
        require_id(game_id, "Game ID")
        require_id(requesting_player_id, "Player ID")
        db = db or firestore.client()

        def _start(transaction: Transaction) -> None:
            game, round_number, round_doc = _load_active_round(
                db, game_id, ctx, transaction
            )
            players = player_data.get_all_players(db, game_id, ctx, transaction)
            _require_phase(
                game, round_doc, round_number, SELECTING, ROUND_SELECTING,
                "song selection",
            )
            _require_host(game, requesting_player_id, "start playback", ctx)
            _close_selection(
                db, game_id, round_number, round_doc.get("playerSongs") or {},
                players, ctx, transaction,
            )

        run_in_transaction(db, _start)
        ctx.logger.info(f"Selection closed for game {game_id}")

    @staticmethod
    def control_playback(  # noqa: PLR0913
        game_id: str,
        requesting_player_id: str,
        action: str,
        ctx: RequestContext,
        index: int | None = None,
        db: Client | None = None,
    ) -> dict[str, Any]:
        """Move the shared playback cursor. Round host only.

        Returns:
            The cursor fields written to the round.
        """
        ctx.logger.info(f"control_playback '{action}' called for game {game_id}")
        require_id(game_id, "Game ID")
        require_id(requesting_player_id, "Player ID")
        if action not in PLAYBACK_ACTIONS:
            raise ValidationError("Invalid playback action specified.")
        if action == SEEK and (
            not isinstance(index, int) or isinstance(index, bool) or index < 0
        ):
            raise ValidationError("Valid index is required for the 'seek' action.")
        db = db or firestore.client()

        def _control(transaction: Transaction) -> dict[str, Any]:
            game, round_number, round_doc = _load_active_round(
                db, game_id, ctx, transaction
            )
            _require_phase(
                game, round_doc, round_number, PLAYBACK, ROUND_PLAYBACK,
                "playback",
            )
            _require_host(game, requesting_player_id, "control playback", ctx)

            pool = round_doc.get("songsForRanking") or []
            if not pool:
                raise FailedPreconditionError(
                    "Cannot control playback: Song pool is empty."
                )

            current = round_doc.get("currentPlayingTrackIndex") or 0
            was_playing = bool(round_doc.get("isPlaying"))
            target = current
            if action == NEXT:
                target = (current + 1) % len(pool)
            elif action == PREV:
                target = (current - 1) % len(pool)
            elif action == SEEK:
                if index >= len(pool):  # type: ignore[operator]
                    raise ValidationError(
                        f"Index {index} is out of range for {len(pool)} songs."
                    )
                target = index  # type: ignore[assignment]

            updates: dict[str, Any] = {
                "currentPlayingTrackIndex": target,
                "isPlaying": action != PAUSE,
            }
            # Repeating play or pause leaves the deadline untouched
            if action != PAUSE and (target != current or not was_playing):
                updates["playbackEndTime"] = _playback_end_time()

            round_data.update_round_details(
                db, game_id, round_number, updates, ctx, transaction
            )
            return updates

        updates = run_in_transaction(db, _control)
        ctx.logger.info(f"Playback '{action}' applied for game {game_id}")
        return updates

    @staticmethod
    def start_ranking_phase(
        game_id: str,
        requesting_player_id: str,
        ctx: RequestContext,
        db: Client | None = None,
    ) -> None:
        """End playback and open ranking. Round host only."""
        ctx.logger.info(f"start_ranking_phase called for game {game_id}")
        require_id(game_id, "Game ID")
        require_id(requesting_player_id, "Player ID")
        db = db or firestore.client()

        def _start(transaction: Transaction) -> None:
            game, round_number, round_doc = _load_active_round(
                db, game_id, ctx, transaction
            )
            players = player_data.get_all_players(db, game_id, ctx, transaction)
            _require_phase(
                game, round_doc, round_number, PLAYBACK, ROUND_PLAYBACK,
                "playback",
            )
            _require_host(game, requesting_player_id, "start the ranking phase", ctx)

            pool = round_doc.get("songsForRanking") or []
            if len(pool) <= 1:
                _score_and_finish(
                    db, game_id, round_number, round_doc.get("playerSongs") or {},
                    {}, pool, players, ctx, transaction,
                )
                return

            game_data.update_game_details(
                db, game_id, {"status": round_status(round_number, RANKING)},
                ctx, transaction,
            )
            round_data.update_round_details(
                db,
                game_id,
                round_number,
                {
                    "status": ROUND_RANKING,
                    "isPlaying": False,
                    "rankingStartTime": firestore.SERVER_TIMESTAMP,
                },
                ctx,
                transaction,
            )

        run_in_transaction(db, _start)
        ctx.logger.info(f"Ranking phase started for game {game_id}")

    @staticmethod
    def submit_ranking(
        game_id: str,
        player_id: str,
        rankings: Any,
        ctx: RequestContext,
        db: Client | None = None,
    ) -> None:
        """Store a player's ranking; the last one scores the round."""
        ctx.logger.info(f"submit_ranking called for game {game_id} by {player_id}")
        require_id(game_id, "Game ID")
        require_id(player_id, "Player ID")
        if not isinstance(rankings, Mapping) or not rankings:
            raise ValidationError("Rankings object is required and cannot be empty.")
        db = db or firestore.client()

        def _submit(transaction: Transaction) -> None:
            game, round_number, round_doc = _load_active_round(
                db, game_id, ctx, transaction
            )
            players = player_data.get_all_players(db, game_id, ctx, transaction)
            player = player_data.get_player_by_id(
                db, game_id, player_id, ctx, transaction
            )
            _require_phase(
                game, round_doc, round_number, RANKING, ROUND_RANKING, "ranking"
            )
            if player is None:
                raise NotFoundError(f"Player {player_id} not found in game {game_id}.")

            all_rankings = dict(round_doc.get("rankings") or {})
            if player_id in all_rankings:
                raise DuplicateResourceError(
                    f"Player {player_id} has already submitted rankings for "
                    f"round {round_number}."
                )

            player_songs = round_doc.get("playerSongs") or {}
            own_song = player_songs.get(player_id)
            ranking = validate_ranking(
                rankings,
                round_doc.get("songsForRanking") or [],
                own_song.get("trackId") if own_song else None,
            )
            all_rankings[player_id] = ranking
            ranking_update = {f"rankings.{player_id}": ranking}

            if all(p["id"] in all_rankings for p in players):
                ctx.logger.info(
                    f"All players ranked in game {game_id}; scoring round"
                )
                _score_and_finish(
                    db, game_id, round_number, player_songs, all_rankings,
                    round_doc.get("songsForRanking") or [], players, ctx,
                    transaction, ranking_update,
                )
                return

            round_data.update_round_details(
                db, game_id, round_number, ranking_update, ctx, transaction
            )

        run_in_transaction(db, _submit)
        ctx.logger.info(f"Ranking stored for {player_id} in game {game_id}")

    @staticmethod
    def finalize_round(
        game_id: str,
        requesting_player_id: str,
        ctx: RequestContext,
        db: Client | None = None,
    ) -> None:
        """Score the round with the rankings submitted so far. Host only."""
        ctx.logger.info(f"finalize_round called for game {game_id}")
        require_id(game_id, "Game ID")
        require_id(requesting_player_id, "Player ID")
        db = db or firestore.client()

        def _finalize(transaction: Transaction) -> None:
            game, round_number, round_doc = _load_active_round(
                db, game_id, ctx, transaction
            )
            players = player_data.get_all_players(db, game_id, ctx, transaction)
            _require_phase(
                game, round_doc, round_number, RANKING, ROUND_RANKING, "ranking"
            )
            _require_host(game, requesting_player_id, "finalize the round", ctx)
            _score_and_finish(
                db, game_id, round_number, round_doc.get("playerSongs") or {},
                round_doc.get("rankings") or {},
                round_doc.get("songsForRanking") or [], players, ctx, transaction,
            )

        run_in_transaction(db, _finalize)
        ctx.logger.info(f"Round finalized for game {game_id}")
