"""Read-side subscriptions to game, round and player documents.

Each watcher turns Firestore's ``on_snapshot`` callbacks into a lazy,
unbounded generator of ``ListenerUpdate`` items. Closing the generator
unsubscribes the underlying watch.
"""

from __future__ import annotations

import queue
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from songclash.game.data import get_game_ref
from songclash.player.data import get_players_ref
from songclash.player.models import join_order_key
from songclash.round.data import get_round_ref

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


@dataclass(frozen=True)
class ListenerUpdate:
    """The latest committed data, or the error that interrupted the watch."""

    data: Any = None
    error: Exception | None = None


def _document_data(snapshots: list[Any]) -> dict[str, Any] | None:
    for snapshot in snapshots:
        if snapshot.exists:
            return {**(snapshot.to_dict() or {}), "id": snapshot.id}
    return None


def _players_data(snapshots: list[Any]) -> list[dict[str, Any]]:
    players = [
        {**(snap.to_dict() or {}), "id": snap.id} for snap in snapshots if snap.exists
    ]
    players.sort(key=join_order_key)  # type: ignore[arg-type]
    return players


def _watch(target: Any, transform: Callable[[list[Any]], Any]) -> Iterator[ListenerUpdate]:
    updates: queue.Queue[ListenerUpdate] = queue.Queue()

    def _on_snapshot(snapshots: list[Any], _changes: Any, _read_time: Any) -> None:
        try:
            updates.put(ListenerUpdate(data=transform(snapshots)))
        except Exception as e:  # noqa: BLE001
            # Runs on the watch thread; hand the failure to the consumer
            updates.put(ListenerUpdate(error=e))

    watch = target.on_snapshot(_on_snapshot)
    try:
        while True:
            yield updates.get()
    finally:
        watch.unsubscribe()


def watch_game(db: Client, game_id: str) -> Iterator[ListenerUpdate]:
    """Yield the game document each time it changes."""
    return _watch(get_game_ref(db, game_id), _document_data)


def watch_round(db: Client, game_id: str, round_number: int) -> Iterator[ListenerUpdate]:
    """Yield a round document each time it changes."""
    return _watch(get_round_ref(db, game_id, round_number), _document_data)


def watch_players(db: Client, game_id: str) -> Iterator[ListenerUpdate]:
    """Yield the players of a game, in join order, whenever any changes."""
    return _watch(get_players_ref(db, game_id), _players_data)
