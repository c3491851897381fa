"""Data models for the player blueprint."""

from __future__ import annotations

from typing import Any, TypedDict


class _PlayerBase(TypedDict):
    id: str
    name: str
    score: int


class Player(_PlayerBase, total=False):
    """A player document in the ``players`` subcollection of a game."""

    hasJoined: bool
    joinedAt: Any
    joinOrder: int
    jokerAvailable: bool
    isCreator: bool


def join_order_key(player: Player) -> tuple[int, str]:
    """Sort key giving the stable join order used for host rotation."""
    return (player.get("joinOrder", 0), player["id"])
