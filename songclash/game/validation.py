"""Validation of game settings and other caller-supplied values.

Everything here is pure: validation runs before any transaction is opened,
so a rejected request never touches Firestore.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from songclash.core.constants import (
    MAX_CHALLENGE_LENGTH,
    MAX_PLAYER_NAME_LENGTH,
    VALID_MAX_PLAYERS,
    VALID_ROUNDS,
    VALID_TIME_LIMITS,
)
from songclash.errors import ValidationError

from .models import GameSettings


def _join(values: tuple[int, ...]) -> str:
    return ", ".join(str(v) for v in values)


def _is_member(value: Any, allowed: tuple[int, ...]) -> bool:
    # bool is a subclass of int; True must not pass as 1
    return isinstance(value, int) and not isinstance(value, bool) and value in allowed


def validate_game_settings(settings: Any) -> GameSettings:
    """Validate a settings object and return a normalized copy.

    Raises:
        ValidationError: naming the first field outside its allowed values.
    """
    if not isinstance(settings, Mapping):
        raise ValidationError("Settings must be an object.")

    if not _is_member(settings.get("rounds"), VALID_ROUNDS):
        raise ValidationError(
            f"Invalid number of rounds. Must be one of: {_join(VALID_ROUNDS)}."
        )

    if not _is_member(settings.get("maxPlayers"), VALID_MAX_PLAYERS):
        raise ValidationError(
            f"Invalid max players. Must be one of: {_join(VALID_MAX_PLAYERS)}."
        )

    if not isinstance(settings.get("allowExplicit"), bool):
        raise ValidationError(
            "Invalid value for allowExplicit. Must be true or false."
        )

    # A missing key is not the same as an explicit null
    for field, label in (
        ("selectionTimeLimit", "selection time limit"),
        ("rankingTimeLimit", "ranking time limit"),
    ):
        if field not in settings or (
            settings[field] is not None
            and not _is_member(settings[field], VALID_TIME_LIMITS)
        ):
            raise ValidationError(
                f"Invalid {label}. Must be null or one of: "
                f"{_join(VALID_TIME_LIMITS)}."
            )

    return GameSettings(
        rounds=settings["rounds"],
        maxPlayers=settings["maxPlayers"],
        allowExplicit=settings["allowExplicit"],
        selectionTimeLimit=settings["selectionTimeLimit"],
        rankingTimeLimit=settings["rankingTimeLimit"],
    )


def validate_player_name(name: Any) -> str:
    """Return the trimmed player name or raise ValidationError."""
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Player name is required.")
    trimmed = name.strip()
    if len(trimmed) > MAX_PLAYER_NAME_LENGTH:
        raise ValidationError(
            f"Player name cannot exceed {MAX_PLAYER_NAME_LENGTH} characters."
        )
    return trimmed


def validate_challenge_text(challenge: Any) -> str:
    """Return the trimmed challenge text or raise ValidationError."""
    if not isinstance(challenge, str) or not challenge.strip():
        raise ValidationError("Challenge text cannot be empty.")
    trimmed = challenge.strip()
    if len(trimmed) > MAX_CHALLENGE_LENGTH:
        raise ValidationError(
            f"Challenge text cannot exceed {MAX_CHALLENGE_LENGTH} characters."
        )
    return trimmed


def require_id(value: Any, label: str) -> str:
    """Ensure an identifier argument is a non-empty string."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required.")
    return value
