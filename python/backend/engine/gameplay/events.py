"""Notifications a game session sends to its frontend."""

from __future__ import annotations

from dataclasses import dataclass

from backend.models.mode import GameMode


@dataclass(frozen=True)
class GameStarted:
    mode: GameMode
    size: int
    level: int


@dataclass(frozen=True)
class MoveLimitReached:
    """A Perfect-mode move was refused; *limit* is the move cap."""

    limit: int


@dataclass(frozen=True)
class LevelCleared:
    level: int
    moves: int
    time: int
    formatted_time: str
    score: int
    new_best: bool


@dataclass(frozen=True)
class TimeExpired:
    total_clears: int
    streak: int


GameEvent = GameStarted | MoveLimitReached | LevelCleared | TimeExpired
