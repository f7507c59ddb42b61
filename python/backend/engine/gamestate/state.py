"""Tracks the mutable state of a game in progress."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from backend.models.board import Board
from backend.models.mode import TIME_ATTACK_SECONDS, GameMode


class SessionStatus(StrEnum):
    PLAYING = "playing"
    WON = "won"
    TIME_EXPIRED = "time_expired"


@dataclass
class TimeAttackStats:
    """Clears made in this session, and the run since the last time-out."""

    total_clears: int = 0
    streak: int = 0


class GameState:
    """Holds the current board, its starting snapshot, moves and the clock.

    ``timer`` is whole seconds: remaining time for countdown modes, elapsed
    time otherwise.
    """

    def __init__(self, board: Board, mode: GameMode) -> None:
        self.board = board
        self.initial_board = board.copy()
        self.mode = mode
        self.moves: int = 0
        self.timer: int = TIME_ATTACK_SECONDS if mode.counts_down else 0
        self.status = SessionStatus.PLAYING

    # -- time tracking --------------------------------------------------------

    @property
    def elapsed_time(self) -> int:
        """Seconds spent on this board, whichever way the clock runs."""
        if self.mode.counts_down:
            return TIME_ATTACK_SECONDS - self.timer
        return self.timer

    def advance_clock(self) -> None:
        if self.mode.counts_down:
            self.timer = max(0, self.timer - 1)
        else:
            self.timer += 1

    @property
    def out_of_time(self) -> bool:
        return self.mode.counts_down and self.timer <= 0

    # -- moves ----------------------------------------------------------------

    def increment_moves(self) -> None:
        self.moves += 1

    def reset_board(self) -> None:
        self.board = self.initial_board.copy()
        self.moves = 0

    @property
    def is_solved(self) -> bool:
        return self.board.is_won()
