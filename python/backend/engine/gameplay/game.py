"""Core gameplay logic: moves, the clock, and win handling."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gameplay.events import (
    GameEvent,
    GameStarted,
    LevelCleared,
    MoveLimitReached,
    TimeExpired,
)
from backend.engine.gamestate import GameState, SessionStatus, TimeAttackStats
from backend.engine.scheduler import Scheduler, TaskHandle
from backend.engine.scoring import ScoreKeeper
from backend.models.board import Board
from backend.models.mode import GameMode
from backend.models.records import BestRecordStore
from backend.presentation import format_time

logger = logging.getLogger(__name__)

TICK_SECONDS = 1.0
RESTART_DELAY_SECONDS = 2.0

Listener = Callable[[GameEvent], None]


class GameSession:
    """Orchestrates a game session across levels.

    The session owns two scheduled tasks: the one-second clock tick while a
    board is being played, and the delayed restart after a clear. Both are
    cancelled whenever a new game starts or the session is closed, so only
    one clock ever drives the session.
    """

    def __init__(
        self,
        store: BestRecordStore,
        scheduler: Scheduler,
        mode: GameMode = GameMode.CLASSIC,
        size: int = 5,
        rng: random.Random | None = None,
    ) -> None:
        if size < 1:
            raise ValueError(f"Grid size must be at least 1, got {size}.")
        self.store = store
        self.scheduler = scheduler
        self.mode = GameMode(mode)
        self.size = size
        self.level = 1
        self.stats = TimeAttackStats()
        self._rng = rng
        self._listeners: list[Listener] = []
        self._tick_task: TaskHandle | None = None
        self._restart_task: TaskHandle | None = None
        self._start_board()

    # -- listeners ------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: GameEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # -- lifecycle ------------------------------------------------------------

    def new_game(self, mode: GameMode | str | None = None, size: int | None = None) -> None:
        """Start a fresh board.

        Choosing a different mode or size reinitializes the session: the
        level goes back to 1 and TimeAttack statistics are cleared. Starting
        again with the same settings keeps both.
        """
        new_mode = GameMode(mode) if mode is not None else self.mode
        new_size = size if size is not None else self.size
        if new_size < 1:
            raise ValueError(f"Grid size must be at least 1, got {new_size}.")

        self._cancel_tasks()
        if (new_mode, new_size) != (self.mode, self.size):
            logger.debug("Session reset: %s %dx%d", new_mode, new_size, new_size)
            self.level = 1
            self.stats = TimeAttackStats()
        self.mode = new_mode
        self.size = new_size
        self._start_board()

    def close(self) -> None:
        """Cancel the clock and any pending restart."""
        self._cancel_tasks()

    def _start_board(self) -> None:
        board = GameGenerator.generate(self.size, self._rng)
        self.state = GameState(board, self.mode)
        self._tick_task = self.scheduler.call_every(TICK_SECONDS, self.tick)
        logger.debug("Level %d started: %s %dx%d", self.level, self.mode, self.size, self.size)
        self._emit(GameStarted(mode=self.mode, size=self.size, level=self.level))

    def _cancel_tasks(self) -> None:
        for task in (self._tick_task, self._restart_task):
            if task is not None:
                task.cancel()
        self._tick_task = None
        self._restart_task = None

    def _stop_clock(self) -> None:
        if self._tick_task is not None:
            self._tick_task.cancel()
            self._tick_task = None

    # -- player actions -------------------------------------------------------

    def attempt_move(self, row: int, col: int) -> GameEvent | None:
        """Toggle (row, col) if the rules allow it.

        Returns :class:`MoveLimitReached` when Perfect mode refuses the move,
        :class:`LevelCleared` when the move solves the board, and None for an
        ordinary move or when no board is in play.
        """
        state = self.state
        if state.status is not SessionStatus.PLAYING:
            return None

        if self.mode.has_move_limit and state.moves >= self.min_moves:
            event = MoveLimitReached(limit=self.min_moves)
            self._emit(event)
            return event

        state.board.toggle(row, col)
        state.increment_moves()

        if state.is_solved:
            return self._handle_win()
        return None

    def reset_to_initial(self) -> None:
        """Put the starting board back and zero the move counter.

        Level and clock are untouched.
        """
        if self.state.status is not SessionStatus.PLAYING:
            return
        self.state.reset_board()

    def tick(self) -> None:
        """Advance the clock by one second."""
        state = self.state
        if state.status is not SessionStatus.PLAYING:
            return
        state.advance_clock()
        if state.out_of_time:
            self._handle_time_expired()

    # -- transitions ----------------------------------------------------------

    def _handle_win(self) -> LevelCleared:
        state = self.state
        state.status = SessionStatus.WON
        self._stop_clock()

        cleared = self.level
        self.level += 1
        if self.mode is GameMode.TIME_ATTACK:
            self.stats.total_clears += 1
            self.stats.streak += 1

        time_used = state.elapsed_time
        score = ScoreKeeper.compute_score(self.mode, state.moves, time_used, self.size)
        new_best = ScoreKeeper.record_if_best(
            self.store, self.mode, self.size, state.moves, time_used
        )
        logger.debug("Level %d cleared in %d moves, %ds", cleared, state.moves, time_used)

        event = LevelCleared(
            level=cleared,
            moves=state.moves,
            time=time_used,
            formatted_time=format_time(time_used),
            score=score,
            new_best=new_best,
        )
        self._restart_task = self.scheduler.call_later(RESTART_DELAY_SECONDS, self._auto_restart)
        self._emit(event)
        return event

    def _handle_time_expired(self) -> None:
        self.state.status = SessionStatus.TIME_EXPIRED
        self._stop_clock()
        event = TimeExpired(total_clears=self.stats.total_clears, streak=self.stats.streak)
        self.stats.streak = 0
        logger.debug("Time expired after %d clears", event.total_clears)
        self._emit(event)
        self.new_game()

    def _auto_restart(self) -> None:
        self._restart_task = None
        self.new_game()

    # -- queries --------------------------------------------------------------

    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def moves(self) -> int:
        return self.state.moves

    @property
    def timer(self) -> int:
        return self.state.timer

    @property
    def status(self) -> SessionStatus:
        return self.state.status

    @property
    def is_won(self) -> bool:
        return self.state.is_solved

    @property
    def min_moves(self) -> int:
        return ScoreKeeper.min_moves(self.size)

    @property
    def remaining_moves(self) -> int | None:
        """Moves left under the Perfect cap, or None in other modes."""
        if not self.mode.has_move_limit:
            return None
        return max(0, self.min_moves - self.state.moves)

    @property
    def effective_time(self) -> int:
        """Seconds used on the current board, as scored."""
        return self.state.elapsed_time

    @property
    def formatted_time(self) -> str:
        """The clock as displayed: remaining time in TimeAttack, else elapsed."""
        return format_time(self.state.timer)
