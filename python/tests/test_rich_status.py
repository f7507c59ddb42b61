"""Status line of the Rich terminal frontend."""

from __future__ import annotations

import random

from backend.engine.gameplay import GameEvent, GameSession, GameStarted, LevelCleared
from backend.engine.scheduler import ManualScheduler
from backend.models.mode import GameMode
from backend.models.records import BestRecordStore
from frontend.cli.rich.app import _status_for


def test_time_out_is_not_hidden_by_the_next_board(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session = GameSession(store, scheduler, GameMode.TIME_ATTACK, 3, random.Random(3))
    pending: list[GameEvent] = []
    session.subscribe(pending.append)

    scheduler.advance(300)

    # The expiry and the fresh board arrive in the same pump.
    assert isinstance(pending[-1], GameStarted)
    assert "Time's up!" in _status_for(pending)


def test_clear_wins_over_new_board() -> None:
    cleared = LevelCleared(
        level=2, moves=4, time=9, formatted_time="00:09", score=1132, new_best=False
    )
    started = GameStarted(mode=GameMode.CLASSIC, size=3, level=3)
    assert "Level 2 cleared!" in _status_for([cleared, started])


def test_new_board_shown_when_nothing_else_happened() -> None:
    started = GameStarted(mode=GameMode.CLASSIC, size=5, level=4)
    assert "Level 4" in _status_for([started])
