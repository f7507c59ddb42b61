"""Game session: mode rules, the clock, wins and restarts.

Boards are installed by hand where a test needs to control when the
board is (or is not) solved; the clock is driven through a manual
scheduler, so no test waits on real time.
"""

from __future__ import annotations

import random

import pytest

from backend.engine.gameplay import (
    GameEvent,
    GameSession,
    GameStarted,
    LevelCleared,
    MoveLimitReached,
    TimeExpired,
)
from backend.engine.gamestate import SessionStatus
from backend.engine.scheduler import ManualScheduler
from backend.models.board import Board
from backend.models.mode import GameMode
from backend.models.records import BestRecordStore

# One toggle at the centre clears this board.
_ONE_MOVE_3x3 = [".#.", "###", ".#."]
# Toggling a corner never clears this board within a few moves.
_ALL_ON_3x3 = ["###", "###", "###"]


# -- helpers ------------------------------------------------------------------


def _session(
    store: BestRecordStore,
    scheduler: ManualScheduler,
    mode: GameMode = GameMode.CLASSIC,
    size: int = 3,
) -> tuple[GameSession, list[GameEvent]]:
    session = GameSession(store, scheduler, mode=mode, size=size, rng=random.Random(7))
    events: list[GameEvent] = []
    session.subscribe(events.append)
    return session, events


def _install(session: GameSession, rows: list[str]) -> None:
    """Replace the current board and its reset snapshot."""
    board = Board.from_rows(rows)
    session.state.board = board
    session.state.initial_board = board.copy()


def _of_type(events: list[GameEvent], kind: type) -> list[GameEvent]:
    return [e for e in events if isinstance(e, kind)]


# -- start --------------------------------------------------------------------


@pytest.mark.parametrize("mode", list(GameMode))
def test_new_session_starts_playing_an_unsolved_board(
    store: BestRecordStore, scheduler: ManualScheduler, mode: GameMode
) -> None:
    session, _ = _session(store, scheduler, mode)
    assert session.status is SessionStatus.PLAYING
    assert session.level == 1
    assert session.moves == 0
    assert not session.board.is_won()
    assert session.timer == (300 if mode is GameMode.TIME_ATTACK else 0)


def test_session_rejects_bad_size(store: BestRecordStore, scheduler: ManualScheduler) -> None:
    with pytest.raises(ValueError):
        GameSession(store, scheduler, size=0)


def test_session_accepts_mode_string(store: BestRecordStore, scheduler: ManualScheduler) -> None:
    session = GameSession(store, scheduler, mode="timeAttack", size=3)  # type: ignore[arg-type]
    assert session.mode is GameMode.TIME_ATTACK


# -- moves --------------------------------------------------------------------


def test_move_toggles_plus_pattern_and_counts(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session, _ = _session(store, scheduler)
    _install(session, ["...", "...", "..#"])
    assert session.attempt_move(1, 1) is None
    assert session.board == Board.from_rows([".#.", "###", ".##"])
    assert session.moves == 1
    assert session.status is SessionStatus.PLAYING


def test_perfect_mode_rejects_move_past_limit(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session, events = _session(store, scheduler, GameMode.PERFECT, size=3)
    _install(session, _ALL_ON_3x3)
    assert session.min_moves == 3

    for _ in range(3):
        assert session.attempt_move(0, 0) is None
    board_before = session.board.copy()
    assert session.remaining_moves == 0

    result = session.attempt_move(2, 2)
    assert result == MoveLimitReached(limit=3)
    assert session.moves == 3
    assert session.board == board_before
    assert _of_type(events, MoveLimitReached) == [MoveLimitReached(limit=3)]


def test_move_limit_only_applies_to_perfect(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session, events = _session(store, scheduler, GameMode.CLASSIC, size=3)
    _install(session, _ALL_ON_3x3)
    for _ in range(4):
        session.attempt_move(0, 0)
    assert session.moves == 4
    assert session.remaining_moves is None
    assert not _of_type(events, MoveLimitReached)


# -- win ----------------------------------------------------------------------


def test_winning_move_clears_level_and_records(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session, events = _session(store, scheduler, GameMode.CLASSIC, size=3)
    _install(session, _ONE_MOVE_3x3)
    scheduler.advance(7)
    assert session.timer == 7

    result = session.attempt_move(1, 1)

    # 1000 - 10 - 14 + 150
    expected = LevelCleared(
        level=1, moves=1, time=7, formatted_time="00:07", score=1126, new_best=True
    )
    assert result == expected
    assert _of_type(events, LevelCleared) == [expected]
    assert session.status is SessionStatus.WON
    assert session.level == 2

    record = store.get(GameMode.CLASSIC, 3)
    assert record is not None
    assert (record.moves, record.time, record.score) == (1, 7, 1126)


def test_clock_stops_after_win(store: BestRecordStore, scheduler: ManualScheduler) -> None:
    session, _ = _session(store, scheduler)
    _install(session, _ONE_MOVE_3x3)
    scheduler.advance(3)
    session.attempt_move(1, 1)
    session.tick()
    assert session.timer == 3


def test_moves_are_ignored_until_restart(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session, _ = _session(store, scheduler)
    _install(session, _ONE_MOVE_3x3)
    session.attempt_move(1, 1)
    assert session.attempt_move(0, 0) is None
    assert session.board.is_won()
    assert session.moves == 1


def test_new_board_starts_two_seconds_after_win(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session, events = _session(store, scheduler)
    _install(session, _ONE_MOVE_3x3)
    session.attempt_move(1, 1)

    scheduler.advance(1.5)
    assert session.status is SessionStatus.WON

    scheduler.advance(0.5)
    assert session.status is SessionStatus.PLAYING
    assert session.level == 2
    assert session.moves == 0
    assert session.timer == 0
    assert not session.board.is_won()
    assert _of_type(events, GameStarted) == [
        GameStarted(mode=GameMode.CLASSIC, size=3, level=2)
    ]


def test_manual_new_game_supersedes_pending_restart(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session, events = _session(store, scheduler)
    _install(session, _ONE_MOVE_3x3)
    session.attempt_move(1, 1)
    scheduler.advance(1)

    session.new_game()
    scheduler.advance(5)

    assert len(_of_type(events, GameStarted)) == 1
    # Exactly one clock is running: five ticks in five seconds.
    assert session.timer == 5
    assert session.level == 2


def test_level_keeps_counting_across_clears(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session, events = _session(store, scheduler)
    for _ in range(3):
        _install(session, _ONE_MOVE_3x3)
        session.attempt_move(1, 1)
        scheduler.advance(2)
    assert session.level == 4
    assert [e.level for e in _of_type(events, LevelCleared)] == [1, 2, 3]


def test_worse_clear_does_not_replace_record(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session, _ = _session(store, scheduler)
    _install(session, _ONE_MOVE_3x3)
    session.attempt_move(1, 1)
    scheduler.advance(2)

    _install(session, _ONE_MOVE_3x3)
    scheduler.advance(30)
    result = session.attempt_move(1, 1)
    assert isinstance(result, LevelCleared)
    assert not result.new_best
    record = store.get(GameMode.CLASSIC, 3)
    assert record is not None
    assert record.time == 0


def test_perfect_clear_within_limit_scores_double(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session, _ = _session(store, scheduler, GameMode.PERFECT, size=3)
    _install(session, _ONE_MOVE_3x3)
    scheduler.advance(5)
    result = session.attempt_move(1, 1)
    assert isinstance(result, LevelCleared)
    # 2000 - 10 + 150
    assert result.score == 2140


# -- time attack --------------------------------------------------------------


def test_time_attack_counts_down(store: BestRecordStore, scheduler: ManualScheduler) -> None:
    session, _ = _session(store, scheduler, GameMode.TIME_ATTACK)
    scheduler.advance(61)
    assert session.timer == 239
    assert session.formatted_time == "03:59"
    assert session.effective_time == 61


def test_time_attack_scores_elapsed_time(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session, _ = _session(store, scheduler, GameMode.TIME_ATTACK, size=3)
    _install(session, _ONE_MOVE_3x3)
    scheduler.advance(10)
    result = session.attempt_move(1, 1)
    assert isinstance(result, LevelCleared)
    assert result.time == 10
    # 1000 - 10 - 20 + 150
    assert result.score == 1120


def test_time_expires_exactly_once_on_tick_300(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session, events = _session(store, scheduler, GameMode.TIME_ATTACK)
    for i in range(1, 300):
        session.tick()
        assert not _of_type(events, TimeExpired), f"expired early at tick {i}"

    session.tick()
    assert _of_type(events, TimeExpired) == [TimeExpired(total_clears=0, streak=0)]

    # A fresh board with a full clock follows straight away.
    assert session.status is SessionStatus.PLAYING
    assert session.timer == 300
    assert session.moves == 0


def test_scheduled_clock_expires_once_in_300_seconds(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session, events = _session(store, scheduler, GameMode.TIME_ATTACK)
    scheduler.advance(299)
    assert not _of_type(events, TimeExpired)
    scheduler.advance(1)
    assert len(_of_type(events, TimeExpired)) == 1
    scheduler.advance(299)
    assert len(_of_type(events, TimeExpired)) == 1
    assert session.timer == 1


def test_time_attack_stats_track_clears_and_streak(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session, events = _session(store, scheduler, GameMode.TIME_ATTACK)
    for _ in range(2):
        _install(session, _ONE_MOVE_3x3)
        session.attempt_move(1, 1)
        scheduler.advance(2)
    assert (session.stats.total_clears, session.stats.streak) == (2, 2)

    scheduler.advance(300)
    assert _of_type(events, TimeExpired) == [TimeExpired(total_clears=2, streak=2)]
    assert (session.stats.total_clears, session.stats.streak) == (2, 0)


def test_classic_has_no_time_limit(store: BestRecordStore, scheduler: ManualScheduler) -> None:
    session, events = _session(store, scheduler, GameMode.CLASSIC)
    scheduler.advance(1000)
    assert session.timer == 1000
    assert session.formatted_time == "16:40"
    assert not _of_type(events, TimeExpired)


# -- reset & new game ---------------------------------------------------------


def test_reset_restores_initial_board_and_keeps_clock(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session, _ = _session(store, scheduler)
    _install(session, _ALL_ON_3x3)
    scheduler.advance(4)
    session.attempt_move(0, 0)
    session.attempt_move(2, 2)

    session.reset_to_initial()

    assert session.board == Board.from_rows(_ALL_ON_3x3)
    assert session.moves == 0
    assert session.timer == 4
    assert session.level == 1


def test_reset_does_not_share_snapshot(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session, _ = _session(store, scheduler)
    _install(session, _ALL_ON_3x3)
    session.reset_to_initial()
    session.attempt_move(0, 0)
    session.reset_to_initial()
    assert session.board == Board.from_rows(_ALL_ON_3x3)


def test_new_game_with_same_settings_keeps_level(
    store: BestRecordStore, scheduler: ManualScheduler
) -> None:
    session, _ = _session(store, scheduler)
    _install(session, _ONE_MOVE_3x3)
    session.attempt_move(1, 1)
    session.new_game()
    assert session.level == 2
    assert session.moves == 0
    assert session.status is SessionStatus.PLAYING


@pytest.mark.parametrize(
    ("mode", "size"), [(GameMode.PERFECT, 3), (GameMode.CLASSIC, 5)]
)
def test_changing_mode_or_size_reinitializes_session(
    store: BestRecordStore, scheduler: ManualScheduler, mode: GameMode, size: int
) -> None:
    session, _ = _session(store, scheduler, GameMode.CLASSIC, size=3)
    _install(session, _ONE_MOVE_3x3)
    session.attempt_move(1, 1)
    assert session.level == 2

    session.new_game(mode=mode, size=size)
    assert session.level == 1
    assert session.mode is mode
    assert session.size == size
    assert session.board.size == size


def test_new_game_restarts_clock(store: BestRecordStore, scheduler: ManualScheduler) -> None:
    session, _ = _session(store, scheduler)
    scheduler.advance(10)
    session.new_game()
    assert session.timer == 0
    scheduler.advance(3)
    assert session.timer == 3
    assert scheduler.pending == 1


def test_close_cancels_everything(store: BestRecordStore, scheduler: ManualScheduler) -> None:
    session, events = _session(store, scheduler)
    _install(session, _ONE_MOVE_3x3)
    session.attempt_move(1, 1)
    session.close()
    scheduler.advance(10)
    assert scheduler.pending == 0
    assert not _of_type(events, GameStarted)


def test_unsubscribe_stops_delivery(store: BestRecordStore, scheduler: ManualScheduler) -> None:
    session, events = _session(store, scheduler, GameMode.PERFECT)
    session.unsubscribe(events.append)
    _install(session, _ALL_ON_3x3)
    for _ in range(4):
        session.attempt_move(0, 0)
    assert events == []


# -- persistence failures -----------------------------------------------------


class _ReadOnlyStorage:
    def get(self, key: str) -> str | None:
        return None

    def set(self, key: str, value: str) -> None:
        raise OSError("read-only file system")


def test_failed_record_write_does_not_interrupt_play(scheduler: ManualScheduler) -> None:
    store = BestRecordStore(_ReadOnlyStorage())
    session, events = _session(store, scheduler)
    _install(session, _ONE_MOVE_3x3)

    result = session.attempt_move(1, 1)

    assert isinstance(result, LevelCleared)
    assert store.get(GameMode.CLASSIC, 3) is not None
    scheduler.advance(2)
    assert session.status is SessionStatus.PLAYING
