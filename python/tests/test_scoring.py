"""Scoring formula and best-record bookkeeping."""

from __future__ import annotations

import itertools
import json
from datetime import datetime, timezone

import pytest

from backend.engine.scoring import ScoreKeeper
from backend.models.mode import GameMode
from backend.models.records import STORAGE_KEY, BestRecordStore
from backend.storage import MemoryStorage

_NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


# -- min_moves ----------------------------------------------------------------


@pytest.mark.parametrize(("size", "expected"), [(1, 1), (3, 3), (4, 6), (5, 9), (7, 17)])
def test_min_moves(size: int, expected: int) -> None:
    assert ScoreKeeper.min_moves(size) == expected


# -- compute_score ------------------------------------------------------------


def test_classic_score_example() -> None:
    # 1000 - 5*10 - 10*2 + 5*50
    assert ScoreKeeper.compute_score(GameMode.CLASSIC, moves=5, time=10, size=5) == 1180


def test_time_attack_uses_same_formula_as_classic() -> None:
    assert ScoreKeeper.compute_score(GameMode.TIME_ATTACK, 5, 10, 5) == 1180


def test_perfect_within_cap_doubles_base_and_waives_move_penalty() -> None:
    # 2000 - 10*2 + 3*50
    assert ScoreKeeper.compute_score(GameMode.PERFECT, moves=3, time=10, size=3) == 2130


def test_perfect_over_cap_falls_back_to_normal_formula() -> None:
    # 1000 - 4*10 - 10*2 + 3*50
    assert ScoreKeeper.compute_score(GameMode.PERFECT, moves=4, time=10, size=3) == 1090


def test_score_floors_at_zero() -> None:
    assert ScoreKeeper.compute_score(GameMode.CLASSIC, moves=500, time=0, size=3) == 0
    assert ScoreKeeper.compute_score(GameMode.PERFECT, moves=1, time=5000, size=3) == 0


@pytest.mark.parametrize("mode", list(GameMode))
def test_score_is_never_negative(mode: GameMode) -> None:
    for moves, time, size in itertools.product(
        (0, 1, 3, 17, 60, 200), (0, 1, 59, 300, 1200, 10_000), (1, 3, 5, 7)
    ):
        assert ScoreKeeper.compute_score(mode, moves, time, size) >= 0


# -- record_if_best -----------------------------------------------------------


def test_first_result_becomes_the_record(storage: MemoryStorage, store: BestRecordStore) -> None:
    assert ScoreKeeper.record_if_best(store, GameMode.CLASSIC, 5, moves=5, time=10, now=_NOW)

    record = store.get(GameMode.CLASSIC, 5)
    assert record is not None
    assert (record.moves, record.time, record.score) == (5, 10, 1180)
    assert record.date == _NOW.isoformat()

    saved = json.loads(storage.data[STORAGE_KEY])
    assert saved == {
        "classic-5": {"moves": 5, "time": 10, "score": 1180, "date": _NOW.isoformat()}
    }


def test_worse_result_keeps_existing_record(store: BestRecordStore) -> None:
    assert ScoreKeeper.record_if_best(store, GameMode.CLASSIC, 5, moves=5, time=10, now=_NOW)
    assert not ScoreKeeper.record_if_best(store, GameMode.CLASSIC, 5, moves=9, time=30)

    record = store.get(GameMode.CLASSIC, 5)
    assert record is not None
    assert record.moves == 5
    assert record.score == 1180


def test_equal_score_does_not_replace(store: BestRecordStore) -> None:
    ScoreKeeper.record_if_best(store, GameMode.CLASSIC, 3, moves=2, time=10, now=_NOW)
    # Same score (one more move, five fewer seconds) but a different result.
    assert not ScoreKeeper.record_if_best(store, GameMode.CLASSIC, 3, moves=3, time=5)
    record = store.get(GameMode.CLASSIC, 3)
    assert record is not None
    assert (record.moves, record.time) == (2, 10)


def test_better_result_replaces_record(store: BestRecordStore) -> None:
    ScoreKeeper.record_if_best(store, GameMode.CLASSIC, 5, moves=9, time=30)
    assert ScoreKeeper.record_if_best(store, GameMode.CLASSIC, 5, moves=5, time=10)
    record = store.get(GameMode.CLASSIC, 5)
    assert record is not None
    assert record.score == 1180


def test_records_are_keyed_by_mode_and_size(store: BestRecordStore) -> None:
    ScoreKeeper.record_if_best(store, GameMode.CLASSIC, 5, moves=5, time=10)
    assert ScoreKeeper.record_if_best(store, GameMode.PERFECT, 5, moves=20, time=100)
    assert ScoreKeeper.record_if_best(store, GameMode.CLASSIC, 3, moves=20, time=100)
    assert set(store.as_dict()) == {"classic-5", "perfect-5", "classic-3"}


def test_zero_score_still_sets_first_record(store: BestRecordStore) -> None:
    assert ScoreKeeper.record_if_best(store, GameMode.CLASSIC, 3, moves=500, time=0)
    record = store.get(GameMode.CLASSIC, 3)
    assert record is not None
    assert record.score == 0
