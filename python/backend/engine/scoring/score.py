"""Scoring for cleared boards and best-record bookkeeping."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone

from backend.models.mode import GameMode
from backend.models.records import BestRecord, BestRecordStore

logger = logging.getLogger(__name__)

BASE_SCORE = 1000
MOVE_PENALTY = 10
TIME_PENALTY = 2
SIZE_BONUS = 50


class ScoreKeeper:
    """Stateless scoring rules; all methods are static."""

    @staticmethod
    def min_moves(size: int) -> int:
        """Move cap for Perfect mode: ``ceil(size² / 3)``.

        A heuristic target, not a proven optimal-solution bound.
        """
        return math.ceil(size * size / 3)

    @staticmethod
    def compute_score(mode: GameMode, moves: int, time: int, size: int) -> int:
        move_penalty = moves * MOVE_PENALTY
        time_penalty = time * TIME_PENALTY
        size_bonus = size * SIZE_BONUS

        if mode is GameMode.PERFECT and moves <= ScoreKeeper.min_moves(size):
            # Flawless clear: double base, no move penalty.
            return max(0, BASE_SCORE * 2 - time_penalty + size_bonus)

        return max(0, BASE_SCORE - move_penalty - time_penalty + size_bonus)

    @staticmethod
    def record_if_best(
        store: BestRecordStore,
        mode: GameMode,
        size: int,
        moves: int,
        time: int,
        now: datetime | None = None,
    ) -> bool:
        """Store the result if it beats the current record for (mode, size).

        Only a strictly greater score replaces an existing record. Returns
        True when a new best was set.
        """
        score = ScoreKeeper.compute_score(mode, moves, time, size)
        current = store.get(mode, size)
        if current is not None and score <= current.score:
            return False

        stamp = (now or datetime.now(timezone.utc)).isoformat()
        store.put(mode, size, BestRecord(moves=moves, time=time, score=score, date=stamp))
        store.save()
        logger.info(
            "New best for %s: score %d (%d moves, %ds)", mode.record_key(size), score, moves, time
        )
        return True
