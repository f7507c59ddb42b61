"""Game modes and the rules attached to them."""

from __future__ import annotations

from enum import StrEnum

TIME_ATTACK_SECONDS = 300
GRID_SIZES: tuple[int, ...] = (3, 5, 7)


class GameMode(StrEnum):
    CLASSIC = "classic"
    TIME_ATTACK = "timeAttack"
    PERFECT = "perfect"

    @property
    def counts_down(self) -> bool:
        """TimeAttack runs a countdown; the other modes count elapsed time."""
        return self is GameMode.TIME_ATTACK

    @property
    def has_move_limit(self) -> bool:
        return self is GameMode.PERFECT

    def record_key(self, size: int) -> str:
        """Key under which best records for this mode and *size* are stored."""
        return f"{self.value}-{size}"
