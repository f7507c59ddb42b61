"""Text helpers shared by every frontend."""

from __future__ import annotations

from backend.engine.scoring import ScoreKeeper
from backend.models.mode import GRID_SIZES, GameMode
from backend.models.records import BestRecord, BestRecordStore

MODE_LABELS: dict[GameMode, str] = {
    GameMode.CLASSIC: "Classic",
    GameMode.TIME_ATTACK: "Time Attack",
    GameMode.PERFECT: "Perfect",
}


def format_time(seconds: int) -> str:
    """``MM:SS`` with zero padding; minutes are not wrapped at 60."""
    m, s = divmod(max(0, int(seconds)), 60)
    return f"{m:02d}:{s:02d}"


def mode_description(mode: GameMode, size: int) -> str:
    if mode is GameMode.TIME_ATTACK:
        return "Clear as many boards as you can before the 5-minute clock runs out!"
    if mode is GameMode.PERFECT:
        return f"Clear the board within the move limit ({ScoreKeeper.min_moves(size)} moves)."
    return "Solve the puzzle at your own pace."


def moves_text(moves: int, mode: GameMode, size: int) -> str:
    """Move counter; Perfect mode also shows how many moves are left."""
    if mode is GameMode.PERFECT:
        left = max(0, ScoreKeeper.min_moves(size) - moves)
        return f"{moves} (left {left})"
    return str(moves)


def size_label(size: int) -> str:
    return f"{size}×{size}"


def record_rows(store: BestRecordStore) -> list[tuple[str, str, BestRecord]]:
    """(mode label, size label, record) for the records panel, in panel order."""
    return [
        (MODE_LABELS[mode], size_label(size), record)
        for mode, size, record in store.ordered()
    ]


def cycle_size(size: int, step: int) -> int:
    """Next selectable grid size in *step* direction, clamped at the ends."""
    if size not in GRID_SIZES:
        return GRID_SIZES[0]
    idx = GRID_SIZES.index(size) + step
    return GRID_SIZES[max(0, min(len(GRID_SIZES) - 1, idx))]
