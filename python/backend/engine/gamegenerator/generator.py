"""Generates solvable Lights Out boards."""

from __future__ import annotations

import logging
import random

from backend.models.board import Board

logger = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    """Raised when no unsolved board could be produced."""


class GameGenerator:
    """Creates solvable puzzles by toggling cells from the all-off state.

    Every board is built by applying real toggles to a solved board, so the
    same toggles undo it: generated boards are always solvable.
    """

    MAX_ATTEMPTS = 1000

    @staticmethod
    def solved(size: int) -> Board:
        """Return the goal-state board (every light off)."""
        return Board.empty(size)

    @staticmethod
    def click_count(size: int, rng: random.Random | None = None) -> int:
        """Number of scramble toggles: uniform over [size, size² + size - 1]."""
        rng = rng or random
        return int(rng.random() * (size * size)) + size

    @staticmethod
    def scramble_clicks(
        size: int, rng: random.Random | None = None
    ) -> list[tuple[int, int]]:
        """Draw the scramble coordinates, with replacement."""
        rng = rng or random
        clicks: list[tuple[int, int]] = []
        for _ in range(GameGenerator.click_count(size, rng)):
            row = int(rng.random() * size)
            col = int(rng.random() * size)
            clicks.append((row, col))
        return clicks

    @staticmethod
    def scramble(board: Board, clicks: list[tuple[int, int]]) -> None:
        """Apply *clicks* to *board* in place."""
        for row, col in clicks:
            board.toggle(row, col)

    @staticmethod
    def generate(size: int, rng: random.Random | None = None) -> Board:
        """Return a random *solvable*, not yet solved, board of the given size."""
        for attempt in range(1, GameGenerator.MAX_ATTEMPTS + 1):
            board = GameGenerator.solved(size)
            GameGenerator.scramble(board, GameGenerator.scramble_clicks(size, rng))

            # Ensure the board is not already solved
            if not board.is_won():
                if attempt > 1:
                    logger.debug("Generated %dx%d board after %d attempts", size, size, attempt)
                return board

        raise GenerationError(
            f"No unsolved {size}×{size} board after {GameGenerator.MAX_ATTEMPTS} attempts."
        )
