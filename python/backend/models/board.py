"""Board model for the Lights Out game."""

from __future__ import annotations

from dataclasses import dataclass


# Offsets of the plus pattern: the cell itself and its four orthogonal neighbours.
_PLUS: tuple[tuple[int, int], ...] = ((0, 0), (-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass
class Board:
    """Represents the Lights Out grid.

    Lights are stored as a 2D list of bools. ``True`` means the cell is lit.
    """

    size: int
    lights: list[list[bool]]

    # -- construction helpers -------------------------------------------------

    @classmethod
    def empty(cls, size: int) -> Board:
        """Return an all-off board of the given size."""
        if size < 1:
            raise ValueError(f"Board size must be at least 1, got {size}.")
        return cls(size=size, lights=[[False] * size for _ in range(size)])

    @classmethod
    def from_rows(cls, rows: list[list[bool]] | list[str]) -> Board:
        """Create a board from a list of rows.

        Rows may be lists of bools or strings where ``#``/``1``/``X`` mark a
        lit cell. Example::

            Board.from_rows(["...", ".#.", "..."])
        """
        lights: list[list[bool]] = []
        for row in rows:
            if isinstance(row, str):
                lights.append([ch in "#1Xx" for ch in row])
            else:
                lights.append([bool(v) for v in row])
        size = len(lights)
        if size < 1 or any(len(row) != size for row in lights):
            raise ValueError(
                f"Expected a square grid, got {size} rows of lengths "
                f"{[len(row) for row in lights]}."
            )
        return cls(size=size, lights=lights)

    # -- mutation -------------------------------------------------------------

    def toggle(self, row: int, col: int) -> None:
        """Flip (row, col) and its in-bounds orthogonal neighbours in place.

        Neighbours outside the grid are skipped; there is no wraparound.
        """
        assert self.in_bounds(row, col), (
            f"({row}, {col}) is outside the {self.size}×{self.size} board"
        )
        for dr, dc in _PLUS:
            r, c = row + dr, col + dc
            if self.in_bounds(r, c):
                self.lights[r][c] = not self.lights[r][c]

    # -- queries --------------------------------------------------------------

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def is_lit(self, row: int, col: int) -> bool:
        return self.lights[row][col]

    def is_won(self) -> bool:
        """Check if every light is off."""
        return not any(any(row) for row in self.lights)

    def lit_count(self) -> int:
        return sum(sum(row) for row in self.lights)

    def copy(self) -> Board:
        return Board(size=self.size, lights=[row[:] for row in self.lights])

    def __str__(self) -> str:
        return "\n".join(
            "".join("#" if lit else "." for lit in row) for row in self.lights
        )


def toggle(board: Board, row: int, col: int) -> None:
    """Apply the plus-pattern toggle at (row, col) to *board*."""
    board.toggle(row, col)


def is_won(board: Board) -> bool:
    """Return True if every cell of *board* is off."""
    return board.is_won()
