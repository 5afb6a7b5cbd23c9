"""
A position on the board, plus the fixed geography of the board (palaces and river)

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.shared_types import Color

# (rows, columns). Row 0 is Black's back rank, row 9 is Red's back rank.
BOARD_DIMENSIONS = (10, 9)

# Rows 0-4 are Black's side of the river, rows 5-9 are Red's side.
RIVER_BOUNDARY = 4

# Inclusive (row range, column range) of each palace
PALACE_BOUNDS: dict[Color, tuple[tuple[int, int], tuple[int, int]]] = {
    Color.BLACK: ((0, 2), (3, 5)),
    Color.RED: ((7, 9), (3, 5)),
}


@dataclass(frozen=True)
class Position:
    row: int
    col: int

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )

    def is_within_palace(self, color: Color) -> bool:
        (min_row, max_row), (min_col, max_col) = PALACE_BOUNDS[color]
        return (min_row <= self.row <= max_row) and (min_col <= self.col <= max_col)

    def is_across_river(self, color: Color) -> bool:
        """True if this position is on the opponent's side of the river, seen from `color`."""
        if color == Color.RED:
            return self.row <= RIVER_BOUNDARY
        return self.row >= RIVER_BOUNDARY + 1

    def offset(self, d_row: int, d_col: int) -> Position:
        return Position(self.row + d_row, self.col + d_col)


def all_positions() -> list[Position]:
    """Every intersection on the board, in reading order"""
    rows, cols = BOARD_DIMENSIONS
    return [Position(row, col) for row in range(rows) for col in range(cols)]
