"""
Board grid value types.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..core.types import DiscColor

Cell = Tuple[int, int]
Grid = Tuple[Tuple[Optional[DiscColor], ...], ...]


@dataclass(frozen=True)
class Board:
    """
    Immutable board grid.

    Row 0 is the top row, matching the recorded (row, col) coordinates.
    """
    rows: int
    cols: int
    grid: Grid

    @staticmethod
    def empty(rows: int, cols: int) -> "Board":
        return Board(rows=rows, cols=cols, grid=tuple((None,) * cols for _ in range(rows)))

    def at(self, row: int, col: int) -> Optional[DiscColor]:
        return self.grid[row][col]

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    @property
    def filled(self) -> int:
        return sum(1 for row in self.grid for cell in row if cell is not None)

    def to_lists(self) -> List[List[Optional[str]]]:
        """Plain nested lists of colour names, for JSON and renderers."""
        return [[cell.value if cell else None for cell in row] for row in self.grid]
