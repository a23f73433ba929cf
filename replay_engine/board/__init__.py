"""
Board reconstruction from move-log prefixes.
"""

from .grid import Board, Cell
from .reconstruct import (
    BoardFrame,
    CONNECT_LENGTH,
    find_winning_line,
    line_through,
    place_moves,
    reconstruct,
)

__all__ = [
    "Board",
    "Cell",
    "BoardFrame",
    "CONNECT_LENGTH",
    "find_winning_line",
    "line_through",
    "place_moves",
    "reconstruct",
]
