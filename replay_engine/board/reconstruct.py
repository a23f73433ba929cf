"""
Board reconstruction: (record, prefix length) -> board frame.

reconstruct() is pure. Every call replays moves [0, k) onto an empty grid, so
calling it once for k or successively for k-1, k gives the same board.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence, Tuple

from ..core.records import GameRecord, Move
from ..core.types import DiscColor, Player
from .grid import Board, Cell

logger = logging.getLogger(__name__)

CONNECT_LENGTH = 4

# Scan order: horizontal, vertical, diagonal down-right, diagonal down-left.
DIRECTIONS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (1, 1), (1, -1))

WinningLine = Tuple[Cell, ...]


@dataclass(frozen=True)
class BoardFrame:
    """
    Board at one replay position.

    Fields:
        board: Grid after the first k moves
        last_move: moves[k-1], or None at k == 0
        winning_line: Cells of the deciding line, or None
    """
    board: Board
    last_move: Optional[Move]
    winning_line: Optional[WinningLine]


def place_moves(
    moves: Sequence[Move],
    k: int,
    rows: int,
    cols: int,
    disc_for: Callable[[Player], DiscColor],
) -> Board:
    """
    Replay the first k moves onto an empty rows x cols grid.

    Moves use their recorded (row, col); gravity is not re-derived.
    Off-board cells are skipped with a warning.
    """
    grid = [[None] * cols for _ in range(rows)]
    for idx, move in enumerate(moves[:k]):
        if not (0 <= move.row < rows and 0 <= move.col < cols):
            logger.warning(
                "Skipping off-board move #%d at (%d, %d) on %dx%d board",
                idx + 1, move.row, move.col, rows, cols,
            )
            continue
        grid[move.row][move.col] = disc_for(move.player)
    return Board(rows=rows, cols=cols, grid=tuple(tuple(r) for r in grid))


def _run_through(board: Board, anchor: Cell, dr: int, dc: int) -> Tuple[Cell, ...]:
    """Contiguous same-disc cells through anchor along (dr, dc), ordered back to front."""
    row, col = anchor
    disc = board.at(row, col)
    if disc is None:
        return ()

    back = []
    r, c = row - dr, col - dc
    while board.in_bounds(r, c) and board.at(r, c) == disc:
        back.append((r, c))
        r, c = r - dr, c - dc

    front = []
    r, c = row + dr, col + dc
    while board.in_bounds(r, c) and board.at(r, c) == disc:
        front.append((r, c))
        r, c = r + dr, c + dc

    return tuple(reversed(back)) + (anchor,) + tuple(front)


def line_through(board: Board, anchor: Cell) -> Optional[WinningLine]:
    """
    First four-in-a-row containing anchor, trying directions in scan order.

    Runs longer than four yield the earliest four-cell window that still
    contains the anchor.
    """
    for dr, dc in DIRECTIONS:
        run = _run_through(board, anchor, dr, dc)
        if len(run) < CONNECT_LENGTH:
            continue
        pos = run.index(anchor)
        start = max(0, pos - CONNECT_LENGTH + 1)
        return run[start:start + CONNECT_LENGTH]
    return None


def scan_board(board: Board) -> Optional[WinningLine]:
    """Row-major scan of the whole board for the first four-in-a-row."""
    for row in range(board.rows):
        for col in range(board.cols):
            disc = board.at(row, col)
            if disc is None:
                continue
            for dr, dc in DIRECTIONS:
                cells = [(row + dr * i, col + dc * i) for i in range(CONNECT_LENGTH)]
                if all(board.in_bounds(r, c) and board.at(r, c) == disc for r, c in cells):
                    return tuple(cells)
    return None


def find_winning_line(board: Board, last_move: Optional[Move]) -> Optional[WinningLine]:
    """
    Locate the deciding line, anchored at the last move when possible.

    The last move of a won game is part of the winning line, so its cell is
    checked first; a full scan covers records where it is not.
    """
    if last_move is not None and board.in_bounds(last_move.row, last_move.col):
        line = line_through(board, last_move.cell)
        if line is not None:
            return line
    return scan_board(board)


def reconstruct(
    record: GameRecord,
    k: int,
    show_intermediate_wins: bool = False,
) -> BoardFrame:
    """
    Derive the board frame after the first k moves of record.

    The winning line is reported only at k == N when the game has a disc-holding
    winner. With show_intermediate_wins, earlier positions also report a line
    through their last move if one exists.

    Raises:
        ValueError: If k is outside [0, N]; callers clamp before calling
    """
    n = record.total_moves
    if not 0 <= k <= n:
        raise ValueError(f"Replay position {k} outside [0, {n}]")

    board = place_moves(record.moves, k, record.board_rows, record.board_cols, record.disc_for)
    last_move = record.moves[k - 1] if k > 0 else None

    winning_line = None
    if k == n and k > 0 and record.winner is not None and record.winner.holds_disc:
        winning_line = find_winning_line(board, last_move)
    elif show_intermediate_wins and last_move is not None and board.in_bounds(*last_move.cell):
        winning_line = line_through(board, last_move.cell)

    return BoardFrame(board=board, last_move=last_move, winning_line=winning_line)


def cells_of(line: Optional[Iterable[Cell]]) -> Optional[list]:
    """Winning line as [{"row", "col"}] dicts for renderers."""
    if line is None:
        return None
    return [{"row": r, "col": c} for r, c in line]
