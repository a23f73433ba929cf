"""
Record builders shared by the replay tests.
"""

from typing import Optional, Sequence, Tuple

from replay_engine.board.grid import Board
from replay_engine.core.records import GameRecord, Move
from replay_engine.core.types import DiscColor, GameStatus, Player, Winner


def make_record(
    cells: Sequence[Tuple[int, int]],
    winner: Optional[Winner] = None,
    game_id: str = "game-1",
    rows: int = 6,
    cols: int = 7,
) -> GameRecord:
    """Record whose moves alternate HUMAN, AI, HUMAN, ... over the given cells."""
    moves = tuple(
        Move(
            player=Player.HUMAN if i % 2 == 0 else Player.AI,
            row=r,
            col=c,
            elapsed_ms=(i + 1) * 1500,
        )
        for i, (r, c) in enumerate(cells)
    )
    if winner is Winner.HUMAN:
        status = GameStatus.HUMAN_WIN
    elif winner is Winner.AI:
        status = GameStatus.AI_WIN
    elif winner is Winner.DRAW:
        status = GameStatus.DRAW
    else:
        status = GameStatus.IN_PROGRESS
    return GameRecord(
        id=game_id,
        moves=moves,
        board_rows=rows,
        board_cols=cols,
        player_disc=DiscColor.RED,
        ai_disc=DiscColor.YELLOW,
        winner=winner,
        status=status,
        total_duration_ms=len(moves) * 1500,
    )


# Seven moves, human completes the bottom row (5,0)..(5,3) on move 7.
HORIZONTAL_WIN = [(5, 0), (4, 0), (5, 1), (4, 1), (5, 2), (4, 2), (5, 3)]

# Human stacks column 0 from the bottom; last disc lands on (2,0).
VERTICAL_WIN = [(5, 0), (5, 1), (4, 0), (4, 1), (3, 0), (3, 1), (2, 0)]

# Human builds (5,3) (4,2) (3,1) and closes at (2,0).
DIAGONAL_DOWN_RIGHT_WIN = [(5, 3), (5, 0), (4, 2), (4, 0), (3, 1), (3, 0), (2, 0)]

# Human builds (5,0) (4,1) (3,2) and closes at (2,3).
DIAGONAL_DOWN_LEFT_WIN = [(5, 0), (5, 6), (4, 1), (5, 5), (3, 2), (5, 4), (2, 3)]


def horizontal_win_record(game_id: str = "game-1") -> GameRecord:
    return make_record(HORIZONTAL_WIN, winner=Winner.HUMAN, game_id=game_id)


def scratch_board(record: GameRecord, k: int) -> Board:
    """Independent from-scratch replay of moves [0, k) used as the oracle."""
    grid = [[None] * record.board_cols for _ in range(record.board_rows)]
    for move in record.moves[:k]:
        grid[move.row][move.col] = record.disc_for(move.player)
    return Board(record.board_rows, record.board_cols, tuple(tuple(r) for r in grid))
