"""
Rich renderables for replay snapshots.
"""

from typing import Optional

from rich.table import Table
from rich.text import Text

from replay_engine.core.records import GameRecord
from replay_engine.core.types import DiscColor, Winner
from replay_engine.replay.state import ReplayState

_DISC_STYLE = {
    DiscColor.RED: "bold red",
    DiscColor.YELLOW: "bold yellow",
}


def board_table(state: ReplayState, title: Optional[str] = None) -> Table:
    """Grid with the last move marked and winning cells highlighted."""
    table = Table(title=title, show_header=True, show_lines=False, box=None, pad_edge=False)
    for col in range(state.board.cols):
        table.add_column(str(col + 1), justify="center")

    winning = set(state.winning_line or ())
    last = state.last_move.cell if state.last_move else None

    for r, row in enumerate(state.board.grid):
        cells = []
        for c, disc in enumerate(row):
            if disc is None:
                cells.append(Text("·", style="dim"))
                continue
            style = _DISC_STYLE[disc]
            if (r, c) in winning:
                style += " reverse"
            glyph = "◉" if (r, c) == last else "●"
            cells.append(Text(glyph, style=style))
        table.add_row(*cells)
    return table


def status_line(state: ReplayState) -> str:
    return (
        f"[bold]{state.phase.value.title()}[/bold] • "
        f"Move {state.current_move} of {state.total_moves} • "
        f"Speed: {state.speed.value}"
    )


_RESULTS = {
    Winner.HUMAN: "Human won",
    Winner.AI: "AI won",
    Winner.PLAYER_1: "Player 1 won",
    Winner.PLAYER_2: "Player 2 won",
    Winner.DRAW: "Draw",
}


def result_text(record: GameRecord) -> str:
    if record.winner is None:
        return "In Progress"
    return _RESULTS[record.winner]


def format_duration(ms: int) -> str:
    seconds = ms // 1000
    if seconds < 60:
        return f"{seconds}s"
    return f"{seconds // 60}m {seconds % 60}s"
