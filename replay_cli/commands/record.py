"""
Record commands: inspect, show
"""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from replay_engine.core.clock import ManualScheduler
from replay_engine.core.errors import RecordFormatError
from replay_engine.core.records import load_record
from replay_engine.replay.session import ReplaySession
from replay_cli.render import board_table, format_duration, result_text, status_line

console = Console()


def _fail(message: str, json_output: bool, **extra) -> None:
    if json_output:
        print(json.dumps({"error": message, **extra}))
    else:
        console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(2)


def inspect_command(
    record_path: str = typer.Argument(..., help="Path to game record JSON"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show game metadata and the recorded move list.

    Examples:
        replay inspect game.json
        replay inspect game.json --json
    """
    try:
        record = load_record(record_path)
    except FileNotFoundError:
        _fail("Record file not found", json_output, path=record_path)
    except RecordFormatError as e:
        _fail(str(e), json_output, path=record_path)

    if json_output:
        print(json.dumps(record.to_dict(), indent=2))
        return

    info = Table(show_header=False, box=None)
    info.add_row("[bold]Game[/bold]", record.id)
    info.add_row("Result", result_text(record))
    info.add_row("Status", record.status.value.replace("_", " ").lower())
    info.add_row("Difficulty", record.difficulty.value if record.difficulty else "-")
    info.add_row("Board", f"{record.board_rows}x{record.board_cols}")
    info.add_row("Moves", str(record.total_moves))
    info.add_row("Duration", format_duration(record.total_duration_ms))
    console.print(info)

    moves = Table(title="Move History")
    moves.add_column("#", style="cyan", justify="right")
    moves.add_column("Player", style="green")
    moves.add_column("Disc")
    moves.add_column("Column", justify="right")
    moves.add_column("Row", justify="right")
    moves.add_column("At", justify="right")
    for idx, move in enumerate(record.moves, start=1):
        moves.add_row(
            str(idx),
            move.player.value,
            record.disc_for(move.player).value,
            str(move.col + 1),
            str(move.row + 1),
            f"{move.elapsed_ms // 1000}s",
        )
    console.print(moves)


def show_command(
    record_path: str = typer.Argument(..., help="Path to game record JSON"),
    move: Optional[int] = typer.Option(
        None, "--move", "-m", help="Replay position (clamped to 0..N, default: final)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show the board at one replay position.

    Examples:
        replay show game.json
        replay show game.json --move 5
        replay show game.json --move 5 --json
    """
    try:
        record = load_record(record_path)
    except FileNotFoundError:
        _fail("Record file not found", json_output, path=record_path)
    except RecordFormatError as e:
        _fail(str(e), json_output, path=record_path)

    with ReplaySession(record, scheduler=ManualScheduler()) as session:
        state = session.seek(record.total_moves if move is None else move)

    if json_output:
        out = state.to_dict()
        out["game_id"] = record.id
        out["digest"] = state.digest()
        print(json.dumps(out, indent=2))
        return

    console.print(board_table(state, title=f"Game {record.id}"))
    console.print(status_line(state))
    if state.winning_line:
        console.print(f"[green]{result_text(record)}[/green]")
