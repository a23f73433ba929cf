"""
Playback command: real-time auto-play in the terminal
"""

import threading

import typer
from rich.console import Console

from replay_engine.config import ReplayConfig
from replay_engine.core.errors import RecordFormatError
from replay_engine.core.records import load_record
from replay_engine.core.types import ReplaySpeed
from replay_engine.replay.session import ReplaySession
from replay_engine.replay.state import ReplayState
from replay_cli.render import board_table, result_text, status_line

console = Console()


def play_command(
    record_path: str = typer.Argument(..., help="Path to game record JSON"),
    speed: ReplaySpeed = typer.Option(ReplaySpeed.NORMAL, "--speed", "-s", help="Playback speed"),
    start: int = typer.Option(0, "--from", "-f", help="Start position (clamped to 0..N)"),
    base_delay_ms: int = typer.Option(
        ReplayConfig().base_delay_ms, "--base-delay-ms", help="Delay per move at 1x"
    ),
    board: bool = typer.Option(True, "--board/--no-board", help="Redraw the board on every move"),
):
    """
    Auto-play a recorded game until the final move.

    Examples:
        replay play game.json
        replay play game.json --speed 2x --from 10
        replay play game.json --no-board
    """
    try:
        record = load_record(record_path)
    except FileNotFoundError:
        console.print(f"[red]Error: Record file not found:[/red] {record_path}")
        raise typer.Exit(2)
    except RecordFormatError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    config = ReplayConfig(base_delay_ms=base_delay_ms, default_speed=speed)
    done = threading.Event()

    def render(state: ReplayState) -> None:
        if board:
            console.print(board_table(state))
        console.print(status_line(state))

    with ReplaySession(record, config=config) as session:
        session.on_complete(lambda _state: done.set())
        state = session.seek(start)
        if state.is_complete:
            render(state)
        else:
            session.subscribe(render)
            session.play()
            # Generous ceiling so a stalled clock cannot hang the terminal.
            budget_s = state.estimated_remaining_ms(base_delay_ms) / 1000.0 * 2 + 5
            try:
                if not done.wait(timeout=budget_s):
                    console.print("[red]Error:[/red] playback did not finish in time")
                    raise typer.Exit(1)
            except KeyboardInterrupt:
                session.pause()
                console.print("[yellow]Interrupted[/yellow]")
                raise typer.Exit(130)

    console.print(f"[green]✓ Replay complete[/green] • {result_text(record)}")
