#!/usr/bin/env python3
"""
Replay CLI - terminal viewer for recorded games

Main entrypoint for the replay command-line tool.
"""

import typer
from typing import Optional
from rich.console import Console
from rich.table import Table

from replay_engine.logging_config import setup_logging
from replay_cli.commands import playback, record

app = typer.Typer(
    name="replay",
    help="Step through recorded four-in-a-row games",
    add_completion=False,
)

console = Console()

app.command("inspect")(record.inspect_command)
app.command("show")(record.show_command)
app.command("play")(playback.play_command)


@app.callback()
def configure(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", envvar="REPLAY_LOG_LEVEL", help="DEBUG, INFO, WARNING, ERROR"
    ),
    log_format: str = typer.Option(
        "text", "--log-format", envvar="REPLAY_LOG_FORMAT", help="json or text"
    ),
):
    """Configure logging before any command runs."""
    setup_logging(level=log_level or "WARNING", log_format=log_format)


@app.command()
def version():
    """Show version information."""
    from replay_cli import __version__
    from replay_engine import __version__ as engine_version

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Replay CLI[/bold]", f"v{__version__}")
    table.add_row("Engine", f"v{engine_version}")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
