#!/usr/bin/env python3
"""
statetree CLI

Main entrypoint for the statetree command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from ..logging_config import setup_logging
from .commands import log, replay, snapshot

app = typer.Typer(
    name="statetree",
    help="Inspect, verify and replay statetree event logs",
    add_completion=False,
)

console = Console()

app.add_typer(log.app, name="log", help="Event log operations")
app.add_typer(snapshot.app, name="snapshot", help="State snapshots")

app.command(name="replay")(replay.replay_command)


@app.callback()
def configure():
    """Inspect, verify and replay statetree event logs."""
    setup_logging()


@app.command()
def version():
    """Show version information."""
    from .. import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]statetree[/bold]", f"v{__version__}")
    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
