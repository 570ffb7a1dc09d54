"""
Replay command: replay an event log through a reducer and report the state
"""

import json
import logging
from collections import Counter
from typing import Optional

import typer
from rich.syntax import Syntax
from rich.table import Table

from ...core.errors import ConfigurationError, EventLogError, StateTreeError
from ...log import FileEventLog
from ...replay import replay as replay_events
from ._common import DEFAULT_REDUCER, console, fail, load_reducer, resolve_log_path

logger = logging.getLogger(__name__)


def replay_command(
    log_path: Optional[str] = typer.Option(
        None, "--log", "-l", help="Path to event log file (default: $STATETREE_EVENT_LOG)"
    ),
    reducer_ref: str = typer.Option(
        DEFAULT_REDUCER, "--reducer", "-r", help="Root reducer as module:attribute"
    ),
    until: Optional[int] = typer.Option(None, "--until", "-u", help="Replay until sequence number"),
    show_state: bool = typer.Option(False, "--show-state", "-s", help="Show final state"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Replay event log and report the reconstructed state.

    Examples:
        statetree replay
        statetree replay --until 10
        statetree replay --reducer myapp.state:root_reducer --show-state
        statetree replay --json
    """
    log_path = resolve_log_path(log_path)
    try:
        reducer = load_reducer(reducer_ref)
        log = FileEventLog(log_path, create=False)
        if not json_output:
            console.print("[bold]Replaying event log...[/bold]")
        logger.info("Replaying %s through %s", log_path, reducer_ref)
        result = replay_events(log, reducer, to_seq=until)
        event_counts = Counter(ev.type for ev in log.read(to_seq=until))
    except FileNotFoundError:
        fail("Log file not found", json_output, path=log_path)
    except (ConfigurationError, EventLogError) as e:
        fail(str(e), json_output)
    except StateTreeError as e:
        fail(f"replay failed: {e}", json_output)

    if json_output:
        output = {
            "success": True,
            "events_replayed": result.applied,
            "state_hash": result.state_hash,
            "event_counts": dict(event_counts),
        }
        if show_state:
            output["state"] = result.state
        print(json.dumps(output, indent=2))
        return

    console.print(f"[green]✓ Replayed {result.applied} events successfully[/green]")
    console.print(f"  State hash: [yellow]{result.state_hash}[/yellow]")

    table = Table(title="Event Counts")
    table.add_column("Event Type", style="green")
    table.add_column("Count", style="cyan", justify="right")
    for event_type in sorted(event_counts):
        table.add_row(event_type, str(event_counts[event_type]))
    console.print(table)

    if show_state:
        console.print("\n[bold]Final State:[/bold]")
        syntax = Syntax(json.dumps(result.state, indent=2), "json", theme="monokai")
        console.print(syntax)
