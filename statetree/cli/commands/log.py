"""
Event log commands: tail, inspect, verify
"""

import json
from typing import Any, Dict, List, Optional

import typer
from rich.syntax import Syntax
from rich.table import Table

from ...core.errors import EventLogError, IntegrityError
from ...log import FileEventLog
from ._common import console, fail, resolve_log_path

app = typer.Typer()

LOG_OPTION_HELP = "Path to event log file (default: $STATETREE_EVENT_LOG)"


def _read_records(log_path: str) -> List[Dict[str, Any]]:
    return list(FileEventLog(log_path, create=False).records())


@app.command()
def tail(
    log_path: Optional[str] = typer.Option(None, "--log", "-l", help=LOG_OPTION_HELP),
    lines: Optional[int] = typer.Option(None, "--lines", "-n", help="Number of records to show"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show the most recent events of a log.

    Examples:
        statetree log tail
        statetree log tail --lines 10
        statetree log tail --json
    """
    log_path = resolve_log_path(log_path)
    try:
        records = _read_records(log_path)
    except FileNotFoundError:
        fail("Log file not found", json_output, path=log_path)
    except EventLogError as e:
        fail(str(e), json_output)

    if lines:
        records = records[-lines:]

    if json_output:
        print(json.dumps({"events": records, "count": len(records)}, indent=2))
        return

    if not records:
        console.print("[yellow]Event log is empty[/yellow]")
        return

    table = Table(title=f"Event Log: {log_path}")
    table.add_column("Seq", style="cyan", justify="right")
    table.add_column("Type", style="green")
    table.add_column("Hash (prefix)", style="dim")

    for rec in records:
        ev = rec["event"]
        table.add_row(str(ev.get("seq", "N/A")), ev.get("type", "N/A"), rec["event_hash"][:16])

    console.print(table)
    console.print(f"\n[bold]Total events:[/bold] {len(records)}")


@app.command()
def inspect(
    log_path: Optional[str] = typer.Option(None, "--log", "-l", help=LOG_OPTION_HELP),
    from_seq: Optional[int] = typer.Option(None, "--from", help="Start from sequence number"),
    to_seq: Optional[int] = typer.Option(None, "--to", help="End at sequence number"),
    event_type: Optional[str] = typer.Option(None, "--event-type", "-t", help="Filter by event type"),
    show_payload: bool = typer.Option(False, "--payload", "-p", help="Show full payload"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Inspect event log with filters.

    Examples:
        statetree log inspect --from 0 --to 10
        statetree log inspect --event-type ADD_TODO
        statetree log inspect --payload --json
    """
    log_path = resolve_log_path(log_path)
    try:
        records = _read_records(log_path)
    except FileNotFoundError:
        fail("Log file not found", json_output, path=log_path)
    except EventLogError as e:
        fail(str(e), json_output)

    if from_seq is not None:
        records = [rec for rec in records if rec["event"]["seq"] >= from_seq]
    if to_seq is not None:
        records = [rec for rec in records if rec["event"]["seq"] <= to_seq]
    if event_type:
        records = [rec for rec in records if rec["event"]["type"] == event_type]

    if json_output:
        if not show_payload:
            for rec in records:
                rec["event"]["payload"] = "<hidden>"
        print(json.dumps({"events": records, "count": len(records)}, indent=2))
        return

    if not records:
        console.print("[yellow]No events match the filters[/yellow]")
        return

    for rec in records:
        ev = rec["event"]
        console.print(f"\n[bold cyan]Event {ev['seq']}[/bold cyan]")
        console.print(f"  Type: [green]{ev['type']}[/green]")
        console.print(f"  Hash: {rec['event_hash']}")
        console.print(f"  Prev Hash: {rec['prev_hash']}")
        if ev.get("meta"):
            console.print(f"  Meta: {json.dumps(ev['meta'], sort_keys=True)}")

        if show_payload:
            console.print("  Payload:")
            syntax = Syntax(
                json.dumps(ev.get("payload", {}), indent=2),
                "json",
                theme="monokai",
                line_numbers=False,
            )
            console.print(syntax)

    console.print(f"\n[bold]Total events:[/bold] {len(records)}")


@app.command()
def verify(
    log_path: Optional[str] = typer.Option(None, "--log", "-l", help=LOG_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Verify the hash chain of an event log.

    Exits with status 1 if the chain is broken.
    """
    log_path = resolve_log_path(log_path)
    try:
        count = FileEventLog(log_path, create=False).verify()
    except FileNotFoundError:
        fail("Log file not found", json_output, path=log_path)
    except EventLogError as e:
        fail(str(e), json_output)
    except IntegrityError as e:
        fail(str(e), json_output, code=1, valid=False)

    if json_output:
        print(json.dumps({"valid": True, "events": count}))
    else:
        console.print(f"[green]✓ Hash chain intact ({count} events)[/green]")
