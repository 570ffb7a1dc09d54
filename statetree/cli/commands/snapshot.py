"""
Snapshot commands: create, verify
"""

import json
from typing import Optional

import typer

from ...core.errors import ConfigurationError, EventLogError, IntegrityError
from ...log import FileEventLog
from ...replay import replay as replay_events
from ...snapshot import Snapshot, load_snapshot, save_snapshot
from ._common import DEFAULT_REDUCER, console, fail, load_reducer, resolve_log_path

app = typer.Typer()


@app.command()
def create(
    out: str = typer.Option(..., "--out", "-o", help="Snapshot file to write"),
    log_path: Optional[str] = typer.Option(
        None, "--log", "-l", help="Path to event log file (default: $STATETREE_EVENT_LOG)"
    ),
    reducer_ref: str = typer.Option(
        DEFAULT_REDUCER, "--reducer", "-r", help="Root reducer as module:attribute"
    ),
    until: Optional[int] = typer.Option(None, "--until", "-u", help="Replay until sequence number"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Replay a log and write the resulting state as a snapshot.

    Examples:
        statetree snapshot create --out state.json
        statetree snapshot create --until 99 --out state-99.json
    """
    log_path = resolve_log_path(log_path)
    try:
        reducer = load_reducer(reducer_ref)
        log = FileEventLog(log_path, create=False)
        result = replay_events(log, reducer, to_seq=until)
        last_seq = None
        for ev in log.read(to_seq=until):
            last_seq = ev.seq
        snapshot = Snapshot(
            state=result.state,
            state_hash=result.state_hash,
            event_index=last_seq,
            meta={"reducer": reducer_ref},
        )
        path = save_snapshot(snapshot, out)
    except FileNotFoundError:
        fail("Log file not found", json_output, path=log_path)
    except (ConfigurationError, EventLogError, OSError) as e:
        fail(str(e), json_output)

    if json_output:
        print(json.dumps({
            "path": path,
            "event_index": snapshot.event_index,
            "state_hash": snapshot.state_hash,
        }))
    else:
        console.print(f"[green]✓ Snapshot written:[/green] {path}")
        console.print(f"  Event index: [cyan]{snapshot.event_index}[/cyan]")
        console.print(f"  State hash: [yellow]{snapshot.state_hash}[/yellow]")


@app.command()
def verify(
    path: str = typer.Argument(..., help="Snapshot file"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Check that a snapshot's state matches its recorded hash.

    Exits with status 1 on mismatch.
    """
    try:
        snapshot = load_snapshot(path)
    except FileNotFoundError:
        fail("Snapshot file not found", json_output, path=path)
    except IntegrityError as e:
        fail(str(e), json_output, code=1, valid=False)
    except (ValueError, KeyError) as e:
        fail(f"malformed snapshot: {e}", json_output)

    if json_output:
        print(json.dumps({
            "valid": True,
            "event_index": snapshot.event_index,
            "state_hash": snapshot.state_hash,
        }))
    else:
        console.print("[green]✓ Snapshot valid[/green]")
        console.print(f"  Event index: [cyan]{snapshot.event_index}[/cyan]")
        console.print(f"  State hash: [yellow]{snapshot.state_hash}[/yellow]")
