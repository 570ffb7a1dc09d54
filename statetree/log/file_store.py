"""
File-based event log using append-only JSONL format.

Each line is a hash chain record with prev_hash, event_hash, and event data.
"""

import json
import os
from typing import Any, Dict, Iterator, Tuple

from ..core.canonical import canonical_json_str
from ..core.errors import EventLogError
from ..core.events import normalize_event
from .integrity import ZERO_HASH, chain_record
from .store import AppendResult, EventLog

try:
    import fcntl
except ImportError:  # Windows or unsupported platform
    fcntl = None

_RECORD_KEYS = ("prev_hash", "event_hash", "event")
_EVENT_KEYS = ("type", "seq")


class FileEventLog(EventLog):
    """
    File-based append-only event log.

    Storage format: JSONL (newline-delimited JSON)
    Each line: {"prev_hash": "...", "event_hash": "...", "event": {...}}

    Guarantees:
    - Append-only (no mutations)
    - Fsync after each append (durability)
    - Exclusive flock while appending, so several processes may share a file
    """

    def __init__(self, path: str, create: bool = True) -> None:
        """
        Initialize file event log.

        Args:
            path: Path to JSONL file
            create: Create the file (and its directory) if it does not exist

        Raises:
            FileNotFoundError: If create is False and the file is missing
        """
        self.path = path

        if not os.path.exists(path):
            if not create:
                raise FileNotFoundError(path)
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            with open(path, "wb") as f:
                f.write(b"")

    def _last_seq_and_hash(self, f) -> Tuple[int, str]:
        """
        Read last sequence number and hash from log.

        Returns:
            (last_seq, last_hash) tuple
            (-1, ZERO_HASH) if log is empty
        """
        last_seq = -1
        last_hash = ZERO_HASH

        f.seek(0)
        for rec in self._parse(f):
            last_seq = rec["event"]["seq"]
            last_hash = rec["event_hash"]

        return last_seq, last_hash

    def _parse(self, f) -> Iterator[Dict[str, Any]]:
        for lineno, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                rec = json.loads(line)
            except ValueError as ex:
                raise EventLogError(f"{self.path}:{lineno}: malformed record: {ex}") from ex
            if not isinstance(rec, dict):
                raise EventLogError(f"{self.path}:{lineno}: not a chain record")
            missing = [key for key in _RECORD_KEYS if key not in rec]
            event = rec.get("event")
            if isinstance(event, dict):
                missing += [f"event.{key}" for key in _EVENT_KEYS if key not in event]
            elif "event" not in missing:
                missing.append("event")
            if missing:
                raise EventLogError(
                    f"{self.path}:{lineno}: not a chain record, missing {', '.join(missing)}"
                )
            if not isinstance(event["seq"], int) or isinstance(event["seq"], bool):
                raise EventLogError(f"{self.path}:{lineno}: event.seq must be an integer")
            yield rec

    def append(self, event: Any) -> AppendResult:
        """
        Append event to log with hash chain.

        Raises:
            InvalidEventError: If event is malformed
            EventLogError: If append fails
        """
        ev = normalize_event(event)
        try:
            with open(self.path, "a+b") as f:
                if fcntl:
                    fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                try:
                    last_seq, last_hash = self._last_seq_and_hash(f)
                    stored = ev.with_seq(last_seq + 1)
                    rec = chain_record(last_hash, stored)
                    line = canonical_json_str(rec) + "\n"

                    f.seek(0, os.SEEK_END)
                    f.write(line.encode("utf-8"))
                    f.flush()
                    os.fsync(f.fileno())
                finally:
                    if fcntl:
                        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except OSError as ex:
            raise EventLogError(str(ex)) from ex

        return AppendResult(
            event=stored,
            seq=stored.require_seq(),
            event_hash=rec["event_hash"],
            prev_hash=last_hash,
        )

    def records(self) -> Iterator[Dict[str, Any]]:
        """
        Yield chain records in file order.

        Raises:
            EventLogError: If a line is not a valid record
        """
        with open(self.path, "rb") as f:
            yield from self._parse(f)
