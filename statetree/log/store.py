"""
EventLog abstract interface and in-memory implementation.

An event log is the record that makes a store replayable: feeding its events,
in order, to a fresh store with the same reducer reproduces the final state.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from ..core.events import Event, normalize_event
from .integrity import ZERO_HASH, chain_record, verify_records


@dataclass(frozen=True)
class AppendResult:
    """
    Result of an append.

    Fields:
        event: Event as stored (seq assigned)
        seq: Assigned sequence number
        event_hash: Hash of the stored record
        prev_hash: Hash the record chains to
    """
    event: Event
    seq: int
    event_hash: str
    prev_hash: str


class EventLog(ABC):
    """
    Append-only, hash-chained event log.

    All implementations must guarantee:
    - Append-only (no updates, no deletes)
    - Sequential ordering (seq 0, 1, 2, ...)
    - Each record chains to the previous record's hash
    """

    @abstractmethod
    def append(self, event: Any) -> AppendResult:
        """
        Append event to log.

        Args:
            event: Event or event mapping (seq will be assigned)

        Raises:
            InvalidEventError: If event is malformed
            EventLogError: If the write fails
        """
        ...

    @abstractmethod
    def records(self) -> Iterator[Dict[str, Any]]:
        """Yield raw chain records in sequence order."""
        ...

    def read(self, from_seq: int = 0, to_seq: Optional[int] = None) -> Iterator[Event]:
        """
        Read events from log.

        Args:
            from_seq: Start from this sequence number (inclusive)
            to_seq: Stop after this sequence number (inclusive, None = all)

        Yields:
            Events in sequence order
        """
        for rec in self.records():
            ev = Event.from_dict(rec["event"])
            seq = ev.require_seq()
            if seq < from_seq:
                continue
            if to_seq is not None and seq > to_seq:
                break
            yield ev

    def __iter__(self) -> Iterator[Event]:
        return self.read()

    def last_hash(self) -> str:
        last = ZERO_HASH
        for rec in self.records():
            last = rec["event_hash"]
        return last

    def verify(self) -> int:
        """
        Verify the whole hash chain.

        Returns:
            Number of verified records

        Raises:
            IntegrityError: If the chain is broken
        """
        return verify_records(self.records())


class MemoryEventLog(EventLog):
    """In-process event log, mainly for tests and short-lived recordings."""

    def __init__(self) -> None:
        self._records: List[Dict[str, Any]] = []

    def append(self, event: Any) -> AppendResult:
        ev = normalize_event(event)
        prev_hash = self._records[-1]["event_hash"] if self._records else ZERO_HASH
        stored = ev.with_seq(len(self._records))
        rec = chain_record(prev_hash, stored)
        self._records.append(rec)
        return AppendResult(
            event=stored,
            seq=stored.require_seq(),
            event_hash=rec["event_hash"],
            prev_hash=prev_hash,
        )

    def records(self) -> Iterator[Dict[str, Any]]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)
