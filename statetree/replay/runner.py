"""
Replay runner: reconstruct state from an event sequence.

Replay feeds events, in order, to a fresh store. Same events and same
reducer always produce the same state.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from ..core.events import Event, normalize_event
from ..core.reducer import ReducerFn
from ..core.store import Store
from ..log.store import EventLog
from ..snapshot import compute_state_hash


@dataclass(frozen=True)
class ReplayResult:
    """
    Result of replay operation.

    Fields:
        state: Final state after applying events
        applied: Number of events applied
        state_hash: SHA-256 of the canonical final state
    """
    state: Any
    applied: int
    state_hash: str


def replay(
    events: Iterable[Any],
    reducer: ReducerFn,
    preloaded_state: Any = None,
    to_seq: Optional[int] = None,
    from_seq: int = 0,
) -> ReplayResult:
    """
    Replay events to reconstruct state.

    Args:
        events: Event sequence or EventLog
        reducer: Root reducer
        preloaded_state: State to start from (e.g. a snapshot taken at from_seq - 1)
        to_seq: Stop at this sequence (inclusive, None = all)
        from_seq: Skip events before this sequence

    Events without a seq are positioned by their index in the sequence.
    Reserved events (INIT, REPLACE) are skipped; the fresh store derives its own.
    """
    store = Store(reducer, preloaded_state, name="replay")
    count = 0

    for idx, raw in enumerate(events):
        ev = normalize_event(raw, allow_reserved=True)
        if ev.reserved:
            continue
        seq = ev.seq if ev.seq is not None else idx
        if seq < from_seq:
            continue
        if to_seq is not None and seq > to_seq:
            break
        store.dispatch(ev)
        count += 1

    state = store.get_state()
    return ReplayResult(state=state, applied=count, state_hash=compute_state_hash(state))


class RecordingDispatcher:
    """
    Dispatch wrapper that appends every committed event to an EventLog.

    An event is appended only after store.dispatch() returns. If the reducer
    or a subscriber raises, the event is not recorded.

    Usage:
        recorder = RecordingDispatcher(store, FileEventLog("events.log"))
        recorder.dispatch({"type": "ADD_TODO", "text": "Eat food"})
    """

    def __init__(self, store: Store, log: EventLog) -> None:
        self.store = store
        self.log = log

    def dispatch(self, event: Any) -> Event:
        ev = self.store.dispatch(event)
        return self.log.append(ev).event

    def get_state(self) -> Any:
        return self.store.get_state()
