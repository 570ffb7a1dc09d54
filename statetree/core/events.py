"""
Event model for state transitions.

Events are immutable, serializable records: a required `type` discriminant
plus kind-specific payload fields.
"""

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .canonical import check_serializable
from .errors import InvalidEventError

RESERVED_PREFIX = "@@statetree/"

INIT = RESERVED_PREFIX + "INIT"
REPLACE = RESERVED_PREFIX + "REPLACE"
PROBE_UNKNOWN_EVENT = RESERVED_PREFIX + "PROBE_UNKNOWN_EVENT"


@dataclass(frozen=True)
class Event:
    """
    Immutable event record.

    Fields:
        type: Event discriminant (e.g., "ADD_TODO", "SET_VISIBILITY_FILTER")
        payload: Kind-specific data
        meta: Annotations that reducers should not depend on (source, user, ...)
        seq: Sequence number (assigned by an EventLog)
    """
    type: str
    payload: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)
    seq: Optional[int] = None

    def __getitem__(self, name: str) -> Any:
        return self.payload[name]

    def get(self, name: str, default: Any = None) -> Any:
        """Read a payload field."""
        return self.payload.get(name, default)

    @property
    def reserved(self) -> bool:
        return is_reserved(self.type)

    def require_seq(self) -> int:
        """
        Get sequence number or raise error if not assigned.

        Raises:
            ValueError: If seq is None
        """
        if self.seq is None:
            raise ValueError("Event.seq is required but None")
        return self.seq

    def with_seq(self, seq: int) -> "Event":
        return Event(type=self.type, payload=self.payload, meta=self.meta, seq=seq)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "payload": dict(self.payload),
            "meta": dict(self.meta),
            "seq": self.seq,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Event":
        """Rebuild an event from its to_dict() form (as stored in event logs)."""
        return Event(
            type=data["type"],
            payload=dict(data.get("payload") or {}),
            meta=dict(data.get("meta") or {}),
            seq=data.get("seq"),
        )


def is_reserved(event_type: str) -> bool:
    return event_type.startswith(RESERVED_PREFIX)


def init_event() -> Event:
    return Event(type=INIT)


def replace_event() -> Event:
    return Event(type=REPLACE)


def unknown_event(name: str) -> Event:
    """Event of a type no reducer recognizes; reducers must return their state unchanged."""
    return Event(type=f"{PROBE_UNKNOWN_EVENT}.{name}")


def normalize_event(value: Any, allow_reserved: bool = False) -> Event:
    """
    Validate a dispatched value and return it as an Event.

    Accepts an Event, or a mapping of the form {"type": ..., **fields} whose
    non-type fields become the payload. The returned Event holds deep copies
    of payload and meta.

    Raises:
        InvalidEventError: If value has no string discriminant, uses the
            reserved prefix, or carries non-serializable data
    """
    if isinstance(value, Event):
        event = value
    elif isinstance(value, Mapping):
        if "type" not in value:
            raise InvalidEventError("event mapping has no 'type' field")
        fields = {k: v for k, v in value.items() if k != "type"}
        event = Event(type=value["type"], payload=fields)
    else:
        raise InvalidEventError(
            f"events must be Event instances or mappings, got {type(value).__name__}"
        )

    if not isinstance(event.type, str) or not event.type:
        raise InvalidEventError(f"event type must be a non-empty string, got {event.type!r}")
    if not allow_reserved and is_reserved(event.type):
        raise InvalidEventError(f"event type {event.type!r} uses the reserved prefix")
    if not isinstance(event.payload, dict) or not isinstance(event.meta, dict):
        raise InvalidEventError(f"event {event.type!r}: payload and meta must be dicts")

    try:
        check_serializable(event.payload, where="payload")
        check_serializable(event.meta, where="meta")
    except (TypeError, ValueError) as ex:
        raise InvalidEventError(f"event {event.type!r} is not serializable: {ex}") from ex

    # The caller keeps its own containers; later edits must not reach the event
    return Event(
        type=event.type,
        payload=copy.deepcopy(event.payload),
        meta=copy.deepcopy(event.meta),
        seq=event.seq,
    )
