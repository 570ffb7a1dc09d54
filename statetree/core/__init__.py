"""
Core state container primitives.

This module provides:
- Event: Immutable, serializable event records
- Reducer: Handler-table reducer over one slice of state
- combine: Composition of named reducers over a mapping-shaped state
- Store: State owner with dispatch and subscriptions
- Canonical: Deterministic serialization
"""

from .events import Event, INIT, REPLACE, RESERVED_PREFIX, normalize_event
from .reducer import Reducer, CombinedReducer, combine
from .store import Store, create_store
from .subscribers import Subscription
from .canonical import canonicalize, canonical_json_bytes, canonical_json_str, check_serializable
from .errors import (
    StateTreeError,
    ConfigurationError,
    InvalidEventError,
    NestedDispatchError,
    ReentrancyError,
    InvalidTransitionError,
    IntegrityError,
    EventLogError,
)

__all__ = [
    "Event",
    "INIT",
    "REPLACE",
    "RESERVED_PREFIX",
    "normalize_event",
    "Reducer",
    "CombinedReducer",
    "combine",
    "Store",
    "create_store",
    "Subscription",
    "canonicalize",
    "canonical_json_bytes",
    "canonical_json_str",
    "check_serializable",
    "StateTreeError",
    "ConfigurationError",
    "InvalidEventError",
    "NestedDispatchError",
    "ReentrancyError",
    "InvalidTransitionError",
    "IntegrityError",
    "EventLogError",
]
