"""
Reducers: pure state transition functions.

A reducer is any callable (prior_state, event) -> next_state. It must be:
- Pure (no side effects, no I/O, no clock reads, no randomness)
- Deterministic (same input -> same output)
- Total (unknown event types return the prior state unchanged)

This module provides two ways to build one: a handler table keyed by event
type, and combine(), which composes named reducers over sub-trees of a
mapping-shaped state.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional, Set

from ..config import debug_enabled
from .events import Event, init_event, unknown_event
from .errors import ConfigurationError, InvalidTransitionError

logger = logging.getLogger(__name__)

# Signature: (prior_state, event) -> next_state
ReducerFn = Callable[[Any, Event], Any]
# Handler signature: (current_state, event) -> new_state; state is never None
Handler = Callable[[Any, Event], Any]


class Reducer:
    """
    Registry of event handlers over one slice of state.

    Usage:
        counter = Reducer(initial=0)
        counter.register("INCREMENT", lambda n, ev: n + ev.get("by", 1))

        @counter.on("RESET")
        def reset(n, ev):
            return 0

        counter(None, event)  # handlers see the initial state on first call
    """

    def __init__(self, initial: Any) -> None:
        if initial is None:
            raise ConfigurationError("Reducer initial state must not be None")
        self.initial = initial
        self._handlers: Dict[str, Handler] = {}

    def register(self, event_type: str, handler: Handler) -> None:
        """
        Register event handler.

        Args:
            event_type: Event type string
            handler: Pure function (current_state, event) -> new_state
        """
        if not callable(handler):
            raise ConfigurationError(f"handler for {event_type!r} is not callable")
        self._handlers[event_type] = handler

    def on(self, event_type: str) -> Callable[[Handler], Handler]:
        """Decorator form of register()."""
        def decorator(handler: Handler) -> Handler:
            self.register(event_type, handler)
            return handler
        return decorator

    def handles(self, event_type: str) -> bool:
        return event_type in self._handlers

    def __call__(self, state: Any, event: Event) -> Any:
        if state is None:
            state = self.initial
        handler = self._handlers.get(event.type)
        if handler is None:
            return state
        return handler(state, event)

    def __repr__(self) -> str:
        return f"Reducer(handlers={sorted(self._handlers)})"


class CombinedReducer:
    """
    Reducer over a mapping whose keys are owned by child reducers.

    Each child sees only its own key's value. When no child changes its
    value, the incoming state object is returned as is.
    """

    def __init__(self, reducers: Dict[str, ReducerFn]) -> None:
        self.reducers = reducers
        self._warned_keys: Set[str] = set()

    def __call__(self, state: Optional[Mapping], event: Event) -> Dict[str, Any]:
        if state is None:
            state = {}

        unexpected = [key for key in state if key not in self.reducers]
        for key in unexpected:
            if key not in self._warned_keys:
                self._warned_keys.add(key)
                logger.warning(
                    "Unexpected key %r in state; expected one of %s, it will be dropped",
                    key,
                    sorted(self.reducers),
                )

        has_changed = bool(unexpected)
        next_state: Dict[str, Any] = {}
        for key, reducer in self.reducers.items():
            prev = state.get(key)
            nxt = reducer(prev, event)
            if nxt is None:
                raise InvalidTransitionError(
                    f"reducer {key!r} returned None for event {event.type!r}; "
                    "return the prior state for events you do not handle"
                )
            next_state[key] = nxt
            has_changed = has_changed or nxt is not prev

        if not has_changed and len(state) == len(self.reducers):
            return state
        return next_state

    def __repr__(self) -> str:
        return f"CombinedReducer(keys={list(self.reducers)})"


def combine(reducers: Mapping, validate: Optional[bool] = None) -> CombinedReducer:
    """
    Compose named reducers into one reducer over a mapping-shaped state.

    combine({"todos": todos, "visibility_filter": visibility_filter}) returns
    a reducer producing {"todos": todos(s["todos"], e), "visibility_filter": ...}.

    Args:
        reducers: Mapping of state key -> reducer
        validate: Call each reducer once for a default state and for
            tolerance of unknown events (None = follow STATETREE_DEBUG)

    Raises:
        ConfigurationError: If the mapping or any reducer is malformed
    """
    if not isinstance(reducers, Mapping):
        raise ConfigurationError(
            f"combine() expects a mapping of name -> reducer, got {type(reducers).__name__}"
        )

    final: Dict[str, ReducerFn] = {}
    for key, reducer in reducers.items():
        if not isinstance(key, str):
            raise ConfigurationError(f"state keys must be strings, got {key!r}")
        if not callable(reducer):
            raise ConfigurationError(f"reducer {key!r} is not callable")
        final[key] = reducer

    if not final:
        logger.warning("combine() received no reducers; state will always be {}")

    if debug_enabled(validate):
        for key, reducer in final.items():
            _assert_reducer_shape(key, reducer)

    return CombinedReducer(final)


def _assert_reducer_shape(key: str, reducer: ReducerFn) -> None:
    try:
        initial = reducer(None, init_event())
    except Exception as ex:
        raise ConfigurationError(f"reducer {key!r} raised during initialization: {ex}") from ex
    if initial is None:
        raise ConfigurationError(
            f"reducer {key!r} returned None during initialization; "
            "reducers must return a default state when the prior state is None"
        )

    ev = unknown_event(key)
    try:
        result = reducer(initial, ev)
    except Exception as ex:
        raise ConfigurationError(
            f"reducer {key!r} raised for unknown event type {ev.type!r}: {ex}"
        ) from ex
    if result is not initial:
        raise ConfigurationError(
            f"reducer {key!r} did not return its prior state for unknown event type "
            f"{ev.type!r}"
        )
