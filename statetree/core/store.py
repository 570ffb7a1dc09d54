"""
Store: owner of the current state and the root reducer.

dispatch() is the only way to change state. Each dispatch runs the reducer,
commits the result, then notifies subscribers synchronously in registration
order. Re-entrant dispatch is rejected rather than queued, so get_state()
right after dispatch() always reflects exactly that dispatch.

Stores are not thread-safe: serialize calls on one instance externally.
"""

import itertools
from typing import Any, Optional

from ..config import debug_enabled
from ..logging_config import get_logger
from .errors import ConfigurationError, NestedDispatchError, ReentrancyError
from .events import Event, init_event, normalize_event, replace_event
from .reducer import ReducerFn
from .subscribers import Listener, SubscriberRegistry, Subscription

_store_ids = itertools.count(1)


class Store:
    """
    Single-writer state container.

    Usage:
        store = Store(root_reducer)
        unsubscribe = store.subscribe(lambda: render(store.get_state()))
        store.dispatch({"type": "ADD_TODO", "text": "Eat food"})
        unsubscribe()
    """

    def __init__(
        self,
        reducer: ReducerFn,
        preloaded_state: Any = None,
        debug: Optional[bool] = None,
        name: Optional[str] = None,
    ) -> None:
        """
        Initialize store.

        Args:
            reducer: Root reducer
            preloaded_state: State to start from (e.g. a loaded snapshot)
            debug: Reject get_state() from inside the reducer (None = STATETREE_DEBUG)
            name: Identifier used in log records

        Raises:
            ConfigurationError: If reducer is not callable
        """
        if not callable(reducer):
            raise ConfigurationError(
                f"expected the root reducer to be callable, got {type(reducer).__name__}"
            )

        self.name = name or f"store-{next(_store_ids)}"
        self._debug = debug_enabled(debug)
        self._log = get_logger(__name__, store_id=self.name)
        self._reducer = reducer
        self._state: Any = None
        self._subscribers = SubscriberRegistry()
        self._dispatching = False
        self._reducing = False

        self._state = self._reduce(reducer, preloaded_state, init_event())
        self._log.debug("Store created", extra={"reducer": repr(reducer)})

    @property
    def state(self) -> Any:
        return self.get_state()

    @property
    def reducer(self) -> ReducerFn:
        return self._reducer

    @property
    def is_dispatching(self) -> bool:
        return self._dispatching

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def get_state(self) -> Any:
        """
        Return the current state by reference.

        Raises:
            ReentrancyError: If called while the reducer is running (debug only)
        """
        if self._reducing and self._debug:
            raise ReentrancyError(
                "get_state() may not be called while the reducer is executing; "
                "the reducer already receives the state as an argument"
            )
        return self._state

    def dispatch(self, event: Any) -> Event:
        """
        Apply event to the current state and notify subscribers.

        Args:
            event: Event instance or mapping {"type": ..., **fields}

        Returns:
            The dispatched event, normalized to an Event

        Raises:
            NestedDispatchError: If called while another dispatch is in flight
            InvalidEventError: If event is malformed
        """
        if self._dispatching:
            raise NestedDispatchError(
                "dispatch() may not be called while a dispatch is in progress "
                "(from a reducer or a subscriber)"
            )
        ev = normalize_event(event)
        self._commit(ev)
        return ev

    def subscribe(self, listener: Listener) -> Subscription:
        """
        Register a zero-argument listener called after every dispatch.

        Listeners added during a notification pass are first called on the
        next dispatch. Listeners removed during a pass are still called in
        that pass if they had not been reached yet.

        Returns:
            Subscription token; call it to unsubscribe

        Raises:
            ConfigurationError: If listener is not callable
        """
        if not callable(listener):
            raise ConfigurationError(
                f"expected the listener to be callable, got {type(listener).__name__}"
            )
        token = self._subscribers.add(listener)
        return Subscription(self._subscribers, token)

    def replace_reducer(self, next_reducer: ReducerFn) -> None:
        """
        Swap the root reducer and re-derive state from the current state.

        Raises:
            ConfigurationError: If next_reducer is not callable
            NestedDispatchError: If called while a dispatch is in progress
        """
        if not callable(next_reducer):
            raise ConfigurationError(
                f"expected the next reducer to be callable, got {type(next_reducer).__name__}"
            )
        if self._dispatching:
            raise NestedDispatchError(
                "replace_reducer() may not be called while a dispatch is in progress"
            )
        self._log.debug("Replacing reducer", extra={"reducer": repr(next_reducer)})
        self._commit(replace_event(), reducer=next_reducer)

    def _reduce(self, reducer: ReducerFn, state: Any, event: Event) -> Any:
        self._reducing = True
        try:
            return reducer(state, event)
        finally:
            self._reducing = False

    def _commit(self, event: Event, reducer: Optional[ReducerFn] = None) -> None:
        if reducer is None:
            reducer = self._reducer
        self._dispatching = True
        try:
            # Listeners subscribed from here on wait for the next dispatch
            listeners = self._subscribers.snapshot()
            self._state = self._reduce(reducer, self._state, event)
            self._reducer = reducer
            self._log.debug(
                "Dispatched event",
                extra={"event_type": event.type, "listeners": len(listeners)},
            )
            for listener in listeners:
                listener()
        finally:
            self._dispatching = False

    def __repr__(self) -> str:
        return (
            f"<Store {self.name} reducer={self._reducer!r} "
            f"subscribers={len(self._subscribers)}>"
        )


def create_store(
    reducer: ReducerFn,
    preloaded_state: Any = None,
    debug: Optional[bool] = None,
    name: Optional[str] = None,
) -> Store:
    """Create a store; see Store.__init__."""
    return Store(reducer, preloaded_state, debug=debug, name=name)
