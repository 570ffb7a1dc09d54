"""
Subscriber registry: ordered listener callables notified after each
committed transition.
"""

import itertools
from typing import Callable, Dict, List

Listener = Callable[[], None]


class SubscriberRegistry:
    """
    Insertion-ordered registry of listeners.

    Every registration gets its own token, so the same callable registered
    twice is notified twice and removed one registration at a time.
    Add and remove are O(1); snapshot() copies the current listeners for one
    notification pass.
    """

    def __init__(self) -> None:
        self._listeners: Dict[int, Listener] = {}
        self._tokens = itertools.count()

    def add(self, listener: Listener) -> int:
        token = next(self._tokens)
        self._listeners[token] = listener
        return token

    def remove(self, token: int) -> bool:
        """Remove one registration. Returns False if it was already removed."""
        return self._listeners.pop(token, None) is not None

    def snapshot(self) -> List[Listener]:
        return list(self._listeners.values())

    def __contains__(self, token: int) -> bool:
        return token in self._listeners

    def __len__(self) -> int:
        return len(self._listeners)


class Subscription:
    """
    Cancellation token returned by Store.subscribe().

    Calling the token, or its unsubscribe() method, removes exactly the
    registration it was created for. Further calls do nothing.
    """

    def __init__(self, registry: SubscriberRegistry, token: int) -> None:
        self._registry = registry
        self._token = token

    @property
    def active(self) -> bool:
        return self._token in self._registry

    def unsubscribe(self) -> None:
        self._registry.remove(self._token)

    def __call__(self) -> None:
        self.unsubscribe()

    def __repr__(self) -> str:
        state = "active" if self.active else "cancelled"
        return f"<Subscription #{self._token} {state}>"
