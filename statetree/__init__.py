"""
statetree

Predictable, centralized application-state container: one state tree, updated
only by pure reducers in response to serializable events.
"""

from .core import (
    Event,
    Reducer,
    Store,
    Subscription,
    combine,
    create_store,
)

__version__ = "0.1.0"

__all__ = [
    "Event",
    "Reducer",
    "Store",
    "Subscription",
    "combine",
    "create_store",
    "__version__",
]
