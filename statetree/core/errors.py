"""
Exception types for the state container.
"""


class StateTreeError(Exception):
    """Base class for all statetree errors."""
    pass


class ConfigurationError(StateTreeError):
    """Raised when a reducer, listener or combine() mapping is malformed."""
    pass


class InvalidEventError(StateTreeError):
    """Raised when a dispatched value is not a well-formed event."""
    pass


class NestedDispatchError(StateTreeError):
    """Raised when dispatch() or replace_reducer() is entered while dispatching."""
    pass


class ReentrancyError(StateTreeError):
    """Raised when get_state() is called from inside a running reducer."""
    pass


class InvalidTransitionError(StateTreeError):
    """Raised when a combined sub-reducer returns None during a transition."""
    pass


class IntegrityError(StateTreeError):
    """Raised when hash chain or snapshot hash verification fails."""
    pass


class EventLogError(StateTreeError):
    """Raised when event log operations fail."""
    pass
