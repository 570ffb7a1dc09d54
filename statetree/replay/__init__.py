"""
Replay system for state reconstruction.

Replay applies a root reducer to an event stream to reconstruct state.
Must be 100% deterministic: same events -> same state.
"""

from .runner import ReplayResult, RecordingDispatcher, replay

__all__ = [
    "ReplayResult",
    "RecordingDispatcher",
    "replay",
]
