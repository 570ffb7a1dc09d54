"""
State snapshots: export a store's state and load it back as preloaded state.

Snapshots carry a SHA-256 of the canonical state bytes so that a damaged or
hand-edited file is detected on load.
"""

import hashlib
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .core.canonical import canonical_json_bytes, canonical_json_str, check_serializable
from .core.errors import IntegrityError
from .core.store import Store

FORMAT_VERSION = 1


def compute_state_hash(state: Any) -> str:
    """
    Compute SHA-256 hash of state.

    Returns:
        Hex string (64 characters)
    """
    return hashlib.sha256(canonical_json_bytes(state)).hexdigest()


@dataclass(frozen=True)
class Snapshot:
    """
    Serializable copy of a store's state.

    Fields:
        state: The state tree
        state_hash: SHA-256 of canonical state bytes
        event_index: Seq of the last logged event folded into state, if known
        meta: Free-form metadata
    """
    state: Any
    state_hash: str
    event_index: Optional[int] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def verify(self) -> None:
        """
        Raises:
            IntegrityError: If state does not match state_hash
        """
        actual = compute_state_hash(self.state)
        if actual != self.state_hash:
            raise IntegrityError(
                f"Snapshot state hash mismatch: expected {self.state_hash}, got {actual}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": FORMAT_VERSION,
            "event_index": self.event_index,
            "state_hash": self.state_hash,
            "state": self.state,
            "meta": self.meta,
        }

    def to_json(self) -> str:
        return canonical_json_str(self.to_dict())

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Snapshot":
        version = data.get("version")
        if version != FORMAT_VERSION:
            raise ValueError(f"unsupported snapshot version: {version!r}")
        return Snapshot(
            state=data["state"],
            state_hash=data["state_hash"],
            event_index=data.get("event_index"),
            meta=dict(data.get("meta") or {}),
        )

    @staticmethod
    def from_json(text: str) -> "Snapshot":
        return Snapshot.from_dict(json.loads(text))


def take_snapshot(
    store: Store,
    event_index: Optional[int] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> Snapshot:
    """
    Capture the store's current state.

    Raises:
        TypeError, ValueError: If the state is not plain structured data
    """
    state = store.get_state()
    check_serializable(state, where="state")
    return Snapshot(
        state=state,
        state_hash=compute_state_hash(state),
        event_index=event_index,
        meta=dict(meta or {}),
    )


def save_snapshot(snapshot: Snapshot, path: str) -> str:
    """Write snapshot JSON to path and return the path."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(snapshot.to_json() + "\n", encoding="utf-8")
    return str(target)


def load_snapshot(path: str, verify: bool = True) -> Snapshot:
    """
    Load snapshot from file.

    Raises:
        IntegrityError: If verify is set and the state hash does not match
    """
    snapshot = Snapshot.from_json(Path(path).read_text(encoding="utf-8"))
    if verify:
        snapshot.verify()
    return snapshot
