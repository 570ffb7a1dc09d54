"""
Hash chain integrity for event logs.

Each record carries the hash of the previous record, so editing, dropping
or reordering a logged event breaks the chain.
"""

import copy
import hashlib
from typing import Any, Dict, Iterable

from ..core.canonical import canonical_json_bytes
from ..core.errors import IntegrityError
from ..core.events import Event

ZERO_HASH = "0" * 64


def hash_event(prev_hash: str, event: Event) -> str:
    """
    Compute hash of event chained to previous hash.

    Hash input: prev_hash + canonical_json(event.to_dict())

    Returns:
        SHA-256 hash as hex string
    """
    b = prev_hash.encode("utf-8") + canonical_json_bytes(event.to_dict())
    return hashlib.sha256(b).hexdigest()


def chain_record(prev_hash: str, event: Event) -> Dict[str, Any]:
    """
    Create hash chain record for storage.

    Record includes:
    - prev_hash: Hash of previous event
    - event_hash: Hash of this event
    - event: Full event data
    """
    return {
        "prev_hash": prev_hash,
        "event_hash": hash_event(prev_hash, event),
        "event": copy.deepcopy(event.to_dict()),
    }


def verify_records(records: Iterable[Dict[str, Any]]) -> int:
    """
    Walk chain records in order and check every link.

    Returns:
        Number of verified records

    Raises:
        IntegrityError: On a broken link, a hash mismatch or a sequence gap
    """
    expected_prev = ZERO_HASH
    expected_seq = 0
    count = 0
    for rec in records:
        event = Event.from_dict(rec["event"])
        if event.seq != expected_seq:
            raise IntegrityError(f"Sequence gap: expected seq {expected_seq}, found {event.seq}")
        if rec["prev_hash"] != expected_prev:
            raise IntegrityError(f"Broken chain at seq {event.seq}: prev_hash does not link")
        actual = hash_event(rec["prev_hash"], event)
        if actual != rec["event_hash"]:
            raise IntegrityError(f"Hash mismatch at seq {event.seq}")
        expected_prev = actual
        expected_seq += 1
        count += 1
    return count
