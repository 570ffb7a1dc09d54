"""
Event logs and integrity verification.

This module provides:
- EventLog: Abstract interface for event persistence
- MemoryEventLog: In-process log
- FileEventLog: File-based append-only storage (JSONL)
- Integrity: Hash chain verification
"""

from .store import EventLog, AppendResult, MemoryEventLog
from .file_store import FileEventLog
from .integrity import ZERO_HASH, hash_event, chain_record, verify_records

__all__ = [
    "EventLog",
    "AppendResult",
    "MemoryEventLog",
    "FileEventLog",
    "ZERO_HASH",
    "hash_event",
    "chain_record",
    "verify_records",
]
