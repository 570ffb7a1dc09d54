"""
Tests for hash chain integrity.

Critical: Hash chain must detect any tampering.
"""

import json
import os
import tempfile

import pytest

from statetree.core.errors import EventLogError, IntegrityError, InvalidEventError
from statetree.core.events import Event
from statetree.log import FileEventLog, MemoryEventLog
from statetree.log.integrity import ZERO_HASH, hash_event


def _write_log(tmpdir, n=5):
    log = FileEventLog(os.path.join(tmpdir, "test.log"))
    for i in range(n):
        log.append(Event(type="TEST", payload={"val": i}))
    return log


def test_genesis_event_has_zero_hash():
    """First event must chain to ZERO_HASH."""
    with tempfile.TemporaryDirectory() as tmpdir:
        log = _write_log(tmpdir, n=1)

        with open(log.path, "r") as f:
            rec = json.loads(f.readline())

        assert rec["prev_hash"] == ZERO_HASH
        assert rec["event"]["seq"] == 0


def test_hash_chain_links():
    """Each event must chain to previous event hash."""
    with tempfile.TemporaryDirectory() as tmpdir:
        log = _write_log(tmpdir)

        records = list(log.records())

        for i in range(1, len(records)):
            assert records[i]["prev_hash"] == records[i - 1]["event_hash"]
        assert log.last_hash() == records[-1]["event_hash"]
        assert log.verify() == 5


def test_hash_determinism():
    """Same event must produce same hash."""
    e = Event(type="TEST", payload={"val": 42}, seq=0)

    h1 = hash_event(ZERO_HASH, e)
    h2 = hash_event(ZERO_HASH, e)

    assert h1 == h2
    assert len(h1) == 64


def test_tamper_detection_modified_payload():
    """Modifying event payload must change hash."""
    e1 = Event(type="TEST", payload={"val": 42}, seq=0)
    e2 = Event(type="TEST", payload={"val": 99}, seq=0)

    assert hash_event(ZERO_HASH, e1) != hash_event(ZERO_HASH, e2)


def test_payload_key_order_does_not_affect_hash():
    e1 = Event(type="TEST", payload={"a": 1, "b": 2}, seq=0)
    e2 = Event(type="TEST", payload={"b": 2, "a": 1}, seq=0)

    assert hash_event(ZERO_HASH, e1) == hash_event(ZERO_HASH, e2)


def test_verify_detects_edited_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        log = _write_log(tmpdir)

        with open(log.path, "r") as f:
            lines = f.readlines()
        rec = json.loads(lines[2])
        rec["event"]["payload"]["val"] = 1000
        lines[2] = json.dumps(rec) + "\n"
        with open(log.path, "w") as f:
            f.writelines(lines)

        with pytest.raises(IntegrityError, match="Hash mismatch"):
            log.verify()


def test_verify_detects_dropped_record():
    with tempfile.TemporaryDirectory() as tmpdir:
        log = _write_log(tmpdir)

        with open(log.path, "r") as f:
            lines = f.readlines()
        del lines[1]
        with open(log.path, "w") as f:
            f.writelines(lines)

        with pytest.raises(IntegrityError, match="Sequence gap"):
            log.verify()


def test_append_continues_existing_file():
    """A second handle on the same file continues the sequence and chain."""
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_log(tmpdir, n=3)
        log = FileEventLog(os.path.join(tmpdir, "test.log"))

        result = log.append({"type": "MORE"})

        assert result.seq == 3
        assert log.verify() == 4


def test_read_range():
    log = MemoryEventLog()
    for i in range(10):
        log.append({"type": "TEST", "val": i})

    assert [ev.seq for ev in log.read(from_seq=3, to_seq=5)] == [3, 4, 5]
    assert len(log) == 10


def test_append_rejects_invalid_events():
    log = MemoryEventLog()

    with pytest.raises(InvalidEventError):
        log.append({"no": "type"})
    assert len(log) == 0


def test_missing_file_without_create():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(FileNotFoundError):
            FileEventLog(os.path.join(tmpdir, "absent.log"), create=False)


def test_malformed_line_reported():
    with tempfile.TemporaryDirectory() as tmpdir:
        log = _write_log(tmpdir, n=1)
        with open(log.path, "a") as f:
            f.write("not json\n")

        with pytest.raises(EventLogError, match=":2:"):
            list(log.read())


@pytest.mark.parametrize(
    "record, message",
    [
        ({"event_hash": ZERO_HASH, "event": {"type": "X", "seq": 1}}, "missing prev_hash"),
        ({"prev_hash": ZERO_HASH, "event_hash": ZERO_HASH, "event": "X"}, "missing event"),
        ({"prev_hash": ZERO_HASH, "event_hash": ZERO_HASH, "event": {"type": "X"}}, "event.seq"),
        (
            {"prev_hash": ZERO_HASH, "event_hash": ZERO_HASH, "event": {"type": "X", "seq": "1"}},
            "must be an integer",
        ),
    ],
)
def test_incomplete_record_reported(record, message):
    with tempfile.TemporaryDirectory() as tmpdir:
        log = _write_log(tmpdir, n=1)
        with open(log.path, "a") as f:
            f.write(json.dumps(record) + "\n")

        with pytest.raises(EventLogError, match=message):
            list(log.read())
        with pytest.raises(EventLogError, match=":2:"):
            log.append({"type": "NEXT"})
