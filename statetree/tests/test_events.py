"""
Tests for event normalization and validation.
"""

import pytest

from statetree.core.errors import InvalidEventError
from statetree.core.events import (
    INIT,
    Event,
    is_reserved,
    normalize_event,
    unknown_event,
)


def test_mapping_is_normalized_to_event():
    """Non-type fields of a mapping become the payload."""
    ev = normalize_event({"type": "ADD_TODO", "text": "Eat food"})

    assert ev == Event(type="ADD_TODO", payload={"text": "Eat food"})
    assert ev["text"] == "Eat food"
    assert ev.get("missing", 7) == 7


def test_event_instance_is_copied():
    ev = Event(type="SET", payload={"val": 1}, meta={"user": "u1"}, seq=2)

    normalized = normalize_event(ev)

    assert normalized == ev
    assert normalized.payload is not ev.payload
    assert normalized.meta is not ev.meta


def test_nested_payload_detached_from_caller():
    """Editing the caller's containers after normalization leaves the event unchanged."""
    tags = ["home"]
    raw = {"type": "ADD_TODO", "text": "a", "tags": tags, "extra": {"n": 1}}

    ev = normalize_event(raw)
    tags.append("mutated")
    raw["extra"]["n"] = 2

    assert ev["tags"] == ["home"]
    assert ev["extra"] == {"n": 1}


@pytest.mark.parametrize("value", [
    None,
    "ADD_TODO",
    42,
    {"text": "no type"},
    {"type": ""},
    {"type": 3},
    Event(type=""),
])
def test_malformed_events_rejected(value):
    with pytest.raises(InvalidEventError):
        normalize_event(value)


def test_reserved_prefix_rejected():
    with pytest.raises(InvalidEventError, match="reserved"):
        normalize_event({"type": INIT})

    assert normalize_event(Event(type=INIT), allow_reserved=True).type == INIT


def test_non_serializable_payload_rejected():
    with pytest.raises(InvalidEventError, match="not serializable"):
        normalize_event({"type": "CALLBACK", "fn": print})


def test_cyclic_payload_rejected():
    payload = {}
    payload["self"] = payload

    with pytest.raises(InvalidEventError):
        normalize_event(Event(type="CYCLE", payload=payload))


def test_dict_round_trip():
    ev = Event(type="SET", payload={"val": 1}, meta={"src": "test"}, seq=4)

    assert Event.from_dict(ev.to_dict()) == ev


def test_require_seq():
    with pytest.raises(ValueError):
        Event(type="SET").require_seq()
    assert Event(type="SET").with_seq(3).require_seq() == 3


def test_unknown_type_events_are_reserved():
    ev = unknown_event("todos")

    assert is_reserved(ev.type)
    assert ev.reserved
    assert ev.type.endswith(".todos")
