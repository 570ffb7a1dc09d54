"""
Canonical serialization for state and events.

All hashing of events and snapshots goes through these functions so that the
same value always produces the same bytes.
"""

import json
import math
from typing import Any, Set


_SCALARS = (str, int, float, bool, type(None))


def canonicalize(obj: Any) -> Any:
    """
    Convert arbitrary nested dict/list to canonical form.

    Rules:
    - dict keys sorted alphabetically
    - tuples converted to lists
    - recursive normalization
    """
    if isinstance(obj, dict):
        return {k: canonicalize(obj[k]) for k in sorted(obj.keys())}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    return obj


def canonical_json_bytes(obj: Any) -> bytes:
    """
    Deterministic JSON bytes for hashing.

    Guarantees:
    - sort_keys=True (secondary safety)
    - separators remove whitespace
    - ensure_ascii=False keeps UTF-8 stable
    - canonical preprocessing via canonicalize()
    """
    canon = canonicalize(obj)
    s = json.dumps(
        canon,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
    return s.encode("utf-8")


def canonical_json_str(obj: Any) -> str:
    """Deterministic JSON string (for display or storage)."""
    return canonical_json_bytes(obj).decode("utf-8")


def check_serializable(obj: Any, where: str = "value") -> None:
    """
    Verify that obj is plain structured data.

    Accepted: str, int, float, bool, None, and lists / tuples / dicts of those,
    with str dict keys.

    Raises:
        TypeError: If a value is not JSON-representable (callables, sets, objects)
        ValueError: If obj contains a cyclic reference or a non-finite float
    """
    _check(obj, where, set())


def _check(obj: Any, path: str, active: Set[int]) -> None:
    if isinstance(obj, _SCALARS):
        if isinstance(obj, float) and not math.isfinite(obj):
            raise ValueError(f"{path}: non-finite float {obj!r}")
        return

    if isinstance(obj, (dict, list, tuple)):
        marker = id(obj)
        if marker in active:
            raise ValueError(f"{path}: cyclic reference")
        active.add(marker)
        try:
            if isinstance(obj, dict):
                for key, value in obj.items():
                    if not isinstance(key, str):
                        raise TypeError(f"{path}: non-string key {key!r}")
                    _check(value, f"{path}.{key}", active)
            else:
                for idx, value in enumerate(obj):
                    _check(value, f"{path}[{idx}]", active)
        finally:
            active.discard(marker)
        return

    raise TypeError(f"{path}: unsupported type {type(obj).__name__}")
