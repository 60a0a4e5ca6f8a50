"""
Deterministic serialization of opaque context values.

Two values are duplicates when ``canonicalize`` returns the same string.
Mappings are written with sorted keys, so insertion order never matters.
``canonicalize`` accepts any value and never raises.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

_SCALARS = (str, int, float, bool, type(None))


def _dumps(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _key(key: Any, active: set[int]) -> str:
    """String form of a mapping key."""
    if isinstance(key, str):
        return key
    return _dumps(_normalize(key, active))


def _normalize(value: Any, active: set[int]) -> Any:
    """
    Convert value into plain JSON types.

    ``active`` holds the ids of the containers being walked; meeting one of
    them again is a reference cycle and is written as its repr marker.
    """
    if isinstance(value, Enum):
        return _normalize(value.value, active)
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return value.hex()

    is_record = is_dataclass(value) and not isinstance(value, type)
    if not (is_record or isinstance(value, (Mapping, list, tuple, set, frozenset))):
        return repr(value)

    marker = id(value)
    if marker in active:
        return f"<cycle {type(value).__name__}>"
    active.add(marker)
    try:
        if is_record:
            return {f.name: _normalize(getattr(value, f.name), active) for f in fields(value)}
        if isinstance(value, Mapping):
            return {_key(k, active): _normalize(v, active) for k, v in value.items()}
        if isinstance(value, (set, frozenset)):
            return sorted((_normalize(v, active) for v in value), key=_dumps)
        return [_normalize(v, active) for v in value]
    finally:
        active.discard(marker)


def canonicalize(value: Any) -> str:
    """
    Serialize a value to its canonical string form.

    Rules:
    - dict keys sorted, compact separators
    - non-string keys replaced by their own canonical form (``1`` -> ``"1"``,
      ``(1, 2)`` -> ``"[1,2]"``), so mixed key types sort cleanly
    - tuples encode as lists
    - dataclasses as dicts, Enums by value, datetimes as ISO-8601
    - sets as lists sorted by their canonical form
    - reference cycles as a ``<cycle TYPE>`` marker, nesting too deep to walk
      as ``<unserializable TYPE>``
    - anything else by ``repr``
    """
    try:
        return _dumps(_normalize(value, set()))
    except RecursionError:
        return _dumps(f"<unserializable {type(value).__name__}>")


__all__ = ["canonicalize"]
