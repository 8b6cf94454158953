"""Canonical freezing and JSON output for contract trees.

Design decisions:
- Hashing: nested dicts/lists are frozen into tuples so that structurally
  equal trees hash equally; dict key order never matters
- JSON: sorted keys, no whitespace, ASCII-only
- DSL value objects render through their ``to_plain()`` method
- Floats: NaN/Inf raise errors to prevent silent corruption
"""

from __future__ import annotations

import json
import math
from enum import Enum
from typing import Any


def freeze(obj: Any) -> Any:
    """Convert a nested structure into a hashable equivalent.

    Dicts become key-sorted tuples of pairs, lists and tuples become tagged
    tuples, sets become frozensets. Equal inputs always freeze equally.
    """
    if isinstance(obj, dict):
        items = ((str(k), freeze(v)) for k, v in obj.items())
        return ("__dict__", tuple(sorted(items, key=lambda kv: kv[0])))
    if isinstance(obj, (list, tuple)):
        return ("__list__", tuple(freeze(item) for item in obj))
    if isinstance(obj, (set, frozenset)):
        return frozenset(freeze(item) for item in obj)
    return obj


def to_plain(obj: Any) -> Any:
    """Recursively convert a projected contract tree into JSON-ready values."""
    if obj is None or isinstance(obj, (bool, int, str)):
        return obj
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            raise ValueError(f"Cannot canonicalize non-finite float: {obj}")
        return 0.0 if obj == 0.0 else obj
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {str(k): to_plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_plain(item) for item in obj]
    if hasattr(obj, "to_plain"):
        return to_plain(obj.to_plain())
    return str(obj)


class CanonicalJSONEncoder(json.JSONEncoder):
    """JSON encoder that produces canonical, deterministic output."""

    def __init__(self, **kwargs: Any) -> None:
        kwargs["sort_keys"] = True
        kwargs["separators"] = (",", ":")
        kwargs["ensure_ascii"] = True
        super().__init__(**kwargs)

    def encode(self, o: Any) -> str:
        """Encode with canonical formatting."""
        return super().encode(to_plain(o))


# Singleton encoder instance
_encoder = CanonicalJSONEncoder()


def canonical_json(data: Any, indent: int | None = None) -> str:
    """Produce canonical JSON string from data.

    Args:
        data: Projected contract data (may contain patterns and enums)
        indent: Pretty-print indentation; None keeps the compact form

    Returns:
        JSON string with sorted keys, ASCII-only
    """
    if indent is None:
        return _encoder.encode(data)
    return json.dumps(to_plain(data), sort_keys=True, ensure_ascii=True, indent=indent)
