"""
Canonical serialization for replay snapshots and exports.

Snapshots of the same position must serialize to the same bytes regardless of
how that position was reached, so digests and exports go through here.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any


def canonicalize(obj: Any) -> Any:
    """
    Convert nested dict/list/enum values to canonical form.

    Rules:
    - dict keys sorted alphabetically
    - tuples converted to lists
    - enums replaced by their value, datetimes by ISO-8601 text
    """
    if isinstance(obj, dict):
        return {str(k): canonicalize(obj[k]) for k in sorted(obj.keys(), key=str)}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    return obj


def canonical_json_bytes(obj: Any) -> bytes:
    """
    Deterministic JSON bytes for hashing.

    Returns:
        UTF-8 encoded JSON bytes without whitespace
    """
    canon = canonicalize(obj)
    s = json.dumps(canon, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return s.encode("utf-8")


def canonical_json_str(obj: Any) -> str:
    """Deterministic JSON string; same guarantees as canonical_json_bytes."""
    return canonical_json_bytes(obj).decode("utf-8")
