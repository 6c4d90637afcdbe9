"""JSON wire format for cache snapshots.

A snapshot is an array of `[key, {"value": ..., "expiresAt": ...}]` pairs,
most recently used first.
"""

from __future__ import annotations

import json
import math
import typing as t

from cache_db.core.models import CacheEntry, Snapshot
from cache_db.exceptions import SnapshotFormatError


def dumps(snapshot: Snapshot) -> str:
    data = [[key, {"value": entry.value, "expiresAt": entry.expires_at}] for key, entry in snapshot]
    return json.dumps(data, separators=(",", ":"))


def loads(raw: str) -> Snapshot:
    try:
        data = json.loads(raw)
    except (ValueError, TypeError, RecursionError) as exc:
        raise SnapshotFormatError(f"snapshot is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise SnapshotFormatError(f"snapshot must be a JSON array, got {type(data).__name__}")

    snapshot: Snapshot = []
    for index, item in enumerate(data):
        snapshot.append(_decode_pair(index, item))
    return snapshot


def _decode_pair(index: int, item: t.Any) -> t.Tuple[str, CacheEntry]:
    if not isinstance(item, list) or len(item) != 2:
        raise SnapshotFormatError(f"item {index} is not a [key, entry] pair")
    key, entry = item
    if not isinstance(key, str) or not key:
        raise SnapshotFormatError(f"item {index} has an invalid key")
    if not isinstance(entry, dict):
        raise SnapshotFormatError(f"item {index} entry is not an object")
    value = entry.get("value")
    expires = entry.get("expiresAt")
    if not isinstance(value, str):
        raise SnapshotFormatError(f"item {index} value must be a string")
    # bool is an int subclass; reject it explicitly
    if isinstance(expires, bool) or not isinstance(expires, (int, float)):
        raise SnapshotFormatError(f"item {index} expiresAt must be a number")
    if isinstance(expires, float) and not math.isfinite(expires):
        raise SnapshotFormatError(f"item {index} expiresAt must be finite")
    return key, CacheEntry(value=value, expires_at=int(expires))
