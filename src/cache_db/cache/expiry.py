from __future__ import annotations

import typing as t

from cache_db.core.models import CacheEntry

from .recency import RecencyTable


def is_live(entry: CacheEntry, now: int) -> bool:
    return entry.is_live(now)


def resolve_ttl(ttl_ms: t.Optional[int], default_ttl_ms: int) -> int:
    # an explicit 0 means "expire immediately", so only None falls back
    if ttl_ms is None:
        return default_ttl_ms
    if isinstance(ttl_ms, bool) or not isinstance(ttl_ms, int) or ttl_ms < 0:
        raise ValueError(f"ttl must be a non-negative integer of milliseconds, got {ttl_ms!r}")
    return ttl_ms


def expires_at(now: int, ttl_ms: int) -> int:
    return now + ttl_ms


def sweep(table: RecencyTable, now: int) -> t.List[str]:
    """Remove every resident entry that is no longer live.

    Returns removed keys in LRU to MRU order.
    """
    expired = [key for key, entry in table.items() if not is_live(entry, now)]
    for key in expired:
        table.remove(key)
    return expired
