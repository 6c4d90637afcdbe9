from __future__ import annotations

import typing as t

from cache_db.core.models import CacheEvent, CacheEventKind

EventSink = t.Callable[[CacheEvent], None]

__all__ = ["CacheEvent", "CacheEventKind", "EventSink"]
