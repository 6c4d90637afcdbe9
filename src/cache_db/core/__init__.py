"""Core module: cache data model and the cache engine."""

from .models import CacheEntry, CacheEvent, CacheEventKind, Snapshot
from .engine import CacheEngine

__all__ = [
    "CacheEngine",
    "CacheEntry",
    "CacheEvent",
    "CacheEventKind",
    "Snapshot",
]
