"""cache_db

An in-memory string cache combining TTL expiration, LRU eviction and
durable snapshotting to a pluggable blob store (memory, file or Redis).
"""

from .core.engine import CacheEngine
from .core.models import CacheEntry, CacheEvent, CacheEventKind
from .event import EventSink, InMemoryEventLog, LoggingEventSink, fan_out
from .exceptions import CacheError, ConfigError, PersistenceError, SnapshotFormatError
from .storage import (
    BlobStore,
    FileBlobStore,
    InMemoryBlobStore,
    RedisBlobStore,
    SnapshotStore,
)
from .utils import CacheConfig, EngineSettings, ManualClock, StorageConfig, system_clock

__all__ = [
    "CacheEngine",
    "CacheEntry",
    "CacheEvent",
    "CacheEventKind",
    "CacheConfig",
    "EngineSettings",
    "StorageConfig",
    "ManualClock",
    "system_clock",
    "EventSink",
    "InMemoryEventLog",
    "LoggingEventSink",
    "fan_out",
    "BlobStore",
    "InMemoryBlobStore",
    "FileBlobStore",
    "RedisBlobStore",
    "SnapshotStore",
    "CacheError",
    "ConfigError",
    "PersistenceError",
    "SnapshotFormatError",
]

__version__ = "0.1.0"
