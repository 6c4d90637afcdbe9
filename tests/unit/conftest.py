"""Shared fixtures for unit tests."""

from __future__ import annotations

import typing as t

import pytest

from cache_db.core.engine import CacheEngine
from cache_db.event import InMemoryEventLog
from cache_db.storage import InMemoryBlobStore
from cache_db.utils.clock import ManualClock
from cache_db.utils.config import CacheConfig


@pytest.fixture
def clock():
    """Manually advanced clock starting at a fixed instant."""
    return ManualClock(start_ms=1_000_000)


@pytest.fixture
def blob_store():
    """Shared in-memory blob store."""
    return InMemoryBlobStore()


@pytest.fixture
def event_log():
    """Event log used as the engine sink."""
    return InMemoryEventLog(max_events=1000)


@pytest.fixture
def make_engine(clock, blob_store, event_log) -> t.Callable[..., CacheEngine]:
    """Factory for engines wired to the shared clock, store and event log."""

    def _make(max_size: int = 5, default_ttl_ms: int = 10000, storage_key: str = "test-cache", **kwargs):
        config = CacheConfig(max_size=max_size, default_ttl_ms=default_ttl_ms, storage_key=storage_key)
        kwargs.setdefault("storage", blob_store)
        kwargs.setdefault("on_event", event_log)
        kwargs.setdefault("clock", clock)
        return CacheEngine(config, **kwargs)

    return _make


class FailingBlobStore(InMemoryBlobStore):
    """Blob store whose writes can be switched to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False
        self.writes = 0

    def set(self, key: str, blob: str) -> None:
        self.writes += 1
        if self.fail_writes:
            raise OSError("disk full")
        super().set(key, blob)


@pytest.fixture
def failing_store():
    return FailingBlobStore()
