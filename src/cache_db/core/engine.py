from __future__ import annotations

import logging
import threading
import time
import typing as t

from cache_db.cache import expiry
from cache_db.cache.recency import RecencyTable
from cache_db.event.types import EventSink
from cache_db.exceptions import PersistenceError
from cache_db.monitoring.metrics import cache_events_total, cache_persist_latency_seconds
from cache_db.storage import BlobStore, InMemoryBlobStore, SnapshotStore
from cache_db.utils.clock import Clock, system_clock
from cache_db.utils.config import CacheConfig

from .models import CacheEntry, CacheEvent, CacheEventKind, Snapshot

_logger = logging.getLogger(__name__)


class CacheEngine:
    """String cache combining TTL expiry, LRU eviction and snapshot persistence.

    Expiry is evaluated lazily against the injected clock: `set` sweeps every
    expired entry first, while `get` and `has` only re-check the key they were
    asked about. Every mutation writes a full snapshot through the
    SnapshotStore. Persistence failures never escape; they are reported as
    `parse-error` events and the in-memory table stays authoritative.

    Each public method holds one re-entrant lock for its whole
    sweep/mutate/persist sequence.
    """

    def __init__(
        self,
        config: t.Optional[CacheConfig] = None,
        storage: t.Union[SnapshotStore, BlobStore, None] = None,
        on_event: t.Optional[EventSink] = None,
        clock: Clock = system_clock,
    ) -> None:
        self._config = (config or CacheConfig()).validate()
        if storage is None:
            storage = InMemoryBlobStore()
        self._store = storage if isinstance(storage, SnapshotStore) else SnapshotStore(storage)
        self._on_event = on_event
        self._clock = clock
        self._table = RecencyTable(self._config.max_size)
        self._counts: t.Dict[CacheEventKind, int] = {}
        self._lock = threading.RLock()
        with self._lock:
            self._load()

    @property
    def config(self) -> CacheConfig:
        return CacheConfig(
            max_size=self._config.max_size,
            default_ttl_ms=self._config.default_ttl_ms,
            storage_key=self._config.storage_key,
        )

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def get(self, key: str) -> t.Optional[str]:
        with self._lock:
            if not self._check_key(key, "get"):
                return None
            now = self._clock()
            entry = self._table.peek(key)
            if entry is None:
                self._emit(CacheEventKind.MISS, f'Cache miss for key "{key}"', key)
                return None
            if not expiry.is_live(entry, now):
                self._table.remove(key)
                self._emit(CacheEventKind.EXPIRED, f'Key "{key}" expired on access', key)
                self._persist()
                return None
            self._table.touch(key)
            self._emit(CacheEventKind.HIT, f'Cache hit for key "{key}"', key)
            return entry.value

    def set(self, key: str, value: str, ttl_ms: t.Optional[int] = None) -> bool:
        """Store `value` under `key`; returns False when the input is rejected."""
        with self._lock:
            if not self._check_key(key, "set"):
                return False
            if not isinstance(value, str):
                self._reject(f'Rejected set for key "{key}": value must be a string', key)
                return False
            try:
                ttl = expiry.resolve_ttl(ttl_ms, self._config.default_ttl_ms)
            except ValueError as exc:
                self._reject(f'Rejected set for key "{key}": {exc}', key)
                return False

            now = self._clock()
            self._sweep(now)
            entry = CacheEntry(value=value, expires_at=expiry.expires_at(now, ttl))
            for evicted_key, _ in self._table.insert(key, entry):
                self._emit(CacheEventKind.EVICTED, f'Evicted LRU key "{evicted_key}" to make room', evicted_key)
            self._emit(CacheEventKind.SET, f'Set key "{key}" with TTL {ttl}ms', key)
            self._persist()
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            if not self._check_key(key, "delete"):
                return False
            if not self._table.remove(key):
                return False
            self._emit(CacheEventKind.DELETE, f'Deleted key "{key}"', key)
            self._persist()
            return True

    def clear(self) -> None:
        with self._lock:
            self._table.clear()
            self._emit(CacheEventKind.CLEAR, "Cache cleared")
            self._persist()

    def size(self) -> int:
        with self._lock:
            self._sweep_and_persist()
            return len(self._table)

    def has(self, key: str) -> bool:
        """Report whether `key` is live without refreshing its recency."""
        with self._lock:
            if not self._check_key(key, "has"):
                return False
            entry = self._table.peek(key)
            if entry is None:
                return False
            if not expiry.is_live(entry, self._clock()):
                self._table.remove(key)
                self._emit(CacheEventKind.EXPIRED, f'Key "{key}" expired on access', key)
                self._persist()
                return False
            return True

    def get_all(self) -> Snapshot:
        """Live (key, entry) pairs, most recently used first."""
        with self._lock:
            self._sweep_and_persist()
            return self._table.snapshot()

    snapshot = get_all

    def keys(self) -> t.List[str]:
        """Resident keys MRU first. Does not sweep."""
        with self._lock:
            return self._table.keys()

    def remaining_ttl_ms(self, key: str) -> t.Optional[int]:
        with self._lock:
            entry = self._table.peek(key) if isinstance(key, str) else None
            if entry is None:
                return None
            remaining = entry.expires_at - self._clock()
            return remaining if remaining > 0 else None

    def sweep(self) -> t.List[str]:
        """Remove all expired entries now; returns the removed keys."""
        with self._lock:
            return self._sweep_and_persist()

    def reconfigure(self, config: CacheConfig) -> None:
        """Swap in a new configuration.

        A lower max_size is enforced lazily: the next set of a new key evicts
        LRU entries one at a time until there is room.
        """
        config.validate()
        with self._lock:
            if config.storage_key != self._config.storage_key:
                _logger.info(
                    "Storage key changed from %s to %s", self._config.storage_key, config.storage_key
                )
            self._config = CacheConfig(config.max_size, config.default_ttl_ms, config.storage_key)
            self._table.max_size = config.max_size

    def stats(self) -> t.Dict[str, t.Any]:
        with self._lock:
            counts = {kind.value: self._counts.get(kind, 0) for kind in CacheEventKind}
            hits = counts[CacheEventKind.HIT.value]
            lookups = hits + counts[CacheEventKind.MISS.value]
            return {
                "resident": len(self._table),
                "max_size": self._config.max_size,
                "events": counts,
                "hit_ratio": (hits / lookups) if lookups else 0.0,
            }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_key(self, key: t.Any, op: str) -> bool:
        if isinstance(key, str) and key:
            return True
        self._reject(f"Rejected {op}: key must be a non-empty string, got {key!r}", None)
        return False

    def _reject(self, message: str, key: t.Optional[str]) -> None:
        _logger.warning(message)
        self._emit(CacheEventKind.INVALID_INPUT, message, key)

    def _sweep(self, now: int) -> t.List[str]:
        removed = expiry.sweep(self._table, now)
        for key in removed:
            self._emit(CacheEventKind.EXPIRED, f'Key "{key}" expired and removed', key)
        return removed

    def _sweep_and_persist(self) -> t.List[str]:
        removed = self._sweep(self._clock())
        if removed:
            self._persist()
        return removed

    def _persist(self) -> None:
        snapshot = self._table.snapshot()
        started = time.perf_counter()
        try:
            self._store.save(self._config.storage_key, snapshot)
        except PersistenceError as exc:
            _logger.warning("Snapshot save to %s failed: %s", self._config.storage_key, exc)
            self._emit(CacheEventKind.PARSE_ERROR, f"Failed to save: {exc}")
            return
        cache_persist_latency_seconds.observe(time.perf_counter() - started)
        self._emit(CacheEventKind.SAVED, f"Persisted {len(snapshot)} entries")

    def _load(self) -> None:
        try:
            snapshot = self._store.load(self._config.storage_key)
        except PersistenceError as exc:
            _logger.warning("Snapshot load from %s failed: %s", self._config.storage_key, exc)
            self._emit(CacheEventKind.PARSE_ERROR, f"Failed to load stored snapshot ({exc}), starting fresh")
            return
        if snapshot is None:
            self._emit(CacheEventKind.LOADED, "No stored data found, starting fresh")
            return

        now = self._clock()
        live = [(key, entry) for key, entry in snapshot if expiry.is_live(entry, now)]
        expired_count = len(snapshot) - len(live)
        if len(live) > self._config.max_size:
            _logger.info(
                "Snapshot holds %d live entries; keeping the %d most recent",
                len(live),
                self._config.max_size,
            )
        self._table.restore(live)
        self._emit(
            CacheEventKind.LOADED,
            f"Loaded {len(self._table)} entries ({expired_count} expired)",
        )

    def _emit(self, kind: CacheEventKind, message: str, key: t.Optional[str] = None) -> None:
        event = CacheEvent(kind=kind, message=message, timestamp=self._clock(), key=key)
        self._counts[kind] = self._counts.get(kind, 0) + 1
        cache_events_total.inc(kind=kind.value)
        _logger.debug("%s: %s", kind.value, message)
        if self._on_event is None:
            return
        try:
            self._on_event(event)
        except Exception:  # noqa: BLE001 - a broken sink must not break the cache
            _logger.exception("Event sink failed for %s event", kind.value)
