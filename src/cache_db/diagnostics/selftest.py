"""Scripted behaviour checks for a cache engine.

Runs the basic (A), TTL (B), LRU (C) and persistence (D) scenario groups
against fresh engines. Time is simulated with a ManualClock, so the whole
suite finishes instantly.
"""

from __future__ import annotations

import logging
import typing as t
from dataclasses import dataclass, field

from cache_db.core.engine import CacheEngine
from cache_db.event import EventSink
from cache_db.storage import BlobStore, InMemoryBlobStore
from cache_db.utils.clock import ManualClock
from cache_db.utils.config import CacheConfig

_logger = logging.getLogger(__name__)


@dataclass
class ScenarioResult:
    id: str
    name: str
    expected: str
    observed: str
    passed: bool


@dataclass
class SelfTestReport:
    results: t.List[ScenarioResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return self.total - self.passed

    @property
    def ok(self) -> bool:
        return self.failed == 0


class Harness:
    """Builds engines that share one clock and one blob store."""

    def __init__(self, store: BlobStore, on_event: t.Optional[EventSink] = None) -> None:
        self.clock = ManualClock()
        self.store = store
        self._on_event = on_event

    def engine(self, max_size: int = 5, default_ttl_ms: int = 10000, storage_key: str = "selftest") -> CacheEngine:
        config = CacheConfig(max_size=max_size, default_ttl_ms=default_ttl_ms, storage_key=storage_key)
        return CacheEngine(config, self.store, on_event=self._on_event, clock=self.clock)


Scenario = t.Callable[[Harness], t.Tuple[str, bool]]
_SCENARIOS: t.List[t.Tuple[str, str, str, Scenario]] = []


def scenario(scenario_id: str, name: str, expected: str) -> t.Callable[[Scenario], Scenario]:
    def register(fn: Scenario) -> Scenario:
        _SCENARIOS.append((scenario_id, name, expected, fn))
        return fn

    return register


def _show(value: t.Optional[str]) -> str:
    return "absent" if value is None else f'"{value}"'


# Group A: basic operations


@scenario("A1", "set + get basic", '"1"')
def _a1(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(storage_key="basic-a1")
    cache.set("a", "1")
    result = cache.get("a")
    return _show(result), result == "1"


@scenario("A2", "overwrite existing key", '"2", size=1')
def _a2(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(storage_key="basic-a2")
    cache.set("a", "1")
    cache.set("a", "2")
    result = cache.get("a")
    size = cache.size()
    return f"{_show(result)}, size={size}", result == "2" and size == 1


@scenario("A3", "delete removes key", "absent")
def _a3(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(storage_key="basic-a3")
    cache.set("a", "1")
    cache.delete("a")
    result = cache.get("a")
    return _show(result), result is None


@scenario("A4", "clear empties cache", "both absent")
def _a4(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(storage_key="basic-a4")
    cache.set("a", "1")
    cache.set("b", "2")
    cache.clear()
    a, b = cache.get("a"), cache.get("b")
    return f"a={_show(a)}, b={_show(b)}", a is None and b is None


@scenario("A5", "size reflects entries", "2")
def _a5(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(storage_key="basic-a5")
    cache.set("a", "1")
    cache.set("b", "2")
    size = cache.size()
    return str(size), size == 2


# Group B: TTL


@scenario("B1", "TTL not expired yet", '"1"')
def _b1(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(storage_key="ttl-b1")
    cache.set("a", "1", 3000)
    h.clock.advance(1500)
    result = cache.get("a")
    return _show(result), result == "1"


@scenario("B2", "TTL expired", "absent")
def _b2(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(storage_key="ttl-b2")
    cache.set("a", "1", 1000)
    h.clock.advance(2000)
    result = cache.get("a")
    return _show(result), result is None


@scenario("B3", "expired entry removed on get", "size=0")
def _b3(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(storage_key="ttl-b3")
    cache.set("a", "1", 1000)
    h.clock.advance(2000)
    cache.get("a")
    size = cache.size()
    return f"size={size}", size == 0


@scenario("B4", "expired entry removed on set cleanup", "a not resident")
def _b4(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(storage_key="ttl-b4")
    cache.set("a", "1", 1000)
    h.clock.advance(2000)
    cache.set("b", "2")
    resident = "a" in cache.keys()
    return ("a resident" if resident else "a not resident"), not resident


@scenario("B5", "defaultTTL used when ttl not provided", "absent")
def _b5(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(default_ttl_ms=1500, storage_key="ttl-b5")
    cache.set("a", "1")
    h.clock.advance(2000)
    result = cache.get("a")
    return _show(result), result is None


@scenario("B6", "custom ttl overrides defaultTTL", "absent")
def _b6(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(default_ttl_ms=10000, storage_key="ttl-b6")
    cache.set("a", "1", 1500)
    h.clock.advance(2000)
    result = cache.get("a")
    return _show(result), result is None


# Group C: LRU


@scenario("C1", "no eviction when under capacity", "size=2")
def _c1(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(max_size=3, storage_key="lru-c1")
    cache.set("a", "1")
    cache.set("b", "2")
    size = cache.size()
    return f"size={size}", size == 2


@scenario("C2", "evict LRU on overflow", "a not in cache")
def _c2(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(max_size=3, storage_key="lru-c2")
    for key, value in (("a", "1"), ("b", "2"), ("c", "3"), ("d", "4")):
        cache.set(key, value)
    has_a = cache.has("a")
    return ("a found" if has_a else "a not found"), not has_a


@scenario("C3", "get refreshes recency", "b evicted, a retained")
def _c3(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(max_size=3, storage_key="lru-c3")
    cache.set("a", "1")
    cache.set("b", "2")
    cache.set("c", "3")
    cache.get("a")
    cache.set("d", "4")
    has_a, has_b = cache.has("a"), cache.has("b")
    return f"a={'found' if has_a else 'not found'}, b={'found' if has_b else 'not found'}", has_a and not has_b


@scenario("C4", "set refreshes recency", "b evicted, a retained")
def _c4(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(max_size=3, storage_key="lru-c4")
    cache.set("a", "1")
    cache.set("b", "2")
    cache.set("c", "3")
    cache.set("a", "1-updated")
    cache.set("d", "4")
    has_a, has_b = cache.has("a"), cache.has("b")
    return f"a={'found' if has_a else 'not found'}, b={'found' if has_b else 'not found'}", has_a and not has_b


@scenario("C5", "LRU order visible (MRU to LRU)", "a, b")
def _c5(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(max_size=5, storage_key="lru-c5")
    cache.set("a", "1")
    cache.set("b", "2")
    cache.get("a")
    keys = cache.keys()
    return ", ".join(keys), keys[:2] == ["a", "b"]


@scenario("C6", "eviction removes exactly one entry", "size=3")
def _c6(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(max_size=3, storage_key="lru-c6")
    for key, value in (("a", "1"), ("b", "2"), ("c", "3"), ("d", "4")):
        cache.set(key, value)
    size = cache.size()
    return f"size={size}", size == 3


@scenario("C7", "LRU respects get on expired key", "size=3 (a not counted)")
def _c7(h: Harness) -> t.Tuple[str, bool]:
    cache = h.engine(max_size=3, storage_key="lru-c7")
    cache.set("a", "1", 1500)
    h.clock.advance(2000)
    cache.get("a")
    cache.set("b", "2")
    cache.set("c", "3")
    cache.set("d", "4")
    size = cache.size()
    return f"size={size}", size == 3


# Group D: persistence


@scenario("D1", "persist after set", "store contains data")
def _d1(h: Harness) -> t.Tuple[str, bool]:
    h.store.delete("persist-d1")
    cache = h.engine(storage_key="persist-d1")
    cache.set("a", "1")
    stored = h.store.get("persist-d1")
    return ("data found" if stored else "no data"), bool(stored)


@scenario("D2", "load restores non-expired entries", "both values restored")
def _d2(h: Harness) -> t.Tuple[str, bool]:
    h.store.delete("persist-d2")
    first = h.engine(storage_key="persist-d2")
    first.set("a", "1")
    first.set("b", "2")
    second = h.engine(storage_key="persist-d2")
    a, b = second.get("a"), second.get("b")
    return f"a={_show(a)}, b={_show(b)}", a == "1" and b == "2"


@scenario("D3", "expired entries not restored", "absent")
def _d3(h: Harness) -> t.Tuple[str, bool]:
    h.store.delete("persist-d3")
    first = h.engine(storage_key="persist-d3")
    first.set("a", "1", 1500)
    h.clock.advance(2000)
    second = h.engine(storage_key="persist-d3")
    result = second.get("a")
    return _show(result), result is None


@scenario("D4", "corrupted storage handled safely", "no crash, size=0")
def _d4(h: Harness) -> t.Tuple[str, bool]:
    h.store.set("persist-d4", "not valid json")
    try:
        cache = h.engine(storage_key="persist-d4")
        size = cache.size()
    except Exception as exc:  # noqa: BLE001 - a crash is the failure being checked for
        return f"crashed: {exc}", False
    return f"no crash, size={size}", size == 0


def scenario_ids() -> t.List[str]:
    return [scenario_id for scenario_id, _, _, _ in _SCENARIOS]


def run_all(
    make_store: t.Optional[t.Callable[[], BlobStore]] = None,
    on_event: t.Optional[EventSink] = None,
) -> SelfTestReport:
    """Run every scenario, each against a fresh harness."""
    make_store = make_store or InMemoryBlobStore
    report = SelfTestReport()
    for scenario_id, name, expected, fn in _SCENARIOS:
        harness = Harness(make_store(), on_event=on_event)
        observed, passed = fn(harness)
        report.results.append(ScenarioResult(scenario_id, name, expected, observed, passed))
        _logger.debug("%s %s: %s", scenario_id, "PASS" if passed else "FAIL", observed)
    _logger.info("Self-test finished: %d/%d passed", report.passed, report.total)
    return report
