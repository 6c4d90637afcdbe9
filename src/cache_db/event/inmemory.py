from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List

from .types import CacheEvent, CacheEventKind, EventSink

_logger = logging.getLogger(__name__)


class InMemoryEventLog:
    """Bounded in-memory event log, usable directly as an engine sink."""

    def __init__(self, max_events: int = 200) -> None:
        self._max_events = max_events
        self._events: Deque[CacheEvent] = deque(maxlen=max_events)

    def __call__(self, event: CacheEvent) -> None:
        self._events.append(event)

    def __len__(self) -> int:
        return len(self._events)

    @property
    def events(self) -> List[CacheEvent]:
        return list(self._events)

    def tail(self, n: int) -> List[CacheEvent]:
        if n <= 0:
            return []
        return list(self._events)[-n:]

    def of_kind(self, kind: CacheEventKind) -> List[CacheEvent]:
        return [event for event in self._events if event.kind == kind]

    def kinds(self) -> List[CacheEventKind]:
        return [event.kind for event in self._events]

    def clear(self) -> None:
        self._events.clear()


class LoggingEventSink:
    """Forwards cache events to a standard library logger."""

    _WARNING_KINDS = frozenset({CacheEventKind.PARSE_ERROR, CacheEventKind.INVALID_INPUT})

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _logger

    def __call__(self, event: CacheEvent) -> None:
        level = logging.WARNING if event.kind in self._WARNING_KINDS else logging.INFO
        self._logger.log(level, "[%s] %s", event.kind.value, event.message)


def fan_out(*sinks: EventSink) -> EventSink:
    """Combine several sinks into one; each receives every event in order."""

    def _emit(event: CacheEvent) -> None:
        for sink in sinks:
            sink(event)

    return _emit
