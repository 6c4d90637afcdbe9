from __future__ import annotations

import time
import typing as t

Clock = t.Callable[[], int]


def system_clock() -> int:
    """Wall-clock time in integer milliseconds since the epoch."""
    return int(time.time() * 1000)


class ManualClock:
    """Deterministic clock for tests and the self-test suite.

    Time only moves when `advance` or `set` is called, and never backwards.
    """

    def __init__(self, start_ms: int = 1_700_000_000_000) -> None:
        self._now = start_ms

    def __call__(self) -> int:
        return self._now

    def advance(self, ms: int) -> int:
        if ms < 0:
            raise ValueError("clock cannot move backwards")
        self._now += ms
        return self._now

    def set(self, now_ms: int) -> None:
        if now_ms < self._now:
            raise ValueError("clock cannot move backwards")
        self._now = now_ms
