from __future__ import annotations

import enum
import typing as t
from dataclasses import dataclass


class CacheEventKind(str, enum.Enum):
    HIT = "hit"
    MISS = "miss"
    EXPIRED = "expired"
    EVICTED = "evicted"
    SET = "set"
    DELETE = "delete"
    CLEAR = "clear"
    SAVED = "saved"
    LOADED = "loaded"
    PARSE_ERROR = "parse-error"
    INVALID_INPUT = "invalid-input"


@dataclass
class CacheEntry:
    value: str
    # absolute, milliseconds since epoch
    expires_at: int

    def is_live(self, now: int) -> bool:
        return now < self.expires_at


@dataclass
class CacheEvent:
    kind: CacheEventKind
    message: str
    timestamp: int
    key: t.Optional[str] = None


Snapshot = t.List[t.Tuple[str, CacheEntry]]
