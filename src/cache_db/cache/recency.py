from __future__ import annotations

import typing as t
from collections import OrderedDict

from cache_db.core.models import CacheEntry, Snapshot


class RecencyTable:
    """Resident entries kept in access order.

    Backed by an OrderedDict (hash index over a doubly-linked list), so
    touch, insert and LRU eviction are O(1). The MRU entry sits at the end
    of the dict and the LRU entry at the front.
    """

    def __init__(self, max_size: int) -> None:
        self._store: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self.max_size = max_size

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def peek(self, key: str) -> t.Optional[CacheEntry]:
        """Return the entry without changing its position."""
        return self._store.get(key)

    def touch(self, key: str) -> None:
        if key in self._store:
            self._store.move_to_end(key)

    def insert(self, key: str, entry: CacheEntry) -> t.List[t.Tuple[str, CacheEntry]]:
        """Insert or overwrite `key` at the MRU position.

        Returns the evicted (key, entry) pairs, oldest first. Overwriting a
        resident key never evicts. A new key evicts one LRU entry per
        overflow; more than one only when max_size was lowered after the
        table filled up.
        """
        evicted: t.List[t.Tuple[str, CacheEntry]] = []
        if key in self._store:
            self._store[key] = entry
            self._store.move_to_end(key)
            return evicted
        while self._store and len(self._store) >= self.max_size:
            evicted.append(self._store.popitem(last=False))
        self._store[key] = entry
        return evicted

    def remove(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    def clear(self) -> None:
        self._store.clear()

    def keys(self) -> t.List[str]:
        """Resident keys, MRU first."""
        return list(reversed(self._store))

    def items(self) -> t.Iterator[t.Tuple[str, CacheEntry]]:
        """Iterate (key, entry) pairs from LRU to MRU."""
        return iter(list(self._store.items()))

    def snapshot(self) -> Snapshot:
        """Full ordered sequence, MRU first."""
        return [(key, CacheEntry(entry.value, entry.expires_at)) for key, entry in reversed(self._store.items())]

    def restore(self, snapshot: Snapshot) -> None:
        """Replace contents with an MRU-first sequence, keeping at most max_size entries."""
        self._store.clear()
        for key, entry in reversed(snapshot[: self.max_size]):
            self._store[key] = entry
