from __future__ import annotations

import typing as t
from abc import ABC, abstractmethod


class BlobStore(ABC):
    """Synchronous string key/value store that holds serialized snapshots."""

    @abstractmethod
    def get(self, key: str) -> t.Optional[str]:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, blob: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError


class InMemoryBlobStore(BlobStore):
    """A dict-backed store for dev/test.

    Contents live only as long as the object, but several engines can share
    one instance to simulate a restart.
    """

    def __init__(self, initial: t.Optional[t.Dict[str, str]] = None) -> None:
        self._blobs: t.Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> t.Optional[str]:
        return self._blobs.get(key)

    def set(self, key: str, blob: str) -> None:
        self._blobs[key] = blob

    def delete(self, key: str) -> None:
        self._blobs.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._blobs
