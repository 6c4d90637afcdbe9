from __future__ import annotations

import typing as t

from cache_db.core.models import Snapshot
from cache_db.exceptions import PersistenceError

from . import codec
from .base import BlobStore


class SnapshotStore:
    """Persistence adapter between the engine and a blob store.

    `save` overwrites whatever is stored under the storage key. `load`
    returns None when nothing is stored and raises SnapshotFormatError when
    the stored text cannot be parsed. Blob store failures surface as
    PersistenceError.
    """

    def __init__(self, blobs: BlobStore) -> None:
        self._blobs = blobs

    @property
    def blobs(self) -> BlobStore:
        return self._blobs

    def save(self, storage_key: str, snapshot: Snapshot) -> None:
        payload = codec.dumps(snapshot)
        try:
            self._blobs.set(storage_key, payload)
        except PersistenceError:
            raise
        except Exception as exc:  # noqa: BLE001 - third-party stores raise their own types
            raise PersistenceError(f"save failed: {exc}") from exc

    def load(self, storage_key: str) -> t.Optional[Snapshot]:
        try:
            raw = self._blobs.get(storage_key)
        except PersistenceError:
            raise
        except Exception as exc:  # noqa: BLE001 - third-party stores raise their own types
            raise PersistenceError(f"load failed: {exc}") from exc
        if not raw:
            return None
        return codec.loads(raw)
