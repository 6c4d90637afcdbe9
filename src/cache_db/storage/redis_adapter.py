from __future__ import annotations

import typing as t

import redis

from cache_db.exceptions import PersistenceError

from .base import BlobStore


class RedisBlobStore(BlobStore):
    """Redis-backed blob store.

    - Snapshots are stored as JSON strings at key: `{prefix}:snapshot:{storage_key}`
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        *,
        prefix: str = "cache",
        client: t.Optional[t.Any] = None,
    ) -> None:
        self._url = url
        self._prefix = prefix.rstrip(":")
        self._redis = client if client is not None else redis.Redis.from_url(url, decode_responses=True)

    def _snapshot_key(self, key: str) -> str:
        return f"{self._prefix}:snapshot:{key}"

    def get(self, key: str) -> t.Optional[str]:
        try:
            raw = self._redis.get(self._snapshot_key(key))
        except redis.RedisError as exc:
            raise PersistenceError(f"redis get failed: {exc}") from exc
        if isinstance(raw, (bytes, bytearray)):
            return raw.decode("utf-8", errors="replace")
        return raw

    def set(self, key: str, blob: str) -> None:
        try:
            self._redis.set(self._snapshot_key(key), blob)
        except redis.RedisError as exc:
            raise PersistenceError(f"redis set failed: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(self._snapshot_key(key))
        except redis.RedisError as exc:
            raise PersistenceError(f"redis delete failed: {exc}") from exc

    def is_healthy(self) -> bool:
        try:
            return bool(self._redis.ping())
        except redis.RedisError:
            return False

    def close(self) -> None:  # pragma: no cover - convenience
        try:
            self._redis.close()
        except redis.RedisError:
            pass
