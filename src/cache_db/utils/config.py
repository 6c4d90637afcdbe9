from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Optional

from cache_db.exceptions import ConfigError


@dataclass
class CacheConfig:
    max_size: int = 5
    default_ttl_ms: int = 5000
    storage_key: str = "ttl-lru-cache"

    def validate(self) -> "CacheConfig":
        if isinstance(self.max_size, bool) or not isinstance(self.max_size, int) or self.max_size < 1:
            raise ConfigError(f"max_size must be a positive integer, got {self.max_size!r}")
        if (
            isinstance(self.default_ttl_ms, bool)
            or not isinstance(self.default_ttl_ms, int)
            or self.default_ttl_ms < 0
        ):
            raise ConfigError(f"default_ttl_ms must be a non-negative integer, got {self.default_ttl_ms!r}")
        if not isinstance(self.storage_key, str) or not self.storage_key:
            raise ConfigError("storage_key must be a non-empty string")
        return self


@dataclass
class StorageConfig:
    type: str = "memory"  # memory | file | redis
    path: Optional[str] = None
    connection_string: Optional[str] = None
    prefix: str = "cache"


@dataclass
class EngineSettings:
    cache: CacheConfig = dataclasses.field(default_factory=CacheConfig)
    storage: StorageConfig = dataclasses.field(default_factory=StorageConfig)
    event_log_size: int = 200

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineSettings":
        def build(dc_cls, key):
            values = data.get(key, {})
            return dc_cls(**values)

        return cls(
            cache=build(CacheConfig, "cache").validate(),
            storage=build(StorageConfig, "storage"),
            event_log_size=int(data.get("event_log_size", 200)),
        )

    def build_blob_store(self):
        from cache_db.storage import FileBlobStore, InMemoryBlobStore, RedisBlobStore

        kind = self.storage.type.lower()
        if kind == "memory":
            return InMemoryBlobStore()
        if kind == "file":
            if not self.storage.path:
                raise ConfigError("file storage requires a path")
            return FileBlobStore(self.storage.path)
        if kind == "redis":
            return RedisBlobStore(
                self.storage.connection_string or "redis://localhost:6379/0",
                prefix=self.storage.prefix,
            )
        raise ConfigError(f"unknown storage type: {self.storage.type!r}")
