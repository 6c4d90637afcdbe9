from __future__ import annotations


class CacheError(Exception):
    """Base class for cache_db errors."""


class ConfigError(CacheError, ValueError):
    """Raised when a cache or storage configuration is invalid."""


class PersistenceError(CacheError):
    """Raised when the blob store cannot read or write a snapshot."""


class SnapshotFormatError(PersistenceError):
    """Raised when a stored snapshot cannot be parsed."""
