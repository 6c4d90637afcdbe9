from .base import BlobStore, InMemoryBlobStore
from .file_adapter import FileBlobStore
from .redis_adapter import RedisBlobStore
from .snapshot import SnapshotStore

__all__ = ["BlobStore", "InMemoryBlobStore", "FileBlobStore", "RedisBlobStore", "SnapshotStore"]
