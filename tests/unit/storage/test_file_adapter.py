"""Unit tests for FileBlobStore."""

import pytest

from cache_db.exceptions import PersistenceError
from cache_db.storage import FileBlobStore


class TestFileBlobStore:
    """Test the file-backed blob store."""

    def test_round_trip(self, tmp_path):
        store = FileBlobStore(tmp_path / "snapshots")
        store.set("ttl-lru-cache", '[["a", {"value": "1", "expiresAt": 5}]]')
        assert store.get("ttl-lru-cache") == '[["a", {"value": "1", "expiresAt": 5}]]'
        assert (tmp_path / "snapshots" / "ttl-lru-cache.json").exists()

    def test_missing_returns_none(self, tmp_path):
        assert FileBlobStore(tmp_path).get("nothing") is None

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        """Test atomic replace does not leave temp files behind."""
        store = FileBlobStore(tmp_path)
        store.set("k", "one")
        store.set("k", "two")
        assert store.get("k") == "two"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]

    def test_unsafe_key_is_sanitised(self, tmp_path):
        store = FileBlobStore(tmp_path)
        store.set("../escape/me", "x")
        assert store.get("../escape/me") == "x"
        assert all(p.parent == tmp_path for p in tmp_path.iterdir())

    def test_delete(self, tmp_path):
        store = FileBlobStore(tmp_path)
        store.set("k", "v")
        store.delete("k")
        store.delete("k")
        assert store.get("k") is None

    def test_write_failure_raises_persistence_error(self, tmp_path):
        """Test a directory that cannot be created surfaces as PersistenceError."""
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        store = FileBlobStore(blocker / "sub")
        with pytest.raises(PersistenceError):
            store.set("k", "v")
