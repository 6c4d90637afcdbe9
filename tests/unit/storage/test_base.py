"""Unit tests for BlobStore and InMemoryBlobStore."""

import pytest

from cache_db.storage.base import BlobStore, InMemoryBlobStore


class TestBlobStoreInterface:
    """Test BlobStore abstract interface."""

    def test_interface_conformance(self):
        """Test that BlobStore has all required abstract methods."""
        for method_name in ("get", "set", "delete"):
            assert hasattr(BlobStore, method_name)

        with pytest.raises(TypeError):
            BlobStore()


class TestInMemoryBlobStore:
    """Test InMemoryBlobStore implementation."""

    def test_get_missing_returns_none(self):
        assert InMemoryBlobStore().get("nope") is None

    def test_set_overwrites(self):
        """Test set replaces any prior blob under the key."""
        store = InMemoryBlobStore()
        store.set("k", "one")
        store.set("k", "two")
        assert store.get("k") == "two"
        assert "k" in store

    def test_delete_idempotent(self):
        store = InMemoryBlobStore({"k": "v"})
        store.delete("k")
        store.delete("k")
        assert store.get("k") is None

    def test_initial_contents_are_copied(self):
        initial = {"k": "v"}
        store = InMemoryBlobStore(initial)
        store.set("k", "changed")
        assert initial["k"] == "v"
