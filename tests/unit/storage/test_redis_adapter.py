"""Unit tests for RedisBlobStore with a mocked client."""

from unittest.mock import Mock

import pytest
import redis

from cache_db.exceptions import PersistenceError
from cache_db.storage import RedisBlobStore


@pytest.fixture
def redis_client():
    client = Mock()
    client.get.return_value = None
    client.ping.return_value = True
    return client


class TestRedisBlobStore:
    """Test key layout and error mapping."""

    def test_set_uses_prefixed_key(self, redis_client):
        store = RedisBlobStore(prefix="cache:", client=redis_client)
        store.set("ttl-lru-cache", "[]")
        redis_client.set.assert_called_once_with("cache:snapshot:ttl-lru-cache", "[]")

    def test_get_decodes_bytes(self, redis_client):
        redis_client.get.return_value = b"[]"
        store = RedisBlobStore(client=redis_client)
        assert store.get("k") == "[]"
        redis_client.get.assert_called_once_with("cache:snapshot:k")

    def test_get_missing(self, redis_client):
        assert RedisBlobStore(client=redis_client).get("k") is None

    def test_delete(self, redis_client):
        RedisBlobStore(prefix="app", client=redis_client).delete("k")
        redis_client.delete.assert_called_once_with("app:snapshot:k")

    def test_errors_become_persistence_errors(self, redis_client):
        """Test redis errors are mapped to PersistenceError."""
        redis_client.set.side_effect = redis.ConnectionError("refused")
        redis_client.get.side_effect = redis.TimeoutError("timeout")
        store = RedisBlobStore(client=redis_client)
        with pytest.raises(PersistenceError, match="refused"):
            store.set("k", "[]")
        with pytest.raises(PersistenceError, match="timeout"):
            store.get("k")

    def test_is_healthy(self, redis_client):
        store = RedisBlobStore(client=redis_client)
        assert store.is_healthy() is True
        redis_client.ping.side_effect = redis.ConnectionError("down")
        assert store.is_healthy() is False

    def test_from_url_without_connecting(self):
        """Test constructing from a URL does not require a live server."""
        store = RedisBlobStore("redis://localhost:6399/0")
        assert store._snapshot_key("k") == "cache:snapshot:k"
