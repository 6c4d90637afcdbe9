"""Unit tests for TTL helpers."""

import pytest

from cache_db.cache import expiry
from cache_db.cache.recency import RecencyTable
from cache_db.core.models import CacheEntry


class TestLiveness:
    """Test entry liveness rules."""

    def test_live_before_expiry(self):
        """Test entry is live strictly before expires_at."""
        entry = CacheEntry("v", expires_at=100)
        assert expiry.is_live(entry, 99) is True

    def test_dead_at_expiry_instant(self):
        """Test entry is dead once now reaches expires_at."""
        entry = CacheEntry("v", expires_at=100)
        assert expiry.is_live(entry, 100) is False
        assert expiry.is_live(entry, 101) is False


class TestResolveTTL:
    """Test TTL resolution."""

    def test_none_uses_default(self):
        assert expiry.resolve_ttl(None, 5000) == 5000

    def test_explicit_zero_is_kept(self):
        """Test explicit 0 is not replaced by the default."""
        assert expiry.resolve_ttl(0, 5000) == 0

    def test_explicit_value(self):
        assert expiry.resolve_ttl(250, 5000) == 250

    @pytest.mark.parametrize("bad", [-1, 1.5, "100", True])
    def test_invalid_ttl_rejected(self, bad):
        """Test negative and non-integer TTLs raise ValueError."""
        with pytest.raises(ValueError):
            expiry.resolve_ttl(bad, 5000)


class TestSweep:
    """Test sweeping expired entries."""

    def test_sweep_removes_only_expired(self):
        """Test sweep removes expired entries and keeps live ones in order."""
        table = RecencyTable(max_size=5)
        table.insert("old", CacheEntry("1", expires_at=50))
        table.insert("live", CacheEntry("2", expires_at=500))
        table.insert("older", CacheEntry("3", expires_at=10))

        removed = expiry.sweep(table, now=100)

        assert removed == ["old", "older"]
        assert table.keys() == ["live"]

    def test_sweep_empty_table(self):
        assert expiry.sweep(RecencyTable(max_size=1), now=0) == []

    def test_sweep_uses_entry_liveness(self):
        """Test sweep defers to CacheEntry.is_live for the expiry rule."""

        class PinnedEntry(CacheEntry):
            def is_live(self, now: int) -> bool:
                return True

        table = RecencyTable(max_size=2)
        table.insert("pinned", PinnedEntry("1", expires_at=0))
        table.insert("plain", CacheEntry("2", expires_at=0))
        assert expiry.sweep(table, now=100) == ["plain"]
        assert table.keys() == ["pinned"]
