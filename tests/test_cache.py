"""
Tests for the SQLite cache layer and state store.
"""

import sqlite3

import pytest

from reqres_users.cache.sqlite import CacheLayer
from reqres_users.cache.state import StateStore
from reqres_users.core.exceptions import CacheError


def expire(cache: CacheLayer, key: str) -> None:
    """Force an entry's expiry into the past."""
    conn = sqlite3.connect(cache.db_path)
    conn.execute(
        "UPDATE cache SET expires_at = datetime('now', '-1 seconds') WHERE key = ?",
        (key,),
    )
    conn.commit()
    conn.close()


class TestCacheLayer:
    """Tests for CacheLayer."""

    def test_creates_parent_directory(self, tmp_path):
        """The database directory is created on demand."""
        db_path = tmp_path / "nested" / "dir" / "cache.db"
        CacheLayer(db_path)
        assert db_path.parent.is_dir()

    def test_set_and_get(self, cache_layer):
        """Stored JSON values round-trip."""
        cache_layer.set("key", {"users": [1, 2], "total": 2}, 60)
        assert cache_layer.get_value("key") == {"users": [1, 2], "total": 2}

    def test_missing_key(self, cache_layer):
        """Unknown keys are misses."""
        assert cache_layer.get_value("missing") is None

    def test_expired_entry_is_miss(self, cache_layer):
        """Entries past their expiry are not returned."""
        cache_layer.set("key", "value", 60)
        expire(cache_layer, "key")
        assert cache_layer.get_value("key") is None

    def test_permanent_entry_never_expires(self, cache_layer):
        """PERMANENT entries have no expiry."""
        cache_layer.set("hash", "abc", CacheLayer.PERMANENT)
        assert cache_layer.get_value("hash") == "abc"
        assert cache_layer.cleanup() == 0
        assert cache_layer.stats()["permanent_entries"] == 1

    def test_invalidate_tags_drops_tagged_entries(self, cache_layer):
        """Every entry carrying the tag goes, whatever its key."""
        cache_layer.set("reqres_users:response:1:6", "p1", 300, tags=["reqres_users"])
        cache_layer.set("reqres_users:response:2:6", "p2", 300, tags=["reqres_users"])
        cache_layer.set("reqres_users:data_hash:1:6", "h1", CacheLayer.PERMANENT)
        cache_layer.set("other", "o", 300, tags=["other"])

        removed = cache_layer.invalidate_tags(["reqres_users"])

        assert removed == 2
        assert cache_layer.get_value("reqres_users:response:1:6") is None
        assert cache_layer.get_value("reqres_users:response:2:6") is None
        assert cache_layer.get_value("reqres_users:data_hash:1:6") == "h1"
        assert cache_layer.get_value("other") == "o"

    def test_invalidate_no_tags(self, cache_layer):
        """An empty tag list is a no-op."""
        cache_layer.set("key", "value", 60, tags=["t"])
        assert cache_layer.invalidate_tags([]) == 0
        assert cache_layer.get_value("key") == "value"

    def test_overwrite_replaces_tags(self, cache_layer):
        """Re-setting a key without tags detaches it from old tags."""
        cache_layer.set("key", "v1", 60, tags=["t"])
        cache_layer.set("key", "v2", 60)

        assert cache_layer.invalidate_tags(["t"]) == 0
        assert cache_layer.get_value("key") == "v2"

    def test_default_ttl(self, tmp_cache_db):
        """Entries without a TTL use the configured default."""
        cache = CacheLayer(tmp_cache_db, default_ttl=60)
        cache.set("key", "value")
        assert cache.get_value("key") == "value"

    def test_delete(self, cache_layer):
        """Deleting reports whether an entry existed."""
        cache_layer.set("key", "value", 60, tags=["t"])
        assert cache_layer.delete("key") is True
        assert cache_layer.delete("key") is False
        assert cache_layer.stats()["entries_by_tag"] == {}

    def test_invalidate_pattern(self, cache_layer):
        """LIKE patterns select entries by key."""
        cache_layer.set("reqres_users:response:1:6", "a", 60)
        cache_layer.set("reqres_users:data_hash:1:6", "b", 60)

        assert cache_layer.invalidate("reqres_users:response:%") == 1
        assert cache_layer.get_value("reqres_users:data_hash:1:6") == "b"

    def test_cleanup_and_clear(self, cache_layer):
        """cleanup removes expired entries only; clear removes all."""
        cache_layer.set("old", 1, 60)
        cache_layer.set("new", 2, 60)
        expire(cache_layer, "old")

        assert cache_layer.cleanup() == 1
        assert cache_layer.get_value("new") == 2
        assert cache_layer.clear() == 1

    def test_stats(self, cache_layer):
        """Stats count entries and tags."""
        cache_layer.set("a", 1, 60, tags=["reqres_users"])
        cache_layer.set("b", 2, CacheLayer.PERMANENT)

        stats = cache_layer.stats()

        assert stats["total_entries"] == 2
        assert stats["valid_entries"] == 2
        assert stats["expired_entries"] == 0
        assert stats["entries_by_tag"] == {"reqres_users": 1}
        assert stats["db_path"] == str(cache_layer.db_path)

    def test_unserializable_value(self, cache_layer):
        """Values that are not JSON raise CacheError."""
        with pytest.raises(CacheError):
            cache_layer.set("key", object(), 60)

    def test_make_key(self):
        """Key parts are joined with colons."""
        assert CacheLayer.make_key("reqres_users", "response", 1, 6) == "reqres_users:response:1:6"


class TestStateStore:
    """Tests for StateStore."""

    def test_default_when_unset(self, state_store):
        """Unset keys return the default."""
        assert state_store.get("reqres_users.api_key", "") == ""
        assert state_store.get("missing") is None

    def test_set_and_get(self, state_store):
        """Values round-trip."""
        state_store.set("reqres_users.api_key", "secret")
        assert state_store.get("reqres_users.api_key", "") == "secret"

    def test_survives_cache_clear(self, tmp_cache_db):
        """Cache maintenance never touches state."""
        state = StateStore(tmp_cache_db)
        cache = CacheLayer(tmp_cache_db)
        state.set("reqres_users.api_key", "secret")

        cache.clear()

        assert StateStore(tmp_cache_db).get("reqres_users.api_key") == "secret"

    def test_delete(self, state_store):
        state_store.set("key", {"a": 1})
        state_store.delete("key")
        assert state_store.get("key") is None
