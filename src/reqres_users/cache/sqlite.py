"""
SQLite-based cache implementation.

Provides persistent caching for API responses with TTL-based expiration,
permanent entries, and cache tags for bulk invalidation.
"""

import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Iterable, Optional

from reqres_users.core.exceptions import CacheError


def default_db_path() -> Path:
    """Location of the shared cache/state database."""
    return Path.home() / ".reqres_users" / "cache.db"


class CacheLayer:
    """SQLite-based cache for API responses.

    Entries expire after their TTL unless stored with ``PERMANENT``.
    Entries may carry tags; ``invalidate_tags`` deletes every entry
    carrying any of the given tags, whatever its expiry.
    """

    DEFAULT_TTL = 300  # 5 minutes
    PERMANENT = -1

    def __init__(
        self,
        db_path: Optional[Path] = None,
        default_ttl: int = DEFAULT_TTL,
    ):
        """Initialize the cache layer.

        Args:
            db_path: Path to SQLite database file. Defaults to ~/.reqres_users/cache.db
            default_ttl: Default time-to-live in seconds for cached entries.
        """
        if db_path is None:
            db_path = default_db_path()

        self.db_path = Path(db_path)
        self.default_ttl = default_ttl

        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_db()

    def _init_db(self) -> None:
        """Initialize the cache database schema."""
        try:
            with self._connection() as conn:
                conn.executescript("""
                    CREATE TABLE IF NOT EXISTS cache (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                        expires_at TIMESTAMP
                    );

                    CREATE TABLE IF NOT EXISTS cache_tags (
                        key TEXT NOT NULL,
                        tag TEXT NOT NULL,
                        PRIMARY KEY (key, tag)
                    );

                    CREATE INDEX IF NOT EXISTS idx_expires
                    ON cache(expires_at);

                    CREATE INDEX IF NOT EXISTS idx_tag
                    ON cache_tags(tag);
                """)
        except sqlite3.Error as e:
            raise CacheError("initialization", str(e))

    @contextmanager
    def _connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection context manager.

        Yields:
            sqlite3.Connection that auto-commits on success.
        """
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise CacheError("database operation", str(e))
        finally:
            conn.close()

    def get_value(self, key: str) -> Optional[Any]:
        """Get cached value if present and not expired.

        Args:
            key: Cache key.

        Returns:
            Cached value or None if not found or expired.
        """
        try:
            with self._connection() as conn:
                row = conn.execute(
                    """
                    SELECT value FROM cache
                    WHERE key = ?
                    AND (expires_at IS NULL OR expires_at > datetime('now'))
                    """,
                    (key,),
                ).fetchone()

                if row:
                    return json.loads(row["value"])
                return None

        except (sqlite3.Error, json.JSONDecodeError) as e:
            raise CacheError("get", str(e))

    def set(
        self,
        key: str,
        value: Any,
        ttl_seconds: Optional[int] = None,
        tags: Iterable[str] = (),
    ) -> None:
        """Store value in cache.

        Args:
            key: Cache key.
            value: Value to cache (must be JSON-serializable).
            ttl_seconds: Time-to-live in seconds. Uses default if not specified,
                never expires if ``PERMANENT``.
            tags: Tags to attach; replaces any tags the key had before.
        """
        if ttl_seconds is None:
            ttl_seconds = self.default_ttl

        try:
            value_json = json.dumps(value)

            with self._connection() as conn:
                if ttl_seconds == self.PERMANENT:
                    conn.execute(
                        """
                        INSERT OR REPLACE INTO cache (key, value, expires_at)
                        VALUES (?, ?, NULL)
                        """,
                        (key, value_json),
                    )
                else:
                    conn.execute(
                        """
                        INSERT OR REPLACE INTO cache (key, value, expires_at)
                        VALUES (?, ?, datetime('now', ? || ' seconds'))
                        """,
                        (key, value_json, str(ttl_seconds)),
                    )

                conn.execute("DELETE FROM cache_tags WHERE key = ?", (key,))
                conn.executemany(
                    "INSERT OR IGNORE INTO cache_tags (key, tag) VALUES (?, ?)",
                    [(key, tag) for tag in tags],
                )

        except (sqlite3.Error, TypeError, ValueError) as e:
            raise CacheError("set", str(e))

    def delete(self, key: str) -> bool:
        """Delete a specific cache entry.

        Returns:
            True if entry was deleted, False if not found.
        """
        try:
            with self._connection() as conn:
                conn.execute("DELETE FROM cache_tags WHERE key = ?", (key,))
                cursor = conn.execute("DELETE FROM cache WHERE key = ?", (key,))
                return cursor.rowcount > 0

        except sqlite3.Error as e:
            raise CacheError("delete", str(e))

    def invalidate_tags(self, tags: Iterable[str]) -> int:
        """Delete every entry carrying any of the given tags.

        Args:
            tags: Cache tags to invalidate.

        Returns:
            Number of entries deleted.
        """
        tags = list(tags)
        if not tags:
            return 0

        placeholders = ", ".join("?" for _ in tags)
        try:
            with self._connection() as conn:
                cursor = conn.execute(
                    f"""
                    DELETE FROM cache WHERE key IN (
                        SELECT key FROM cache_tags WHERE tag IN ({placeholders})
                    )
                    """,
                    tags,
                )
                conn.execute(
                    "DELETE FROM cache_tags WHERE key NOT IN (SELECT key FROM cache)"
                )
                return cursor.rowcount

        except sqlite3.Error as e:
            raise CacheError("invalidate_tags", str(e))

    def invalidate(self, pattern: str) -> int:
        """Invalidate cache entries matching pattern.

        Args:
            pattern: SQL LIKE pattern (e.g., "reqres_users:response:%").

        Returns:
            Number of entries deleted.
        """
        try:
            with self._connection() as conn:
                cursor = conn.execute(
                    "DELETE FROM cache WHERE key LIKE ?",
                    (pattern,),
                )
                conn.execute(
                    "DELETE FROM cache_tags WHERE key NOT IN (SELECT key FROM cache)"
                )
                return cursor.rowcount

        except sqlite3.Error as e:
            raise CacheError("invalidate", str(e))

    def cleanup(self) -> int:
        """Remove expired entries.

        Returns:
            Number of entries removed.
        """
        try:
            with self._connection() as conn:
                cursor = conn.execute(
                    "DELETE FROM cache WHERE expires_at IS NOT NULL"
                    " AND expires_at <= datetime('now')"
                )
                conn.execute(
                    "DELETE FROM cache_tags WHERE key NOT IN (SELECT key FROM cache)"
                )
                return cursor.rowcount

        except sqlite3.Error as e:
            raise CacheError("cleanup", str(e))

    def clear(self) -> int:
        """Clear all cache entries.

        Returns:
            Number of entries removed.
        """
        return self.invalidate("%")

    def stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dict with cache statistics including size and entry counts.
        """
        try:
            with self._connection() as conn:
                total = conn.execute("SELECT COUNT(*) FROM cache").fetchone()[0]

                valid = conn.execute(
                    """
                    SELECT COUNT(*) FROM cache
                    WHERE expires_at IS NULL OR expires_at > datetime('now')
                    """
                ).fetchone()[0]

                permanent = conn.execute(
                    "SELECT COUNT(*) FROM cache WHERE expires_at IS NULL"
                ).fetchone()[0]

                tags = conn.execute(
                    "SELECT tag, COUNT(*) as count FROM cache_tags GROUP BY tag"
                ).fetchall()

                db_size = self.db_path.stat().st_size if self.db_path.exists() else 0

                return {
                    "total_entries": total,
                    "valid_entries": valid,
                    "expired_entries": total - valid,
                    "permanent_entries": permanent,
                    "db_size_bytes": db_size,
                    "db_path": str(self.db_path),
                    "entries_by_tag": {row["tag"]: row["count"] for row in tags},
                }

        except sqlite3.Error as e:
            raise CacheError("stats", str(e))

    @staticmethod
    def make_key(*parts: Any) -> str:
        """Create a cache key from multiple parts.

        Args:
            *parts: Key components to join.

        Returns:
            Colon-separated cache key.
        """
        return ":".join(str(p) for p in parts)
