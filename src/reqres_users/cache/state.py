"""
Key-value state storage.

Holds site-local values that must never be exported with configuration,
such as the Reqres API key. Shares the SQLite file with the cache but
uses its own table, so cache clears never touch it.
"""

import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Optional

from reqres_users.cache.sqlite import default_db_path
from reqres_users.core.exceptions import CacheError


class StateStore:
    """Persistent string-keyed store of JSON values."""

    def __init__(self, db_path: Optional[Path] = None):
        if db_path is None:
            db_path = default_db_path()

        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with self._connection() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS state (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                """)
        except sqlite3.Error as e:
            raise CacheError("state initialization", str(e))

    @contextmanager
    def _connection(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self.db_path)
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise CacheError("state operation", str(e))
        finally:
            conn.close()

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for key, or default if unset."""
        try:
            with self._connection() as conn:
                row = conn.execute(
                    "SELECT value FROM state WHERE key = ?",
                    (key,),
                ).fetchone()
        except sqlite3.Error as e:
            raise CacheError("state get", str(e))

        if row is None:
            return default
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            raise CacheError("state get", str(e))

    def set(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under key."""
        try:
            value_json = json.dumps(value)
            with self._connection() as conn:
                conn.execute(
                    "INSERT OR REPLACE INTO state (key, value) VALUES (?, ?)",
                    (key, value_json),
                )
        except (sqlite3.Error, TypeError, ValueError) as e:
            raise CacheError("state set", str(e))

    def delete(self, key: str) -> None:
        try:
            with self._connection() as conn:
                conn.execute("DELETE FROM state WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise CacheError("state delete", str(e))
