"""Local SQLite key-value store

Holds one serialized ProfileState per profile plus the ordered list of known
profile names. Values are JSON text; callers decide how to decode them.
"""

import sqlite3
import logging
from pathlib import Path
from typing import Optional, Union

from questboard.config import STORE_PATH
from questboard.exceptions import wrap_external_exception

logger = logging.getLogger(__name__)

IN_MEMORY = ":memory:"


class LocalStore:
    """Key-value store backed by a single SQLite table"""

    def __init__(self, path: Union[str, Path] = STORE_PATH):
        self.path = str(path)
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> None:
        """Open the database and create the table if needed"""
        if self._conn is not None:
            return

        if self.path != IN_MEMORY:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"Opening local store at {self.path}")
        try:
            self._conn = sqlite3.connect(self.path, check_same_thread=False)
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            self._conn.commit()
        except sqlite3.Error as e:
            self._conn = None
            raise wrap_external_exception(e, operation="open_store", context={"path": self.path})

    def close(self) -> None:
        """Flush and close the database"""
        if self._conn is None:
            return
        logger.info("Closing local store")
        try:
            self._conn.commit()
        finally:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "LocalStore":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Local store not opened")
        return self._conn

    def get(self, key: str) -> Optional[str]:
        """
        Get raw value for key

        Returns:
            Stored text or None if the key is absent
        """
        conn = self._connection()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise wrap_external_exception(e, operation="get", context={"key": key})
        return row[0] if row else None

    def put(self, key: str, value: str) -> None:
        """Insert or replace value for key"""
        conn = self._connection()
        try:
            conn.execute(
                """
                INSERT INTO kv (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP
                """,
                (key, value),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise wrap_external_exception(e, operation="put", context={"key": key})
        logger.debug(f"Stored {key} ({len(value)} bytes)")

    def contains(self, key: str) -> bool:
        return self.get(key) is not None

