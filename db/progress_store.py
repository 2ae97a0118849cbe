"""Key-value stores backing streak, personal best and saved settings.

Two implementations of `db.interfaces.ProgressStore`:

- `InMemoryProgressStore`: a dict, for tests and throwaway sessions.
- `SqliteProgressStore`: a single ``progress`` table in a local SQLite file,
  the device-local equivalent of browser storage.
"""

import logging
import os
import sqlite3
import threading
from pathlib import Path
from typing import Dict, NoReturn, Optional, Union

from .exceptions import ProgressStoreError, StoreClosedError, StoreConnectionError, StoreSchemaError

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".devtype" / "progress.db"


def default_db_path() -> Path:
    """Resolve the SQLite file path, honouring DEVTYPE_DB_PATH."""
    env_path = os.environ.get("DEVTYPE_DB_PATH")
    return Path(env_path) if env_path else DEFAULT_DB_PATH


class InMemoryProgressStore:
    """Dict-backed store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def as_dict(self) -> Dict[str, str]:
        """Snapshot of everything stored."""
        return dict(self._values)


class SqliteProgressStore:
    """SQLite-backed store with one row per key.

    Args:
        db_path: File path, or ":memory:". Defaults to `default_db_path()`.
    """

    def __init__(self, db_path: Optional[Union[str, Path]] = None) -> None:
        path = db_path if db_path is not None else default_db_path()
        self.db_path = str(path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn: Optional[sqlite3.Connection] = sqlite3.connect(
                self.db_path, check_same_thread=False
            )
        except sqlite3.Error as e:
            raise StoreConnectionError(f"Failed to open progress store at {self.db_path}: {e}") from e
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._setup()

    def _setup(self) -> None:
        conn = self._connection()
        try:
            with conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS progress (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                    """
                )
        except sqlite3.Error as e:
            self._translate_and_raise(e)

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreClosedError(f"Progress store {self.db_path} is closed")
        return self._conn

    def _translate_and_raise(self, e: sqlite3.Error) -> NoReturn:
        """Translate sqlite3 errors to store exceptions. Always raises."""
        if isinstance(e, sqlite3.OperationalError):
            error_msg = str(e).lower()
            if "no such table" in error_msg or "no such column" in error_msg:
                raise StoreSchemaError(f"Schema error: {e}") from e
            if "unable to open" in error_msg:
                raise StoreConnectionError(f"Failed to open progress store: {e}") from e
        raise ProgressStoreError(f"Progress store operation failed: {e}") from e

    def get(self, key: str) -> Optional[str]:
        conn = self._connection()
        try:
            with self._lock:
                row = conn.execute("SELECT value FROM progress WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            self._translate_and_raise(e)
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        conn = self._connection()
        try:
            with self._lock, conn:
                conn.execute(
                    "INSERT INTO progress(key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                    (key, value),
                )
        except sqlite3.Error as e:
            self._translate_and_raise(e)

    def delete(self, key: str) -> None:
        conn = self._connection()
        try:
            with self._lock, conn:
                conn.execute("DELETE FROM progress WHERE key = ?", (key,))
        except sqlite3.Error as e:
            self._translate_and_raise(e)

    def close(self) -> None:
        if self._conn is None:
            return
        with self._lock:
            self._conn.close()
            self._conn = None
        logger.debug("Closed progress store %s", self.db_path)

    def __enter__(self) -> "SqliteProgressStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
