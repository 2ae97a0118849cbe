"""Tests for the progress key-value stores."""

import sqlite3
import threading
from pathlib import Path

import pytest

from db.exceptions import ProgressStoreError, StoreClosedError, StoreSchemaError
from db.progress_store import (
    DEFAULT_DB_PATH,
    InMemoryProgressStore,
    SqliteProgressStore,
    default_db_path,
)


class TestInMemoryProgressStore:
    """Test cases for the dict-backed store."""

    def test_get_missing_returns_none(self) -> None:
        assert InMemoryProgressStore().get("devtype-streak") is None

    def test_set_get_delete(self) -> None:
        store = InMemoryProgressStore()
        store.set("devtype-streak", "2")
        assert store.get("devtype-streak") == "2"
        store.delete("devtype-streak")
        store.delete("devtype-streak")
        assert store.get("devtype-streak") is None

    def test_initial_values_are_copied(self) -> None:
        initial = {"devtype-mode": "timed"}
        store = InMemoryProgressStore(initial)
        store.set("devtype-mode", "practice")
        assert initial == {"devtype-mode": "timed"}


class TestSqliteProgressStore:
    """Test cases for the SQLite-backed store."""

    def test_overwrite_value(self, sqlite_store: SqliteProgressStore) -> None:
        sqlite_store.set("devtype-personal-best", "55")
        sqlite_store.set("devtype-personal-best", "61")
        assert sqlite_store.get("devtype-personal-best") == "61"

    def test_delete(self, sqlite_store: SqliteProgressStore) -> None:
        sqlite_store.set("devtype-streak", "3")
        sqlite_store.delete("devtype-streak")
        assert sqlite_store.get("devtype-streak") is None

    def test_values_persist_across_connections(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "progress.db"
        with SqliteProgressStore(path) as store:
            store.set("devtype-language", "rust")
        with SqliteProgressStore(path) as reopened:
            assert reopened.get("devtype-language") == "rust"

    def test_in_memory_database(self) -> None:
        with SqliteProgressStore(":memory:") as store:
            store.set("devtype-duration", "15")
            assert store.get("devtype-duration") == "15"

    def test_closed_store_raises(self, tmp_path: Path) -> None:
        store = SqliteProgressStore(tmp_path / "progress.db")
        store.close()
        store.close()
        with pytest.raises(StoreClosedError):
            store.get("devtype-streak")

    def test_missing_table_translated(self, sqlite_store: SqliteProgressStore) -> None:
        sqlite_store._conn.execute("DROP TABLE progress")
        with pytest.raises(StoreSchemaError):
            sqlite_store.get("devtype-streak")

    def test_get_waits_for_writer_lock(self, sqlite_store: SqliteProgressStore) -> None:
        sqlite_store.set("devtype-streak", "4")
        seen = []
        reader = threading.Thread(target=lambda: seen.append(sqlite_store.get("devtype-streak")))
        with sqlite_store._lock:
            reader.start()
            reader.join(timeout=0.2)
            assert reader.is_alive()
            assert seen == []
        reader.join(timeout=5)
        assert seen == ["4"]

    def test_sqlite_errors_wrapped(self, sqlite_store: SqliteProgressStore) -> None:
        with pytest.raises(ProgressStoreError) as excinfo:
            sqlite_store.set("devtype-streak", None)  # type: ignore[arg-type]
        assert isinstance(excinfo.value.__cause__, sqlite3.Error)


def test_default_db_path_honours_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DEVTYPE_DB_PATH", str(tmp_path / "custom.db"))
    assert default_db_path() == tmp_path / "custom.db"
    monkeypatch.delenv("DEVTYPE_DB_PATH")
    assert default_db_path() == DEFAULT_DB_PATH
