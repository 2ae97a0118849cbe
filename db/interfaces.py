"""Shared persistence interface definitions.

This module provides a lightweight typing Protocol for the key-value store the
typing session persists its cross-session progress through, so the session
can depend on an abstraction instead of a concrete storage medium. This keeps
the state machine free of I/O in tests.
"""

from __future__ import annotations

from typing import Optional, Protocol


class ProgressStore(Protocol):
    """Protocol for string key-value persistence used by `ProgressManager`.

    Implemented by `db.progress_store.InMemoryProgressStore` and
    `db.progress_store.SqliteProgressStore`.
    """

    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None when the key is absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Insert or overwrite the value for key."""
        ...

    def delete(self, key: str) -> None:
        """Remove key; removing an absent key is not an error."""
        ...
