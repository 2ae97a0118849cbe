"""
Persistence package for devtype.
This package contains the progress store port and its implementations.
"""

from .interfaces import ProgressStore
from .progress_store import InMemoryProgressStore, SqliteProgressStore

__all__ = ["InMemoryProgressStore", "ProgressStore", "SqliteProgressStore"]
