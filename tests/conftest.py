"""Pytest configuration for the test suite."""

import datetime
import sys
from pathlib import Path
from typing import Dict, Generator

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from db.progress_store import InMemoryProgressStore, SqliteProgressStore
from models.progress import ProgressManager
from models.typing_config import SessionConfig, TestMode
from models.typing_session import TypingSession

START_DATETIME = datetime.datetime(2024, 3, 4, 9, 0, 0)


class FakeClock:
    """Controllable wall clock serving both milliseconds and local datetimes."""

    def __init__(self, start: datetime.datetime = START_DATETIME) -> None:
        self.start = start
        self.offset_ms = 0

    def ms(self) -> float:
        return 1_700_000_000_000 + self.offset_ms

    def now(self) -> datetime.datetime:
        return self.start + datetime.timedelta(milliseconds=self.offset_ms)

    def advance(self, ms: int = 0, days: int = 0) -> None:
        self.offset_ms += ms + days * 86_400_000


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryProgressStore:
    return InMemoryProgressStore()


@pytest.fixture
def progress(store: InMemoryProgressStore, clock: FakeClock) -> ProgressManager:
    return ProgressManager(store, now=clock.now)


@pytest.fixture
def make_session(progress: ProgressManager, clock: FakeClock):
    """Factory for sessions sharing the fake clock and in-memory store."""

    def _make(duration: int = 30, mode: TestMode = TestMode.TIMED, target: str = "") -> TypingSession:
        session = TypingSession(
            config=SessionConfig(duration=duration, mode=mode),
            progress=progress,
            clock=clock.ms,
        )
        if target:
            session.assign_target(target)
        return session

    return _make


@pytest.fixture
def sqlite_store(tmp_path: Path) -> Generator[SqliteProgressStore, None, None]:
    store = SqliteProgressStore(tmp_path / "progress.db")
    try:
        yield store
    finally:
        store.close()


@pytest.fixture
def saved_values() -> Dict[str, str]:
    return {
        "devtype-duration": "60",
        "devtype-language": "python",
        "devtype-mode": "practice",
    }
