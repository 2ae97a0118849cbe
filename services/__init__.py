"""Service initialization module.

Factory helpers to create and wire the typing session with its collaborators.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from db.progress_store import SqliteProgressStore
from models.progress import ProgressManager
from models.typing_session import TypingSession
from services.practice_controller import PracticeController
from services.score_submitter import ScoreSubmitter


def init_services(
    db_path: Optional[Union[str, Path]] = None,
    api_url: Optional[str] = None,
) -> PracticeController:
    """Create a controller around a session persisted to SQLite.

    Example:
        controller = init_services("path/to/progress.db")
        controller.load()
    """
    store = SqliteProgressStore(db_path)
    session = TypingSession(progress=ProgressManager(store))
    return PracticeController(session, submitter=ScoreSubmitter(base_url=api_url))
