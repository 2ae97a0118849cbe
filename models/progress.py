"""Cross-session progress: daily streak, personal best and saved settings.

`ProgressManager` is the only component that talks to the injected
`ProgressStore`; the typing session calls it at finalize time and the
practice controller calls it at load time.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, Field, ValidationError

from db.interfaces import ProgressStore
from db.progress_store import InMemoryProgressStore
from models.typing_config import Language, SessionConfig, TestMode

logger = logging.getLogger(__name__)

STREAK_KEY = "devtype-streak"
LAST_PRACTICE_KEY = "devtype-last-practice"
PERSONAL_BEST_KEY = "devtype-personal-best"
DURATION_KEY = "devtype-duration"
LANGUAGE_KEY = "devtype-language"
MODE_KEY = "devtype-mode"


class StreakState(BaseModel):
    """Consecutive-day practice count and the ISO timestamp of the last practice."""

    daily_streak: int = Field(default=0, ge=0)
    last_practice_date: Optional[str] = None

    model_config = {"frozen": True}


def parse_practice_date(value: str) -> datetime.date:
    """Calendar day (device-local) of a stored ISO-8601 timestamp.

    Aware timestamps (including a trailing "Z") are converted to local time
    first, naive ones are taken as already local.
    """
    parsed = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.date()


class ProgressManager:
    """Read and write streak, personal best and session settings.

    Args:
        store: Key-value persistence port. Defaults to an in-memory store.
        now: Source of the current local datetime.
    """

    def __init__(
        self,
        store: Optional[ProgressStore] = None,
        now: Callable[[], datetime.datetime] = datetime.datetime.now,
    ) -> None:
        self.store: ProgressStore = store if store is not None else InMemoryProgressStore()
        self._now = now

    def _read_int(self, key: str) -> Optional[int]:
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring non-integer value %r stored under %s", raw, key)
            return None

    # Personal best
    def load_personal_best(self) -> int:
        """Stored best timed-mode WPM, 0 if none."""
        value = self._read_int(PERSONAL_BEST_KEY)
        return value if value is not None and value >= 0 else 0

    def save_personal_best(self, wpm: int) -> None:
        self.store.set(PERSONAL_BEST_KEY, str(wpm))

    # Streak
    def load_streak(self) -> StreakState:
        """Rehydrate the streak, dropping it if the last practice was before yesterday.

        A broken streak is reset to 0 and its keys are removed from the store.
        """
        streak = self._read_int(STREAK_KEY)
        saved_date = self.store.get(LAST_PRACTICE_KEY)
        if streak is None or not saved_date:
            return StreakState()

        try:
            last_day = parse_practice_date(saved_date)
        except ValueError:
            logger.warning("Ignoring unparseable practice date %r", saved_date)
            last_day = None

        today = self._now().date()
        yesterday = today - datetime.timedelta(days=1)
        if last_day in (today, yesterday):
            return StreakState(daily_streak=max(0, streak), last_practice_date=saved_date)

        logger.info("Daily streak of %d broken (last practice %s)", streak, saved_date)
        self.store.delete(STREAK_KEY)
        self.store.delete(LAST_PRACTICE_KEY)
        return StreakState()

    def update_streak(self, current: StreakState) -> StreakState:
        """Count today's practice towards the streak.

        Only checks whether the last practice fell on a different calendar day;
        gaps longer than one day are caught by `load_streak`, not here.
        """
        now = self._now()
        today_iso = now.isoformat()

        if current.last_practice_date:
            try:
                last_day = parse_practice_date(current.last_practice_date)
            except ValueError:
                last_day = None
            if last_day == now.date():
                return current
            updated = StreakState(daily_streak=current.daily_streak + 1, last_practice_date=today_iso)
        else:
            updated = StreakState(daily_streak=1, last_practice_date=today_iso)

        self.store.set(STREAK_KEY, str(updated.daily_streak))
        self.store.set(LAST_PRACTICE_KEY, today_iso)
        return updated

    # Settings
    def save_settings(self, config: SessionConfig, fields: Optional[set[str]] = None) -> None:
        """Persist the given config fields (all three by default)."""
        wanted = fields if fields is not None else {"duration", "language", "mode"}
        if "duration" in wanted:
            self.store.set(DURATION_KEY, str(config.duration))
        if "language" in wanted:
            self.store.set(LANGUAGE_KEY, config.language.value)
        if "mode" in wanted:
            self.store.set(MODE_KEY, config.mode.value)

    def load_settings(self, defaults: Optional[SessionConfig] = None) -> SessionConfig:
        """Saved configuration merged over defaults; invalid saved values are skipped."""
        base = defaults if defaults is not None else SessionConfig()
        updates: Dict[str, Any] = {}

        duration = self._read_int(DURATION_KEY)
        if duration is not None and duration > 0:
            updates["duration"] = duration

        language = self.store.get(LANGUAGE_KEY)
        if language in {lang.value for lang in Language}:
            updates["language"] = Language(language)
        elif language is not None:
            logger.warning("Ignoring unknown saved language %r", language)

        mode = self.store.get(MODE_KEY)
        if mode in {m.value for m in TestMode}:
            updates["mode"] = TestMode(mode)
        elif mode is not None:
            logger.warning("Ignoring unknown saved mode %r", mode)

        if not updates:
            return base
        try:
            return SessionConfig(**{**base.model_dump(), **updates})
        except ValidationError:
            logger.warning("Saved settings %r rejected, keeping defaults", updates)
            return base
