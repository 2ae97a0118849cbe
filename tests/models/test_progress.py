"""Tests for ProgressManager: streak, personal best and saved settings."""

import datetime

import pytest

from db.progress_store import InMemoryProgressStore
from models.progress import (
    LAST_PRACTICE_KEY,
    PERSONAL_BEST_KEY,
    STREAK_KEY,
    ProgressManager,
    StreakState,
    parse_practice_date,
)
from models.typing_config import Language, SessionConfig, TestMode


def manager_at(store: InMemoryProgressStore, when: datetime.datetime) -> ProgressManager:
    return ProgressManager(store, now=lambda: when)


TODAY = datetime.datetime(2024, 3, 4, 18, 30)


# --- Personal best ---
def test_personal_best_defaults_to_zero(store) -> None:
    assert manager_at(store, TODAY).load_personal_best() == 0


def test_personal_best_round_trip(store) -> None:
    manager = manager_at(store, TODAY)
    manager.save_personal_best(91)
    assert store.get(PERSONAL_BEST_KEY) == "91"
    assert manager.load_personal_best() == 91


@pytest.mark.parametrize("raw", ["fast", "", "-5"])
def test_corrupt_personal_best_ignored(store, raw: str) -> None:
    store.set(PERSONAL_BEST_KEY, raw)
    assert manager_at(store, TODAY).load_personal_best() == 0


# --- Streak update ---
def test_first_practice_starts_streak(store) -> None:
    streak = manager_at(store, TODAY).update_streak(StreakState())
    assert streak.daily_streak == 1
    assert streak.last_practice_date == TODAY.isoformat()
    assert store.get(STREAK_KEY) == "1"
    assert store.get(LAST_PRACTICE_KEY) == TODAY.isoformat()


def test_same_day_practice_leaves_streak(store) -> None:
    current = StreakState(daily_streak=3, last_practice_date=TODAY.replace(hour=8).isoformat())
    assert manager_at(store, TODAY).update_streak(current) == current
    assert store.as_dict() == {}


def test_next_day_practice_increments(store) -> None:
    current = StreakState(daily_streak=3, last_practice_date=(TODAY - datetime.timedelta(days=1)).isoformat())
    streak = manager_at(store, TODAY).update_streak(current)
    assert streak.daily_streak == 4
    assert store.get(STREAK_KEY) == "4"


def test_gap_is_not_checked_at_update_time(store) -> None:
    # Only load_streak checks for a missed day
    current = StreakState(daily_streak=3, last_practice_date=(TODAY - datetime.timedelta(days=5)).isoformat())
    assert manager_at(store, TODAY).update_streak(current).daily_streak == 4


# --- Streak load ---
@pytest.mark.parametrize("days_ago", [0, 1])
def test_recent_streak_survives_load(store, days_ago: int) -> None:
    saved = (TODAY - datetime.timedelta(days=days_ago)).isoformat()
    store.set(STREAK_KEY, "6")
    store.set(LAST_PRACTICE_KEY, saved)
    streak = manager_at(store, TODAY).load_streak()
    assert streak == StreakState(daily_streak=6, last_practice_date=saved)


def test_stale_streak_is_reset_and_removed(store) -> None:
    store.set(STREAK_KEY, "6")
    store.set(LAST_PRACTICE_KEY, (TODAY - datetime.timedelta(days=2)).isoformat())
    streak = manager_at(store, TODAY).load_streak()
    assert streak == StreakState()
    assert store.as_dict() == {}


def test_partial_streak_record_loads_default(store) -> None:
    store.set(STREAK_KEY, "6")
    assert manager_at(store, TODAY).load_streak() == StreakState()
    assert store.get(STREAK_KEY) == "6"


def test_utc_timestamp_with_z_suffix_parses() -> None:
    day = parse_practice_date("2024-03-04T12:00:00.000Z")
    expected = datetime.datetime(2024, 3, 4, 12, tzinfo=datetime.timezone.utc).astimezone().date()
    assert day == expected


# --- Settings ---
def test_load_settings_without_saved_values_returns_defaults(store) -> None:
    assert manager_at(store, TODAY).load_settings() == SessionConfig()


def test_load_settings_applies_saved_values(saved_values) -> None:
    manager = manager_at(InMemoryProgressStore(saved_values), TODAY)
    config = manager.load_settings()
    assert config == SessionConfig(duration=60, language=Language.PYTHON, mode=TestMode.PRACTICE)


def test_load_settings_skips_invalid_values(saved_values) -> None:
    saved_values.update({"devtype-duration": "-1", "devtype-language": "cobol"})
    manager = manager_at(InMemoryProgressStore(saved_values), TODAY)
    config = manager.load_settings()
    assert config.duration == 30
    assert config.language is Language.TYPESCRIPT
    assert config.mode is TestMode.PRACTICE


def test_save_settings_writes_all_fields(store) -> None:
    manager_at(store, TODAY).save_settings(SessionConfig(duration=120, language=Language.GO))
    assert store.as_dict() == {
        "devtype-duration": "120",
        "devtype-language": "go",
        "devtype-mode": "timed",
    }
