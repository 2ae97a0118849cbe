"""TypingSession: state machine for one timed or practice typing test.

The session owns the target snippet, the user's running input, correctness
counters, replay capture and live/final speed metrics. Cross-session
progress (personal best, daily streak) is read and written through an
injected `ProgressManager`, so the state machine itself performs no I/O.

Lifecycle::

    idle --assign_target--> configured --start--> active --finalize--> complete
                                 ^                   |                    |
                                 +------- reset -----+--------------------+

``paused`` is a flag inside ``active``: it stops `tick` but input is still
captured.
"""

from __future__ import annotations

import enum
import logging
import math
import time
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel

from helpers.debug_util import DebugUtil
from models import metrics
from models.progress import ProgressManager, StreakState
from models.replay import ReplayFrame
from models.typing_config import Language, SessionConfig, TestMode

logger = logging.getLogger(__name__)

# Live WPM is held back until this much time has passed.
LIVE_WPM_MIN_ELAPSED_MS = 3000


def wall_clock_ms() -> float:
    return time.time() * 1000


class SessionState(str, enum.Enum):
    IDLE = "idle"
    CONFIGURED = "configured"
    ACTIVE = "active"
    COMPLETE = "complete"


class SessionStateError(RuntimeError):
    """Raised when an operation is called in a state that does not allow it."""

    def __init__(self, operation: str, state: SessionState, detail: str = "") -> None:
        self.operation = operation
        self.state = state
        message = f"Cannot {operation} while session is {state.value}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class WpmSample(BaseModel):
    """One point of the post-test performance graph."""

    second: int
    wpm: int
    raw: int
    errors: int

    model_config = {"frozen": True}


class SessionResults(BaseModel):
    """Final figures, computed once when the session completes."""

    wpm: int
    accuracy: int
    is_new_personal_best: bool
    daily_streak: int

    model_config = {"frozen": True}


class TypingSession:
    """Owns all state for one typing attempt.

    Args:
        config: Initial configuration. Defaults to a 30 second timed test.
        progress: Persistence for personal best, streak and settings.
        clock: Wall clock in milliseconds. Elapsed time is always derived
            from it, never from counting ticks.
        debug_util: Debug output switch.
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        progress: Optional[ProgressManager] = None,
        clock: Callable[[], float] = wall_clock_ms,
        debug_util: Optional[DebugUtil] = None,
    ) -> None:
        self.config = config if config is not None else SessionConfig()
        self.progress = progress if progress is not None else ProgressManager()
        self._clock = clock
        self.debug_util = debug_util if debug_util is not None else DebugUtil()

        self.state = SessionState.IDLE
        self.target_text = ""

        # Cross-session progress, untouched by reset()
        self.personal_best = 0
        self.streak = StreakState()

        self._clear_run()

    def _clear_run(self) -> None:
        self.is_paused = False
        self.time_remaining = self.config.duration
        self.user_input = ""
        self.correct_chars = 0
        self.incorrect_chars = 0
        self.total_keystrokes = 0
        self.key_errors: Dict[str, int] = {}
        self.live_wpm = 0
        self.start_time: Optional[float] = None
        self.replay_frames: List[ReplayFrame] = []
        self.wpm_history: List[WpmSample] = []
        self.results: Optional[SessionResults] = None

    # Read-only projections
    @property
    def duration(self) -> int:
        return self.config.duration

    @property
    def language(self) -> Language:
        return self.config.language

    @property
    def mode(self) -> TestMode:
        return self.config.mode

    @property
    def current_index(self) -> int:
        return len(self.user_input)

    @property
    def is_test_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    @property
    def is_test_complete(self) -> bool:
        return self.state is SessionState.COMPLETE

    @property
    def daily_streak(self) -> int:
        return self.streak.daily_streak

    @property
    def wpm(self) -> int:
        return self.results.wpm if self.results else 0

    @property
    def accuracy(self) -> int:
        return self.results.accuracy if self.results else 0

    @property
    def is_new_personal_best(self) -> bool:
        return self.results.is_new_personal_best if self.results else False

    def _elapsed_ms(self) -> float:
        if self.start_time is None:
            return 0.0
        return max(0.0, self._clock() - self.start_time)

    def _require(self, operation: str, *allowed: SessionState) -> None:
        if self.state not in allowed:
            raise SessionStateError(operation, self.state)

    # Configuration and progress
    def configure(
        self,
        duration: Optional[int] = None,
        language: Optional[Language | str] = None,
        mode: Optional[TestMode | str] = None,
    ) -> SessionConfig:
        """Change any of duration, language and mode, and persist the changed fields.

        Raises:
            SessionStateError: while a test is running.
            pydantic.ValidationError: for an invalid value.
        """
        if self.state is SessionState.ACTIVE:
            raise SessionStateError("configure", self.state, "configuration is fixed during a run")

        updates = {
            name: value
            for name, value in (("duration", duration), ("language", language), ("mode", mode))
            if value is not None
        }
        if not updates:
            return self.config

        self.config = SessionConfig(**{**self.config.model_dump(), **updates})
        if "duration" in updates:
            self.time_remaining = self.config.duration
        self.progress.save_settings(self.config, set(updates))
        self.debug_util.debugMessage("Session configured:", self.config.to_dict())
        return self.config

    def load_persisted_progress(self, personal_best: int, streak: StreakState) -> None:
        """Install previously persisted personal best and streak."""
        self.personal_best = max(0, personal_best)
        self.streak = streak

    def load_progress(self) -> None:
        """Rehydrate personal best and streak from the progress store."""
        self.load_persisted_progress(self.progress.load_personal_best(), self.progress.load_streak())

    # Transitions
    def assign_target(self, text: str) -> None:
        """Replace the snippet and clear the input; counters are kept.

        Calling this mid-run continues the same timed window on a new snippet.
        """
        self.target_text = text
        self.user_input = ""
        if self.state is SessionState.IDLE:
            self.state = SessionState.CONFIGURED
        self.debug_util.debugMessage(f"Assigned target of {len(text)} chars in state {self.state.value}")

    def start(self) -> None:
        """Begin the run and start the speed clock.

        Starting an already active session restarts the clock without clearing
        counters; call `reset` first for a clean run.
        """
        if self.state is SessionState.ACTIVE:
            logger.warning("start() on an active session restarts the speed clock")
        else:
            self._require("start", SessionState.CONFIGURED)
        self.start_time = self._clock()
        self.is_paused = False
        self.live_wpm = 0
        self.state = SessionState.ACTIVE
        self.debug_util.debugMessage(f"Session started at {self.start_time}")

    def pause(self) -> None:
        self._require("pause", SessionState.ACTIVE)
        self.is_paused = True

    def resume(self) -> None:
        self._require("resume", SessionState.ACTIVE)
        self.is_paused = False

    def apply_input(self, new_input: str) -> None:
        """Record an input change from the driver.

        New characters are compared to the target at their position; deletions
        only move the cursor. Every call, growth or deletion, is captured as a
        replay frame. Accepted while paused.
        """
        self._require("apply input", SessionState.ACTIVE)

        timestamp = int(round(self._elapsed_ms()))
        self.replay_frames.append(ReplayFrame(input=new_input, timestamp=timestamp))

        previous = self.user_input
        if len(new_input) > len(previous):
            correct = 0
            incorrect = 0
            for index in range(len(previous), len(new_input)):
                expected = self.target_text[index] if index < len(self.target_text) else None
                if new_input[index] == expected:
                    correct += 1
                else:
                    incorrect += 1
                    if expected is not None:
                        self.key_errors[expected] = self.key_errors.get(expected, 0) + 1
            self.correct_chars += correct
            self.incorrect_chars += incorrect
            self.total_keystrokes += len(new_input) - len(previous)

        self.user_input = new_input
        self.update_live_wpm()

    def update_live_wpm(self) -> None:
        """Refresh the running net WPM once enough time has passed to be meaningful."""
        if self.start_time is None:
            return
        elapsed_ms = self._elapsed_ms()
        if elapsed_ms < LIVE_WPM_MIN_ELAPSED_MS:
            return
        wpm = metrics.net_wpm(self.correct_chars, self.incorrect_chars, elapsed_ms / 60000)
        self.live_wpm = metrics.capped(wpm)

    def tick(self) -> None:
        """One-second timer callback from the driver.

        Records a WPM history sample for the current elapsed second and, in
        timed mode, counts down and finalizes when time runs out.
        """
        self._require("tick", SessionState.ACTIVE)
        if self.is_paused:
            raise SessionStateError("tick", self.state, "session is paused")

        elapsed_seconds = math.floor(self._elapsed_ms() / 1000)
        if elapsed_seconds > 0 and not any(s.second == elapsed_seconds for s in self.wpm_history):
            elapsed_minutes = elapsed_seconds / 60
            self.wpm_history.append(
                WpmSample(
                    second=elapsed_seconds,
                    wpm=metrics.capped(
                        metrics.net_wpm(self.correct_chars, self.incorrect_chars, elapsed_minutes)
                    ),
                    raw=metrics.capped(metrics.raw_wpm(self.total_keystrokes, elapsed_minutes)),
                    errors=self.incorrect_chars,
                )
            )

        if self.mode is TestMode.TIMED:
            if self.time_remaining <= 1:
                self.time_remaining = 0
                self.finalize()
                return
            self.time_remaining -= 1
        self.update_live_wpm()

    def finalize(self) -> SessionResults:
        """Compute the results and complete the session. Happens exactly once per run.

        Raises:
            SessionStateError: if the session is not active, including when it
                has already been finalized.
        """
        self._require("finalize", SessionState.ACTIVE)

        if self.mode is TestMode.TIMED:
            elapsed_seconds: float = self.duration - self.time_remaining
        else:
            elapsed_seconds = self._elapsed_ms() / 1000

        wpm = metrics.net_wpm(self.correct_chars, self.incorrect_chars, elapsed_seconds / 60)
        accuracy = metrics.accuracy_percent(self.correct_chars, self.total_keystrokes)

        is_new_best = self.mode is TestMode.TIMED and wpm > self.personal_best
        if is_new_best:
            self.personal_best = wpm
            self.progress.save_personal_best(wpm)

        self.streak = self.progress.update_streak(self.streak)
        self.is_paused = False
        self.state = SessionState.COMPLETE
        self.results = SessionResults(
            wpm=wpm,
            accuracy=accuracy,
            is_new_personal_best=is_new_best,
            daily_streak=self.streak.daily_streak,
        )
        logger.info(
            "Session complete: %d wpm, %d%% accuracy (%s, %ss)",
            wpm,
            accuracy,
            self.mode.value,
            self.duration,
        )
        return self.results

    def reset(self) -> None:
        """Clear the run and return to configured; config and progress are kept."""
        self._require("reset", SessionState.CONFIGURED, SessionState.ACTIVE, SessionState.COMPLETE)
        self._clear_run()
        self.state = SessionState.CONFIGURED
        self.debug_util.debugMessage("Session reset")
