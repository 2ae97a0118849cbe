"""Replay frames and their playback.

A `ReplayFrame` is recorded for every input event of a typing session. The
`ReplayPlayer` walks the recorded frames at a chosen speed multiplier and
reports, for each frame, how long to wait before showing the next one. It
never touches the session that produced the frames.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from models.metrics import words_per_minute

MIN_FRAME_DELAY_MS = 10
PLAYBACK_SPEEDS = (1, 2, 4)


class ReplayFrame(BaseModel):
    """Snapshot of the user's input at a point in the run."""

    input: str
    timestamp: int = Field(..., ge=0, description="Milliseconds since the session started")

    model_config = {"frozen": True}


def replay_wpm(frame: ReplayFrame) -> int:
    """Speed shown during playback: every visible character counts."""
    return words_per_minute(len(frame.input), frame.timestamp / 60000)


class ReplayPlayer:
    """Cursor over a recorded frame sequence.

    Args:
        frames: Frames in recording order.
        speed: Positive integer playback multiplier.
    """

    def __init__(self, frames: Sequence[ReplayFrame], speed: int = 1) -> None:
        self.frames: List[ReplayFrame] = list(frames)
        self.speed = speed
        self.position = 0
        self.is_playing = False

    @property
    def speed(self) -> int:
        return self._speed

    @speed.setter
    def speed(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError("Playback speed must be a positive integer")
        self._speed = value

    @property
    def current_frame(self) -> Optional[ReplayFrame]:
        if self.position < len(self.frames):
            return self.frames[self.position]
        return None

    @property
    def display_input(self) -> str:
        """Text to render at the current position."""
        frame = self.current_frame
        return frame.input if frame is not None else ""

    @property
    def current_wpm(self) -> int:
        frame = self.current_frame
        return replay_wpm(frame) if frame is not None else 0

    @property
    def at_end(self) -> bool:
        return self.position >= len(self.frames) - 1

    def delay_to_next(self) -> Optional[int]:
        """Milliseconds until the next frame at the current speed, None on the last frame."""
        if self.position + 1 >= len(self.frames):
            return None
        current = self.frames[self.position]
        following = self.frames[self.position + 1]
        delay = (following.timestamp - current.timestamp) / self.speed
        return int(max(delay, MIN_FRAME_DELAY_MS))

    def play(self) -> None:
        """Start playing, rewinding first if already at the end."""
        if self.at_end:
            self.position = 0
        self.is_playing = bool(self.frames)

    def pause(self) -> None:
        self.is_playing = False

    def rewind(self) -> None:
        self.is_playing = False
        self.position = 0

    def advance(self) -> Optional[ReplayFrame]:
        """Move to the next frame; stops playing after the last one."""
        if self.position + 1 >= len(self.frames):
            self.is_playing = False
            return None
        self.position += 1
        if self.position + 1 >= len(self.frames):
            self.is_playing = False
        return self.frames[self.position]

    def steps(self) -> Iterator[Tuple[ReplayFrame, Optional[int]]]:
        """Yield (frame, delay_ms) from the start; the last frame has no delay."""
        for index, frame in enumerate(self.frames):
            if index + 1 < len(self.frames):
                delay = (self.frames[index + 1].timestamp - frame.timestamp) / self.speed
                yield frame, int(max(delay, MIN_FRAME_DELAY_MS))
            else:
                yield frame, None
