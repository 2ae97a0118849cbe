"""Session configuration model.

Defines the modes, snippet languages and durations a typing test can be run with.
"""

from __future__ import annotations

import enum
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

# Leaderboard time buckets
STANDARD_DURATIONS = (15, 30, 60, 120)

DEFAULT_DURATION = 30


class TestMode(str, enum.Enum):
    """Timed tests count down; practice runs until stopped."""

    __test__ = False

    TIMED = "timed"
    PRACTICE = "practice"


class Language(str, enum.Enum):
    """Snippet categories a target text can be drawn from."""

    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    RUST = "rust"
    GO = "go"
    JAVA = "java"
    CPP = "cpp"


class SessionConfig(BaseModel):
    """Pydantic model for the settings of one typing test.

    Attributes:
        duration: Test length in seconds, only used in timed mode.
        language: Snippet category.
        mode: Timed or practice.
    """

    duration: int = Field(default=DEFAULT_DURATION, gt=0)
    language: Language = Language.TYPESCRIPT
    mode: TestMode = TestMode.TIMED

    model_config = {
        "extra": "forbid",
        "validate_assignment": True,
    }

    @field_validator("duration", mode="before")
    @classmethod
    def validate_duration(cls, v: object) -> object:
        """Reject booleans, which pydantic would otherwise coerce to 0/1."""
        if isinstance(v, bool):
            raise ValueError("duration must be an integer number of seconds")
        return v

    @property
    def is_standard_duration(self) -> bool:
        """True if the duration is one of the leaderboard buckets."""
        return self.duration in STANDARD_DURATIONS

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with enum values as plain strings."""
        return self.model_dump(mode="json")
