"""Debug utilities for controlling debug output across devtype.

Provides a single switch between quiet mode (logging only) and loud mode
(print to stdout), so the session core can trace every transition without
choosing an output channel itself.
"""

import logging
import os

DEBUG_MODE_ENV = "DEVTYPE_DEBUG_MODE"
_MODES = ("quiet", "loud")


class DebugUtil:
    """Manage debug output based on debug mode setting.

    Supports two modes:
    - "quiet": Debug messages are logged at DEBUG level only
    - "loud": Debug messages are printed to stdout
    """

    def __init__(self, mode: str | None = None) -> None:
        """Initialize from an explicit mode or the DEVTYPE_DEBUG_MODE variable.

        Defaults to "quiet" if neither is set or the value is invalid.
        """
        requested = mode if mode is not None else os.environ.get(DEBUG_MODE_ENV, "quiet")
        self._mode = self._normalize(requested)
        self._logger = logging.getLogger("devtype.debug")

    @staticmethod
    def _normalize(mode: str) -> str:
        lowered = mode.lower()
        return lowered if lowered in _MODES else "quiet"

    def debug_mode(self) -> str:
        """Get the current debug mode ("quiet" or "loud")."""
        return self._mode

    def debugMessage(self, *args: object) -> None:
        """Output a debug message based on the current debug mode.

        Args:
            *args: Message parts, joined with spaces.
        """
        message = " ".join(str(arg) for arg in args)
        if not message:
            return
        if self._mode == "loud":
            print("[DEBUG]", message)
        else:
            self._logger.debug(message)

    def set_mode(self, mode: str) -> None:
        """Change the debug mode. Invalid values fall back to "quiet"."""
        self._mode = self._normalize(mode)

    def is_loud(self) -> bool:
        return self._mode == "loud"

    def is_quiet(self) -> bool:
        return self._mode == "quiet"
