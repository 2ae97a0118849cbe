"""
Models package for devtype.

This package contains the typing session state machine and the models and
arithmetic it is built from.
"""

__all__ = [
    "key_errors",
    "metrics",
    "progress",
    "replay",
    "typing_config",
    "typing_session",
]
