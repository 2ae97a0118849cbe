"""Helper utilities for devtype.

This package contains small cross-cutting utilities used by the models and
services.
"""

from .debug_util import DebugUtil  # noqa: F401
