"""Speed and accuracy arithmetic shared by the session and its consumers.

A "word" is five characters. Every ratio returns 0 when its denominator is
zero so callers never see NaN or a ZeroDivisionError.
"""

import math

CHARS_PER_WORD = 5
WPM_CAP = 300


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (builtin round() is banker's)."""
    return int(math.floor(value + 0.5))


def net_chars(correct_chars: int, incorrect_chars: int) -> int:
    """Error-penalized character count, never negative."""
    return max(0, correct_chars - incorrect_chars)


def words_per_minute(chars: int, elapsed_minutes: float) -> int:
    """Round (chars / 5) / minutes, or 0 when no time has elapsed."""
    if elapsed_minutes <= 0:
        return 0
    return round_half_up((chars / CHARS_PER_WORD) / elapsed_minutes)


def capped(wpm: int, cap: int = WPM_CAP) -> int:
    """Clamp transient spikes from very short elapsed windows."""
    return min(wpm, cap)


def net_wpm(correct_chars: int, incorrect_chars: int, elapsed_minutes: float) -> int:
    """Net words per minute (mistakes subtract from correct characters)."""
    return words_per_minute(net_chars(correct_chars, incorrect_chars), elapsed_minutes)


def raw_wpm(total_keystrokes: int, elapsed_minutes: float) -> int:
    """Words per minute counting every keystroke, right or wrong."""
    return words_per_minute(total_keystrokes, elapsed_minutes)


def accuracy_percent(correct_chars: int, total_keystrokes: int) -> int:
    """Rounded percentage of keystrokes that were correct."""
    if total_keystrokes <= 0:
        return 0
    return round_half_up(100 * correct_chars / total_keystrokes)
