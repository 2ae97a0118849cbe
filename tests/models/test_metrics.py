"""Tests for WPM and accuracy arithmetic."""

import pytest

from models import metrics


@pytest.mark.parametrize(
    "correct,incorrect,expected",
    [(10, 3, 7), (3, 10, 0), (0, 0, 0)],
)
def test_net_chars(correct: int, incorrect: int, expected: int) -> None:
    assert metrics.net_chars(correct, incorrect) == expected


def test_zero_elapsed_time_yields_zero() -> None:
    assert metrics.net_wpm(50, 0, 0) == 0
    assert metrics.raw_wpm(50, 0) == 0


def test_zero_keystrokes_accuracy_is_zero() -> None:
    assert metrics.accuracy_percent(0, 0) == 0


def test_net_wpm() -> None:
    # 100 net chars = 20 words in half a minute
    assert metrics.net_wpm(110, 10, 0.5) == 40


def test_raw_wpm_ignores_mistakes() -> None:
    assert metrics.raw_wpm(120, 1.0) == 24


def test_rounding_is_half_up() -> None:
    assert metrics.accuracy_percent(5, 8) == 63  # 62.5
    assert metrics.accuracy_percent(1, 8) == 13  # 12.5


def test_capped() -> None:
    assert metrics.capped(450) == 300
    assert metrics.capped(120) == 120
