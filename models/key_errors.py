"""Views over a session's per-key mistake counts."""

from typing import List, Mapping, Tuple

MOST_MISSED_LIMIT = 5


def most_missed_keys(key_errors: Mapping[str, int], limit: int = MOST_MISSED_LIMIT) -> List[Tuple[str, int]]:
    """Expected characters ranked by mistakes, highest first.

    Ties keep the order in which the keys were first missed.
    """
    ranked = sorted(key_errors.items(), key=lambda item: item[1], reverse=True)
    return ranked[:limit]


def heatmap_intensity(key_errors: Mapping[str, int], key: str) -> float:
    """Shade for a keyboard key in [0, 1], relative to the most-missed key."""
    max_errors = max([*key_errors.values(), 1])
    errors = key_errors.get(key.lower(), 0)
    return min(errors / max_errors, 1.0)
