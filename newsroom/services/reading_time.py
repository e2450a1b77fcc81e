"""Word counting and reading-time estimation for article plain text."""

import math

WORDS_PER_MINUTE = 200


def count_words(text: str | None) -> int:
    """Count whitespace-separated words. Empty or missing text has zero words."""
    if not text:
        return 0
    return len(text.split())


def estimate_reading_minutes(text: str | None) -> int:
    """Estimate reading time in whole minutes, never less than one.

    An empty article still reports one minute; clients rely on that floor.
    """
    return max(1, math.ceil(count_words(text) / WORDS_PER_MINUTE))
