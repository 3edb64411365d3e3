"""Final cleanup of the working query."""

from __future__ import annotations

import re

STOP_WORDS: frozenset[str] = frozenset({"in", "from", "by", "on", "at", "the", "a", "an"})

_STOP_WORD_PATTERN = re.compile(
    r"\b(?:" + "|".join(sorted(STOP_WORDS, key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)
_WHITESPACE = re.compile(r"\s+")


def normalize_query(text: str) -> str:
    """Remove stop words, collapse whitespace and trim.

    Args:
        text: Working query with matched entities already stripped

    Returns:
        Clean query text
    """
    text = _STOP_WORD_PATTERN.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()
