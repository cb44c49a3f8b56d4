"""Shared constants for page layout."""

from __future__ import annotations

import os

DEBUG_PAGINATION = os.getenv("DEBUG_PAGINATION", "0") not in {
    "",
    "0",
    "false",
    "False",
}

TITLE_FONT_SIZE = 24.0
AUTHOR_FONT_SIZE = 18.0
TITLE_OFFSET_ABOVE_CENTER = 100.0
TITLE_AUTHOR_GAP = 48.0

CHAPTER_HEADER_LINE_FACTOR = 1.2
SCENE_TITLE_SIZE_DELTA = 2.0
SCENE_TITLE_LINE_FACTOR = 1.2
SCENE_BREAK_TEXT = "* * *"
SCENE_BREAK_AFTER_FACTOR = 1.5
HEADING_AFTER_FACTOR = 0.5

INDENT_FRACTION = 0.03
INDENT_MIN = 24.0
INDENT_MAX = 48.0

RUNNING_HEADER_SCALE = 0.75
RUNNING_HEADER_MIN = 8.0
RUNNING_HEADER_MAX = 12.0
PAGE_NUMBER_SCALE = 0.70
PAGE_NUMBER_MIN = 8.0
PAGE_NUMBER_MAX = 11.0
PAGE_NUMBER_OFFSET = 18.0


def clamp(value: float, low: float, high: float) -> float:
    """Return ``value`` limited to ``[low, high]``.

    Example:
        >>> clamp(3.0, 8.0, 12.0)
        8.0
    """

    return max(low, min(high, value))
