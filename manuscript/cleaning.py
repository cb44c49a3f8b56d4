"""
Small, focused text cleaning utilities.
"""

import re


_ZERO_WIDTH = re.compile("[\u200b\u200c\u200d\u2060\ufeff]")
_NON_BREAKING_SPACES = re.compile("[\u00a0\u202f]")
_INLINE_SPACE = re.compile(r"[ \t\r\f\v]+")


def normalize_whitespace(value: str) -> str:
    """Collapse unusual whitespace into single ASCII spaces.

    Newlines are preserved because they separate paragraphs.

    Example:
        >>> normalize_whitespace("a\\u00a0b\\u200bb")
        'a bb'
    """

    clean = _NON_BREAKING_SPACES.sub(" ", value)
    clean = _ZERO_WIDTH.sub("", clean)
    clean = _INLINE_SPACE.sub(" ", clean)
    return clean.strip()


def split_words(value: str) -> list[str]:
    """Split text on any whitespace, dropping empty pieces.

    Example:
        >>> split_words("  The\\tquick  brown ")
        ['The', 'quick', 'brown']
    """

    return value.split()
