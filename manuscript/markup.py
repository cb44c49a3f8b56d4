"""
Inline markup parsing for scene paragraphs.

Recognises whole-line headings (``#``, ``##``, ``###``), ``**bold**`` and
``*italic*``. Anything else is literal text.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import List

NORMAL = "normal"
BOLD = "bold"
ITALIC = "italic"
H1 = "h1"
H2 = "h2"
H3 = "h3"

HEADING_KINDS = frozenset({H1, H2, H3})
HEADING_SCALE = {H1: 1.8, H2: 1.5, H3: 1.3}

_HEADING_RE = re.compile(r"^(#{1,3})[ \t]+(.*?)[ \t]*$", re.MULTILINE)
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_RE = re.compile(r"(?<!\*)\*([^*\n]+?)\*(?!\*)")

# Lower sorts first when two spans start at the same offset.
_PRIORITY = {H1: 0, H2: 0, H3: 0, BOLD: 1, ITALIC: 2}


@dataclass(slots=True, frozen=True)
class MarkupRun:
    """A span of text sharing one markup kind."""

    kind: str
    text: str

    @property
    def is_heading(self) -> bool:
        """Return True for h1/h2/h3 runs."""
        return self.kind in HEADING_KINDS


@dataclass(slots=True, frozen=True)
class _Span:
    kind: str
    start: int
    end: int
    text: str


def parse_markup(text: str) -> List[MarkupRun]:
    """Split paragraph text into typed runs.

    Overlapping spans are resolved by start offset, then by kind
    (heading > bold > italic); the losing span is dropped, never split.

    Args:
        text: Raw paragraph text.
    Returns:
        Runs in reading order. Never empty.

    Example:
        >>> parse_markup("**a *b* c**")
        [MarkupRun(kind='bold', text='a *b* c')]
        >>> [run.kind for run in parse_markup("Plain *soft* end")]
        ['normal', 'italic', 'normal']
    """

    if not text:
        return [MarkupRun(NORMAL, text or "")]
    spans = _accepted_spans(_collect_spans(text))
    if not spans:
        return [MarkupRun(NORMAL, text)]
    runs: List[MarkupRun] = []
    cursor = 0
    for span in spans:
        if cursor < span.start:
            runs.append(MarkupRun(NORMAL, text[cursor : span.start]))
        if span.text:
            runs.append(MarkupRun(span.kind, span.text))
        cursor = span.end
    if cursor < len(text):
        runs.append(MarkupRun(NORMAL, text[cursor:]))
    return runs or [MarkupRun(NORMAL, text)]


def _collect_spans(text: str) -> List[_Span]:
    """Return every heading, bold and italic match in ``text``."""

    spans: List[_Span] = []
    for match in _HEADING_RE.finditer(text):
        kind = (H1, H2, H3)[len(match.group(1)) - 1]
        spans.append(_Span(kind, match.start(), match.end(), match.group(2).strip()))
    for match in _BOLD_RE.finditer(text):
        spans.append(_Span(BOLD, match.start(), match.end(), match.group(1)))
    for match in _ITALIC_RE.finditer(text):
        spans.append(_Span(ITALIC, match.start(), match.end(), match.group(1)))
    return spans


def _accepted_spans(spans: List[_Span]) -> List[_Span]:
    """Drop spans that overlap an earlier (or higher-priority) span."""

    ordered = sorted(spans, key=lambda span: (span.start, _PRIORITY[span.kind]))
    accepted: List[_Span] = []
    reached = 0
    for span in ordered:
        if accepted and span.start < reached:
            continue
        accepted.append(span)
        reached = span.end
    return accepted


def plain_text(runs: List[MarkupRun]) -> str:
    """Return the concatenated text of ``runs`` without markers.

    Example:
        >>> plain_text(parse_markup("Hello **world**"))
        'Hello world'
    """

    return "".join(run.text for run in runs)
