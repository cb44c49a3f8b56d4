"""Greedy line breaking and justification for paragraphs."""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import List, Sequence

from ..cleaning import split_words
from ..markup import BOLD, HEADING_SCALE, ITALIC, MarkupRun
from .layout_constants import INDENT_FRACTION, INDENT_MAX, INDENT_MIN, clamp
from .layout_fonts import FontMetrics
from .layout_settings import JUSTIFIED
from .layout_types import Line, Segment

_WORD_RE = re.compile(r"\S+")


@dataclass(slots=True, frozen=True)
class _Piece:
    kind: str
    text: str
    width: float


@dataclass(slots=True)
class _Word:
    pieces: List[_Piece] = field(default_factory=list)

    @property
    def width(self) -> float:
        return sum(piece.width for piece in self.pieces)


def first_line_indent(usable_width: float) -> float:
    """Return the first-line indent for a content width.

    Three percent of the width, kept between 24pt and 48pt.

    Example:
        >>> first_line_indent(468.0)
        24.0
        >>> first_line_indent(1200.0)
        36.0
    """

    return clamp(usable_width * INDENT_FRACTION, INDENT_MIN, INDENT_MAX)


def font_variant(kind: str) -> tuple[str, str]:
    """Return ``(weight, style)`` for a markup kind.

    Example:
        >>> font_variant("h2")
        ('bold', 'normal')
    """

    if kind == BOLD or kind in HEADING_SCALE:
        return "bold", "normal"
    if kind == ITALIC:
        return "normal", "italic"
    return "normal", "normal"


def wrap_text(
    text: str,
    width: float,
    *,
    metrics: FontMetrics,
    family: str,
    size: float,
    weight: str = "normal",
    style: str = "normal",
) -> List[str]:
    """Wrap single-style text into lines no wider than ``width``.

    Used for chapter headers and scene titles. A word wider than ``width``
    sits on a line of its own.

    Args:
        text: Text to wrap.
        width: Available width in points.
        metrics: Width measurement provider.
        family: PDF family key.
        size: Font size in points.
        weight: ``normal`` or ``bold``.
        style: ``normal`` or ``italic``.
    Returns:
        Lines of text; empty when ``text`` has no words.
    """

    space = metrics.measure_width(" ", family, size, weight, style)
    lines: List[str] = []
    current: List[str] = []
    used = 0.0
    for word in split_words(text):
        word_width = metrics.measure_width(word, family, size, weight, style)
        if current and used + space + word_width > width:
            lines.append(" ".join(current))
            current, used = [], 0.0
        used += (space if current else 0.0) + word_width
        current.append(word)
    if current:
        lines.append(" ".join(current))
    return lines


def layout_paragraph(
    runs: Sequence[MarkupRun],
    usable_width: float,
    alignment: str,
    first_line_indent: float = 0.0,
    *,
    metrics: FontMetrics,
    family: str,
    font_size: float,
) -> List[Line]:
    """Wrap a paragraph's runs into lines.

    Heading runs sit on their own lines at their scaled size. Other runs
    share lines; words are filled greedily and never split. Under
    ``justified`` every line except a block's last is stretched to the
    available width.

    Args:
        runs: Parsed markup runs of one paragraph.
        usable_width: Content width in points.
        alignment: ``justified`` or ``left``.
        first_line_indent: Indent for the paragraph's first line (0 for none).
        metrics: Width measurement provider.
        family: PDF family key.
        font_size: Body font size in points.
    Returns:
        Lines in reading order; empty when the paragraph has no words.
    """

    breaker = _LineBreaker(
        usable_width=usable_width,
        alignment=alignment,
        indent=first_line_indent,
        metrics=metrics,
        family=family,
        font_size=font_size,
    )
    lines: List[Line] = []
    block: List[MarkupRun] = []
    for run in runs:
        if run.is_heading:
            lines.extend(breaker.text_lines(block))
            block = []
            lines.extend(breaker.heading_lines(run))
            continue
        block.append(run)
    lines.extend(breaker.text_lines(block))
    return lines


class _LineBreaker:
    """Line filling state for one paragraph."""

    def __init__(
        self,
        *,
        usable_width: float,
        alignment: str,
        indent: float,
        metrics: FontMetrics,
        family: str,
        font_size: float,
    ) -> None:
        self.usable_width = usable_width
        self.alignment = alignment
        self.indent_pending = indent > 0
        self.indent = indent
        self.metrics = metrics
        self.family = family
        self.font_size = font_size

    def _measure(self, text: str, kind: str, size: float) -> float:
        weight, style = font_variant(kind)
        return self.metrics.measure_width(text, self.family, size, weight, style)

    def _words(self, runs: Sequence[MarkupRun], size: float) -> List[_Word]:
        """Split runs into words, gluing pieces that touch across runs."""

        words: List[_Word] = []
        touching = False
        for run in runs:
            for match in _WORD_RE.finditer(run.text):
                piece = _Piece(
                    kind=run.kind,
                    text=match.group(0),
                    width=self._measure(match.group(0), run.kind, size),
                )
                if touching and match.start() == 0 and words:
                    words[-1].pieces.append(piece)
                else:
                    words.append(_Word([piece]))
                touching = False
            if run.text:
                touching = not run.text[-1].isspace() and bool(words)
        return words

    def text_lines(self, runs: Sequence[MarkupRun]) -> List[Line]:
        """Lay out a block of non-heading runs."""

        words = self._words(runs, self.font_size)
        if not words:
            return []
        space = self._measure(" ", "normal", self.font_size)
        return self._fill(
            words,
            space=space,
            size=self.font_size,
            justify=self.alignment == JUSTIFIED,
            heading=False,
        )

    def heading_lines(self, run: MarkupRun) -> List[Line]:
        """Lay out a heading run on its own lines, never justified."""

        size = self.font_size * HEADING_SCALE[run.kind]
        words = self._words([run], size)
        # A heading consumes the paragraph's first line without indenting it.
        self.indent_pending = False
        if not words:
            return []
        space = self._measure(" ", run.kind, size)
        return self._fill(words, space=space, size=size, justify=False, heading=True)

    def _fill(
        self,
        words: Sequence[_Word],
        *,
        space: float,
        size: float,
        justify: bool,
        heading: bool,
    ) -> List[Line]:
        """Greedily fill lines with ``words``."""

        lines: List[Line] = []
        current: List[_Word] = []
        width = 0.0
        start, available = self._line_box()
        for word in words:
            if current and width + space + word.width > available:
                lines.append(
                    self._place(
                        current, start, available, space, size, justify, False, heading
                    )
                )
                start, available = self._line_box()
                current, width = [], 0.0
            width += (space if current else 0.0) + word.width
            current.append(word)
        lines.append(
            self._place(current, start, available, space, size, justify, True, heading)
        )
        return lines

    def _line_box(self) -> tuple[float, float]:
        """Return ``(start_x, available_width)`` for the next line."""

        if self.indent_pending:
            self.indent_pending = False
            return self.indent, self.usable_width - self.indent
        return 0.0, self.usable_width

    def _place(
        self,
        words: Sequence[_Word],
        start: float,
        available: float,
        space: float,
        size: float,
        justify: bool,
        is_last: bool,
        heading: bool,
    ) -> Line:
        """Position the words of one line."""

        gap = space
        if justify and not is_last and len(words) > 1:
            gap = (available - sum(word.width for word in words)) / (len(words) - 1)
        segments: List[Segment] = []
        x = start
        for word in words:
            for idx, piece in enumerate(word.pieces):
                segments.append(
                    Segment(piece.kind, piece.text, x, joins_previous=idx > 0)
                )
                x += piece.width
            x += gap
        return Line(
            segments=segments,
            is_last_line_of_paragraph=is_last,
            font_size=size,
            is_heading=heading,
        )
