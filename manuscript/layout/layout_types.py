"""Data structures for layout planning and rendering.

Vertical positions (``y``) are baselines measured from the top edge of the
page, growing downward. Backends whose origin is the bottom-left corner
convert with ``page.height - y``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterator, List, Sequence

from .layout_geometry import PageMargins


@dataclass(slots=True, frozen=True)
class Segment:
    """A positioned piece of a line.

    Args:
        kind: Markup kind of the run the piece came from.
        text: Word (or word fragment) to draw.
        x: Offset from the line's left edge, in points.
        joins_previous: True when the piece continues the previous piece's
            word with no space in between (``foo**bar**``).
    """

    kind: str
    text: str
    x: float
    joins_previous: bool = False


@dataclass(slots=True, frozen=True)
class Line:
    """One laid-out line of a paragraph."""

    segments: Sequence[Segment]
    is_last_line_of_paragraph: bool
    font_size: float
    is_heading: bool = False

    def text(self) -> str:
        """Return the line's words joined as they read.

        Example:
            >>> parts = [Segment("normal", "a", 0.0), Segment("bold", "b", 9.0)]
            >>> line = Line(parts, True, 12)
            >>> line.text()
            'a b'
        """

        parts: List[str] = []
        for idx, segment in enumerate(self.segments):
            if idx and not segment.joins_previous:
                parts.append(" ")
            parts.append(segment.text)
        return "".join(parts)

    @property
    def word_count(self) -> int:
        return sum(1 for seg in self.segments if not seg.joins_previous)


@dataclass(slots=True)
class DrawText:
    """An instruction to draw a string.

    Args:
        x: Left edge in points.
        y: Baseline from the top edge in points.
        text: String to draw.
        font: PDF family key (see ``layout_fonts.resolve_pdf_family``).
        size: Font size in points.
        weight: ``normal`` or ``bold``.
        style: ``normal`` or ``italic``.
        role: What the text is (``body``, ``chapter_header``,
            ``running_header``, ``page_number`` ...).
        joins_previous: Continues the previous body word without a space.
    """

    x: float
    y: float
    text: str
    font: str
    size: float
    weight: str = "normal"
    style: str = "normal"
    role: str = "body"
    joins_previous: bool = False


@dataclass(slots=True, frozen=True)
class NewPage:
    """An instruction to begin a page."""

    number: int
    width: float
    height: float


@dataclass(slots=True)
class Page:
    """A paginated page and the text drawn on it."""

    number: int
    width: float
    height: float
    margins: PageMargins
    texts: List[DrawText] = field(default_factory=list)

    @property
    def has_content(self) -> bool:
        return bool(self.texts)

    @property
    def content_width(self) -> float:
        return self.margins.content_width(self.width)

    def texts_with_role(self, role: str) -> List[DrawText]:
        """Return drawn texts of one role, in drawing order."""

        return [item for item in self.texts if item.role == role]


@dataclass(slots=True, frozen=True)
class Cursor:
    """Layout position, threaded through every layout step.

    ``x`` is the line origin on the current page (its left margin) and
    ``is_first_line_of_paragraph`` tells a line whether it starts a paragraph.

    Example:
        >>> m = PageMargins(72.0, 72.0, 90.0, 72.0)
        >>> Cursor(page=1, x=90.0, y=72.0, margins=m).advanced(12.0).y
        84.0
    """

    page: int
    x: float
    y: float
    margins: PageMargins
    is_first_line_of_paragraph: bool = True

    def advanced(self, dy: float) -> "Cursor":
        """Return a cursor moved down by ``dy`` points."""

        return replace(self, y=self.y + dy)

    def with_first_line(self, value: bool) -> "Cursor":
        return replace(self, is_first_line_of_paragraph=value)


@dataclass(slots=True, frozen=True)
class PageClassification:
    """Pages that open a chapter and pages deliberately left blank."""

    chapter_opening_pages: frozenset[int] = frozenset()
    blank_pages: frozenset[int] = frozenset()


@dataclass(slots=True)
class PaginationResult:
    """Output of the pagination pass.

    Args:
        pages: Pages in order, numbered from 1.
        classification: Chapter-opening and blank page sets.
        has_title_page: Whether page 1 is a title page.
        font: PDF family key used for body text.
    """

    pages: List[Page]
    classification: PageClassification
    has_title_page: bool
    font: str

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def instructions(self) -> Iterator[NewPage | DrawText]:
        """Yield draw instructions in page order."""

        for page in self.pages:
            yield NewPage(number=page.number, width=page.width, height=page.height)
            yield from page.texts
