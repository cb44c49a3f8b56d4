"""Pagination state machine: chapters, scenes and paragraphs onto pages.

The engine runs once per render. It walks the document in reading order,
threads an immutable :class:`Cursor` through every step and records which
pages open a chapter and which are deliberately blank. The classification
is frozen when the pass ends; running headers and page numbers are added
afterwards by ``layout_headers``.
"""

from __future__ import annotations

from typing import List, Protocol, Set

from reportlab.lib.units import inch

from ..cleaning import normalize_whitespace
from ..markup import parse_markup
from ..models import Chapter, Document, ExportOptions, Scene
from .layout_constants import (
    AUTHOR_FONT_SIZE,
    CHAPTER_HEADER_LINE_FACTOR,
    DEBUG_PAGINATION,
    HEADING_AFTER_FACTOR,
    SCENE_BREAK_AFTER_FACTOR,
    SCENE_BREAK_TEXT,
    SCENE_TITLE_LINE_FACTOR,
    SCENE_TITLE_SIZE_DELTA,
    TITLE_AUTHOR_GAP,
    TITLE_FONT_SIZE,
    TITLE_OFFSET_ABOVE_CENTER,
)
from .layout_fonts import BOLD, NORMAL, FontMetrics, resolve_pdf_family
from .layout_geometry import margins_for_page, page_dimensions
from .layout_lines import first_line_indent, font_variant, layout_paragraph, wrap_text
from .layout_settings import INDENTED, SEPARATED, Template
from .layout_types import (
    Cursor,
    DrawText,
    Line,
    Page,
    PageClassification,
    PaginationResult,
)


class _ProgressTracker(Protocol):
    """Protocol for chapter layout progress updates."""

    def update(self, n: int | float = 1) -> object:
        """Advance the progress tracker by ``n``."""


def _debug(*, msg: str) -> None:
    """Log pagination debug output when enabled.

    Args:
        msg: Message to print.
    Returns:
        None.
    """

    if DEBUG_PAGINATION:
        print(msg)


class PaginationEngine:
    """Lay a document out onto fixed-size pages.

    Args:
        document: Book content; never mutated.
        template: Normalized template.
        metrics: Width measurement provider for this render.
        options: Scene break and scene title switches.
        progress: Optional tracker advanced once per chapter.

    Example:
        >>> class Fixed:
        ...     def measure_width(self, text, family, size, weight, style):
        ...         return len(text) * size * 0.5
        >>> doc = Document("T", "A", [Chapter("c", "One", [Scene("s", "", "Hi.")])])
        >>> engine = PaginationEngine(
        ...     document=doc, template=Template(), metrics=Fixed()
        ... )
        >>> engine.run().page_count
        2
    """

    def __init__(
        self,
        *,
        document: Document,
        template: Template,
        metrics: FontMetrics,
        options: ExportOptions | None = None,
        progress: _ProgressTracker | None = None,
    ) -> None:
        self.document = document
        self.template = template
        self.metrics = metrics
        self.options = options or ExportOptions()
        self.progress = progress
        self.family = resolve_pdf_family(template.font_family)
        self.dimensions = page_dimensions(template.page_size)
        self.line_height = template.line_height_points
        self.pages: List[Page] = []
        self._opening: Set[int] = set()
        self._blank: Set[int] = set()
        self._first_paragraph = True

    def run(self) -> PaginationResult:
        """Paginate the whole document and freeze the classification."""

        cursor = self._new_page()
        has_title_page = self.document.has_title_page()
        if has_title_page:
            cursor = self._title_page(cursor)
        for index, chapter in enumerate(self.document.chapters):
            cursor = self._chapter(
                cursor, chapter=chapter, index=index, has_title_page=has_title_page
            )
            if self.progress is not None:
                self.progress.update(1)
        return PaginationResult(
            pages=self._trimmed_pages(),
            classification=self._classification(),
            has_title_page=has_title_page,
            font=self.family,
        )

    # Pages

    def _page(self, cursor: Cursor) -> Page:
        return self.pages[cursor.page - 1]

    def _new_page(self) -> Cursor:
        number = len(self.pages) + 1
        margins = margins_for_page(self.template, number)
        self.pages.append(
            Page(
                number=number,
                width=self.dimensions.width,
                height=self.dimensions.height,
                margins=margins,
            )
        )
        _debug(
            msg=(
                f"page {number}: margins top={margins.top / inch:.2f}in "
                f"bottom={margins.bottom / inch:.2f}in "
                f"left={margins.left / inch:.2f}in right={margins.right / inch:.2f}in"
            )
        )
        return Cursor(page=number, x=margins.left, y=margins.top, margins=margins)

    def _page_break(self, cursor: Cursor, *, force: bool = False) -> Cursor:
        """Start a new page unless the current one has received nothing."""

        if not force and not self._page(cursor).has_content:
            return Cursor(
                page=cursor.page,
                x=cursor.margins.left,
                y=cursor.margins.top,
                margins=cursor.margins,
            )
        return self._new_page()

    def _limit(self, cursor: Cursor) -> float:
        return cursor.margins.content_bottom(self.dimensions.height)

    def _ensure_room(self, cursor: Cursor, needed: float) -> Cursor:
        """Move to a new page when ``needed`` points do not fit below ``y``.

        A page that holds nothing yet always accepts the content, so an
        oversized line cannot produce an endless run of empty pages.
        """

        if cursor.y + needed <= self._limit(cursor):
            return cursor
        if not self._page(cursor).has_content:
            return cursor
        return self._new_page()

    def _mark_blank(self, page: int) -> None:
        _debug(msg=f"page {page}: marked blank")
        self._blank.add(page)

    def _draw(self, cursor: Cursor, item: DrawText) -> None:
        self._page(cursor).texts.append(item)

    def _content_width(self, cursor: Cursor) -> float:
        return cursor.margins.content_width(self.dimensions.width)

    # Title page

    def _title_page(self, cursor: Cursor) -> Cursor:
        """Centre title and author on page 1, then break."""

        width = self.dimensions.width
        y = self.dimensions.height / 2 - TITLE_OFFSET_ABOVE_CENTER
        if self.document.title:
            self._draw_centered_on_page(
                cursor,
                text=self.document.title,
                y=y,
                size=TITLE_FONT_SIZE,
                weight=BOLD,
                role="title",
                width=width,
            )
        y += TITLE_AUTHOR_GAP
        if self.document.author:
            self._draw_centered_on_page(
                cursor,
                text=f"by {self.document.author}",
                y=y,
                size=AUTHOR_FONT_SIZE,
                weight=NORMAL,
                role="author",
                width=width,
            )
        cursor = self._new_page()
        if self.template.chapter_header.page_break:
            self._mark_blank(cursor.page)
        return cursor

    def _draw_centered_on_page(
        self,
        cursor: Cursor,
        *,
        text: str,
        y: float,
        size: float,
        weight: str,
        role: str,
        width: float,
    ) -> None:
        text_width = self.metrics.measure_width(text, self.family, size, weight, NORMAL)
        self._draw(
            cursor,
            DrawText(
                x=(width - text_width) / 2,
                y=y,
                text=text,
                font=self.family,
                size=size,
                weight=weight,
                role=role,
            ),
        )

    # Chapters

    def _chapter(
        self, cursor: Cursor, *, chapter: Chapter, index: int, has_title_page: bool
    ) -> Cursor:
        header = self.template.chapter_header
        breaks = header.page_break
        if index == 0:
            breaks = breaks and (not has_title_page or header.start_on_right_page)
        if breaks:
            cursor = self._page_break(cursor)
            if header.start_on_right_page and cursor.page % 2 == 0:
                self._mark_blank(cursor.page)
                cursor = self._page_break(cursor, force=True)
        if header.page_break:
            cursor = self._lines_before_header(cursor)
        cursor = self._chapter_header(cursor, chapter=chapter, number=index + 1)
        scenes = chapter.scenes
        for scene_index, scene in enumerate(scenes):
            cursor = self._scene(cursor, scene=scene)
            if self.options.include_scene_breaks and scene_index < len(scenes) - 1:
                cursor = self._scene_break(cursor)
        return cursor

    def _lines_before_header(self, cursor: Cursor) -> Cursor:
        """Advance ``line_breaks_before`` lines, stopping at a page overflow."""

        header_room = self.template.chapter_header.font_size * 2
        for _ in range(self.template.chapter_header.line_breaks_before):
            cursor = cursor.advanced(self.line_height)
            if cursor.y + header_room > self._limit(cursor):
                return self._new_page()
        return cursor

    def _chapter_header(
        self, cursor: Cursor, *, chapter: Chapter, number: int
    ) -> Cursor:
        header = self.template.chapter_header
        size = header.font_size
        weight = BOLD if header.is_bold else NORMAL
        cursor = self._ensure_room(cursor, size * 2)
        self._opening.add(cursor.page)
        _debug(msg=f"chapter {number} ({chapter.title!r}) opens on page {cursor.page}")
        text = header.text_for(number=number, title=chapter.title)
        width = self._content_width(cursor)
        for line in wrap_text(
            text,
            width,
            metrics=self.metrics,
            family=self.family,
            size=size,
            weight=weight,
        ):
            line_width = self.metrics.measure_width(
                line, self.family, size, weight, NORMAL
            )
            if header.alignment == "center":
                offset = (width - line_width) / 2
            elif header.alignment == "right":
                offset = width - line_width
            else:
                offset = 0.0
            self._draw(
                cursor,
                DrawText(
                    x=cursor.margins.left + offset,
                    y=cursor.y,
                    text=line,
                    font=self.family,
                    size=size,
                    weight=weight,
                    role="chapter_header",
                ),
            )
            cursor = cursor.advanced(size * CHAPTER_HEADER_LINE_FACTOR)
        return cursor.advanced(size * (header.spacing - CHAPTER_HEADER_LINE_FACTOR))

    # Scenes

    def _scene(self, cursor: Cursor, *, scene: Scene) -> Cursor:
        if self.options.include_scene_titles and scene.title.strip():
            cursor = self._scene_title(cursor, title=scene.title.strip())
        for paragraph in scene.paragraphs():
            cursor = self._paragraph(cursor, text=normalize_whitespace(paragraph))
        return cursor

    def _scene_title(self, cursor: Cursor, *, title: str) -> Cursor:
        size = self.template.font_size + SCENE_TITLE_SIZE_DELTA
        cursor = self._ensure_room(cursor, self.line_height * 2)
        for line in wrap_text(
            title,
            self._content_width(cursor),
            metrics=self.metrics,
            family=self.family,
            size=size,
            weight=BOLD,
        ):
            self._draw(
                cursor,
                DrawText(
                    x=cursor.margins.left,
                    y=cursor.y,
                    text=line,
                    font=self.family,
                    size=size,
                    weight=BOLD,
                    role="scene_title",
                ),
            )
            cursor = cursor.advanced(self.line_height * SCENE_TITLE_LINE_FACTOR)
        return cursor.advanced(self.line_height * HEADING_AFTER_FACTOR)

    def _paragraph(self, cursor: Cursor, *, text: str) -> Cursor:
        """Lay out one paragraph and draw its lines."""

        if not text:
            return cursor
        width = self._content_width(cursor)
        indent = 0.0
        if self.template.paragraph_style == INDENTED and not self._first_paragraph:
            indent = first_line_indent(width)
        lines = layout_paragraph(
            parse_markup(text),
            width,
            self.template.text_align,
            indent,
            metrics=self.metrics,
            family=self.family,
            font_size=self.template.font_size,
        )
        if not lines:
            return cursor
        self._first_paragraph = False
        cursor = cursor.with_first_line(True)
        for line in lines:
            cursor = self._draw_line(cursor, line)
        if self.template.paragraph_style == SEPARATED:
            cursor = cursor.advanced(self.line_height)
        return cursor

    def _draw_line(self, cursor: Cursor, line: Line) -> Cursor:
        advance = line.font_size * self.template.line_height
        continuing = not cursor.is_first_line_of_paragraph
        page = cursor.page
        cursor = self._ensure_room(cursor, advance)
        if continuing and cursor.page != page:
            _debug(msg=f"page {cursor.page}: paragraph continues from page {page}")
        role = "heading" if line.is_heading else "body"
        for segment in line.segments:
            weight, style = font_variant(segment.kind)
            self._draw(
                cursor,
                DrawText(
                    x=cursor.x + segment.x,
                    y=cursor.y,
                    text=segment.text,
                    font=self.family,
                    size=line.font_size,
                    weight=weight,
                    style=style,
                    role=role,
                    joins_previous=segment.joins_previous,
                ),
            )
        cursor = cursor.advanced(advance).with_first_line(False)
        if line.is_heading and line.is_last_line_of_paragraph:
            cursor = cursor.advanced(self.line_height * HEADING_AFTER_FACTOR)
        return cursor

    def _scene_break(self, cursor: Cursor) -> Cursor:
        cursor = self._ensure_room(cursor.advanced(self.line_height), self.line_height)
        size = self.template.font_size
        text_width = self.metrics.measure_width(
            SCENE_BREAK_TEXT, self.family, size, NORMAL, NORMAL
        )
        self._draw(
            cursor,
            DrawText(
                x=cursor.margins.left + (self._content_width(cursor) - text_width) / 2,
                y=cursor.y,
                text=SCENE_BREAK_TEXT,
                font=self.family,
                size=size,
                role="scene_break",
            ),
        )
        return cursor.advanced(self.line_height * SCENE_BREAK_AFTER_FACTOR)

    # Result

    def _trimmed_pages(self) -> List[Page]:
        """Drop trailing pages that never received content (page 1 stays)."""

        while len(self.pages) > 1 and not self.pages[-1].has_content:
            dropped = self.pages.pop()
            _debug(msg=f"page {dropped.number}: dropped (empty)")
        return self.pages

    def _classification(self) -> PageClassification:
        """Freeze chapter-opening and blank sets for the surviving pages."""

        count = len(self.pages)
        blank = {
            page
            for page in self._blank
            if page <= count and not self.pages[page - 1].has_content
        }
        opening = {page for page in self._opening if page <= count}
        return PageClassification(
            chapter_opening_pages=frozenset(opening),
            blank_pages=frozenset(blank),
        )


def paginate(
    document: Document,
    template: Template,
    metrics: FontMetrics,
    options: ExportOptions | None = None,
    *,
    progress: _ProgressTracker | None = None,
) -> PaginationResult:
    """Paginate ``document`` with a fresh engine.

    Args:
        document: Book content.
        template: Normalized template.
        metrics: Width measurement provider for this render.
        options: Scene break and scene title switches.
        progress: Optional tracker advanced once per chapter.
    Returns:
        PaginationResult with pages and the frozen classification.
    """

    return PaginationEngine(
        document=document,
        template=template,
        metrics=metrics,
        options=options,
        progress=progress,
    ).run()
