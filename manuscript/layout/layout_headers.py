"""Running headers and page numbers, stamped after pagination."""

from __future__ import annotations

from dataclasses import replace
from typing import List, Sequence

from ..models import Document
from .layout_constants import (
    PAGE_NUMBER_MAX,
    PAGE_NUMBER_MIN,
    PAGE_NUMBER_OFFSET,
    PAGE_NUMBER_SCALE,
    RUNNING_HEADER_MAX,
    RUNNING_HEADER_MIN,
    RUNNING_HEADER_SCALE,
    clamp,
)
from .layout_fonts import NORMAL, FontMetrics, resolve_pdf_family
from .layout_geometry import is_right_hand
from .layout_settings import Template
from .layout_types import DrawText, Page, PageClassification


def running_header_size(font_size: float) -> float:
    """Return the running header font size for a body size.

    Example:
        >>> running_header_size(12), running_header_size(20)
        (9.0, 12.0)
    """

    return clamp(
        font_size * RUNNING_HEADER_SCALE, RUNNING_HEADER_MIN, RUNNING_HEADER_MAX
    )


def page_number_size(font_size: float) -> float:
    """Return the page number font size for a body size.

    Example:
        >>> round(page_number_size(12), 2), page_number_size(8)
        (8.4, 8.0)
    """

    return clamp(font_size * PAGE_NUMBER_SCALE, PAGE_NUMBER_MIN, PAGE_NUMBER_MAX)


def running_header_text(document: Document, page_number: int) -> str:
    """Return the author on left-hand pages and the title on right-hand pages."""

    return document.title if is_right_hand(page_number) else document.author


def _shows_running_header(
    page: Page,
    *,
    classification: PageClassification,
    template: Template,
    has_title_page: bool,
) -> bool:
    settings = template.running_headers
    if not settings.enabled:
        return False
    if has_title_page and page.number == 1:
        return False
    if page.number in classification.blank_pages:
        return False
    opening = page.number in classification.chapter_opening_pages
    if settings.skip_chapter_pages and opening:
        return False
    return True


def apply_headers_and_footers(
    pages: Sequence[Page],
    classification: PageClassification,
    template: Template,
    document: Document,
    *,
    metrics: FontMetrics,
    font: str | None = None,
) -> List[Page]:
    """Return copies of ``pages`` with running headers and page numbers added.

    Running headers sit at half the top margin, on the outer edge or centred.
    Page numbers are centred in the content width, a fixed distance below
    the bottom margin, on every page except the title page. The input pages
    are left untouched.

    Args:
        pages: Paginated pages.
        classification: Frozen chapter-opening and blank page sets.
        template: Normalized template.
        document: Source document (title, author).
        metrics: Width measurement provider.
        font: PDF family key; resolved from the template when omitted.
    Returns:
        Finalized pages in order.
    """

    family = font or resolve_pdf_family(template.font_family)
    has_title_page = document.has_title_page()
    header_size = running_header_size(template.font_size)
    number_size = page_number_size(template.font_size)
    finalized: List[Page] = []
    for page in pages:
        texts = list(page.texts)
        margins = page.margins
        content_width = page.content_width
        if _shows_running_header(
            page,
            classification=classification,
            template=template,
            has_title_page=has_title_page,
        ):
            text = running_header_text(document, page.number)
            if text:
                width = metrics.measure_width(text, family, header_size, NORMAL, NORMAL)
                if template.running_headers.alignment == "center":
                    x = margins.left + (content_width - width) / 2
                elif is_right_hand(page.number):
                    x = page.width - margins.right - width
                else:
                    x = margins.left
                texts.append(
                    DrawText(
                        x=x,
                        y=margins.top / 2,
                        text=text,
                        font=family,
                        size=header_size,
                        role="running_header",
                    )
                )
        if not (has_title_page and page.number == 1):
            label = str(page.number)
            width = metrics.measure_width(label, family, number_size, NORMAL, NORMAL)
            texts.append(
                DrawText(
                    x=margins.left + (content_width - width) / 2,
                    y=page.height - margins.bottom + PAGE_NUMBER_OFFSET,
                    text=label,
                    font=family,
                    size=number_size,
                    role="page_number",
                )
            )
        finalized.append(replace(page, texts=texts))
    return finalized
