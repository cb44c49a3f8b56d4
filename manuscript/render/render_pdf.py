"""Translate draw instructions into PDF bytes with the ReportLab canvas."""

from __future__ import annotations

from io import BytesIO
from typing import Iterable

from reportlab.pdfgen import canvas as pdf_canvas

from ..layout.layout_fonts import pdf_font_name
from ..layout.layout_types import DrawText, NewPage, PaginationResult


def _draw_text(
    *, canvas: pdf_canvas.Canvas, item: DrawText, page_height: float
) -> None:
    """Draw one string; ``y`` is converted from top-down to PDF space."""

    canvas.setFont(pdf_font_name(item.font, item.weight, item.style), item.size)
    canvas.drawString(item.x, page_height - item.y, item.text)


def _paint(
    *, canvas: pdf_canvas.Canvas, instructions: Iterable[NewPage | DrawText]
) -> None:
    """Replay instructions onto ``canvas``; each page is closed before the next."""

    page_height = 0.0
    started = False
    for item in instructions:
        if isinstance(item, NewPage):
            if started:
                canvas.showPage()
            canvas.setPageSize((item.width, item.height))
            page_height = item.height
            started = True
            continue
        canvas.saveState()
        _draw_text(canvas=canvas, item=item, page_height=page_height)
        canvas.restoreState()
    if started:
        canvas.showPage()


def render_pdf(result: PaginationResult, *, title: str = "", author: str = "") -> bytes:
    """Render a paginated result to PDF bytes.

    The canvas runs in invariant mode, so identical input yields identical
    bytes (no timestamps or random document IDs).

    Args:
        result: Finalized pages, with headers and page numbers applied.
        title: Document title for the PDF metadata.
        author: Document author for the PDF metadata.
    Returns:
        Complete PDF file contents.
    """

    buffer = BytesIO()
    first = result.pages[0] if result.pages else None
    pagesize = (first.width, first.height) if first else (612.0, 792.0)
    canvas = pdf_canvas.Canvas(buffer, pagesize=pagesize, invariant=1)
    canvas.setTitle(title)
    canvas.setAuthor(author)
    canvas.setCreator("manuscript-typeset")
    _paint(canvas=canvas, instructions=result.instructions())
    canvas.save()
    return buffer.getvalue()
