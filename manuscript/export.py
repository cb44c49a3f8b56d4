"""Export entry points: layout, PDF and HTML output, transactional writes."""

from __future__ import annotations

from dataclasses import replace
import os
from pathlib import Path
import tempfile
from typing import Union

from tqdm import tqdm

from .layout.layout_fonts import FontMetrics, ReportLabFontMetrics
from .layout.layout_headers import apply_headers_and_footers
from .layout.layout_pagination import paginate
from .layout.layout_settings import Template
from .layout.layout_types import PaginationResult
from .models import Document, ExportOptions
from .render.render_html import render_html
from .render.render_pdf import render_pdf

__all__ = [
    "ExportError",
    "default_output_name",
    "export_html",
    "export_html_file",
    "export_pdf",
    "export_pdf_bytes",
    "layout_book",
]


class ExportError(RuntimeError):
    """Raised when the backend cannot produce or write the artifact."""


def default_output_name(document: Document, extension: str) -> str:
    """Return the suggested file name for an export.

    Example:
        >>> default_output_name(Document("", "", []), "pdf")
        'Book.pdf'
    """

    return f"{document.title or 'Book'}.{extension}"


def layout_book(
    document: Document,
    template: Template,
    options: ExportOptions | None = None,
    *,
    metrics: FontMetrics | None = None,
    show_progress: bool = False,
) -> PaginationResult:
    """Paginate a document and stamp running headers and page numbers.

    Args:
        document: Book content.
        template: Normalized template.
        options: Scene break and scene title switches.
        metrics: Width provider; a fresh ReportLab provider when omitted.
        show_progress: Show a per-chapter tqdm progress bar.
    Returns:
        PaginationResult whose pages are final.
    Raises:
        ExportError: When font metrics cannot be looked up.
    """

    metrics = metrics or ReportLabFontMetrics()
    total = len(document.chapters)
    progress = (
        tqdm(total=total, desc="Laying out chapters", unit="chapter")
        if show_progress and total
        else None
    )
    try:
        result = paginate(document, template, metrics, options, progress=progress)
        pages = apply_headers_and_footers(
            result.pages,
            result.classification,
            template,
            document,
            metrics=metrics,
            font=result.font,
        )
    except KeyError as exc:
        raise ExportError(f"font metrics unavailable: {exc}") from exc
    finally:
        if progress is not None:
            progress.close()
    return replace(result, pages=pages)


def export_pdf_bytes(
    document: Document,
    template: Template,
    options: ExportOptions | None = None,
    *,
    metrics: FontMetrics | None = None,
    show_progress: bool = False,
) -> bytes:
    """Return the complete PDF for a document.

    Example:
        >>> data = export_pdf_bytes(Document("T", "A", []), Template())
        >>> data[:5]
        b'%PDF-'
    """

    result = layout_book(
        document, template, options, metrics=metrics, show_progress=show_progress
    )
    try:
        return render_pdf(result, title=document.title, author=document.author)
    except KeyError as exc:
        raise ExportError(f"font unavailable while rendering: {exc}") from exc


def export_html(
    document: Document,
    template: Template,
    options: ExportOptions | None = None,
) -> str:
    """Return the HTML rendering of a document."""

    return render_html(document, template, options)


def _write_atomic(path: Path, data: Union[bytes, str]) -> Path:
    """Write ``data`` to ``path`` through a temporary file in the same folder.

    Either the whole file appears at ``path`` or nothing does.
    """

    payload = data.encode("utf-8") if isinstance(data, str) else data
    path = Path(path)
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as handle:
            tmp_name = handle.name
            handle.write(payload)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise ExportError(f"cannot write {path}: {exc}") from exc
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.remove(tmp_name)
    return path


def export_pdf(
    document: Document,
    template: Template,
    output_path: Path,
    options: ExportOptions | None = None,
    *,
    metrics: FontMetrics | None = None,
    show_progress: bool = False,
) -> Path:
    """Render a document and write the PDF to ``output_path``.

    The PDF is fully rendered in memory before anything touches the disk.

    Args:
        document: Book content.
        template: Normalized template.
        output_path: Destination file.
        options: Scene break and scene title switches.
        metrics: Width provider; a fresh ReportLab provider when omitted.
        show_progress: Show a per-chapter tqdm progress bar.
    Returns:
        The written path.
    Raises:
        ExportError: On font lookup or write failures; no file is left behind.

    Example:
        >>> export_pdf(doc, Template(), Path("output/book.pdf"))  # doctest: +SKIP
    """

    data = export_pdf_bytes(
        document, template, options, metrics=metrics, show_progress=show_progress
    )
    return _write_atomic(output_path, data)


def export_html_file(
    document: Document,
    template: Template,
    output_path: Path,
    options: ExportOptions | None = None,
) -> Path:
    """Render a document as HTML and write it to ``output_path``."""

    return _write_atomic(output_path, export_html(document, template, options))
