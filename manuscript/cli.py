"""
Command line entry point: typeset a ``.book`` file as PDF or HTML.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
import sys
from typing import List, Sequence

from .export import ExportError, default_output_name, export_html_file, export_pdf
from .ingest import BookFileError, load_book
from .layout.layout_settings import PAGE_SIZES
from .models import ExportOptions


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    """Return CLI arguments for the typesetter."""

    parser = argparse.ArgumentParser(
        prog="manuscript-typeset",
        description="Typeset a .book manuscript into a print-ready PDF or HTML file.",
    )
    parser.add_argument("book", type=Path, help="Path to the .book file.")
    parser.add_argument(
        "--format",
        choices=("pdf", "html"),
        default="pdf",
        help="Output format (default: pdf).",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file. Defaults to '<title>.<format>' next to the book file.",
    )
    parser.add_argument(
        "--page-size",
        choices=sorted(PAGE_SIZES),
        default=None,
        help="Override the template's page size.",
    )
    parser.add_argument(
        "--scene-breaks",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Print '* * *' between scenes (default: on).",
    )
    parser.add_argument(
        "--scene-titles",
        action="store_true",
        help="Print scene titles above each scene.",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the chapter progress bar.",
    )
    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> int:
    """Typeset a book and print the written path.

    Returns:
        Process exit code: 0 on success, 1 on a book or export error.

    Example:
        >>> main(["novel.book", "--format", "html"])  # doctest: +SKIP
        0
    """

    args = _parse_args(argv)
    try:
        document, template = load_book(args.book)
    except BookFileError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    if args.page_size:
        template = replace(template, page_size=args.page_size)
    options = ExportOptions(
        include_scene_breaks=args.scene_breaks,
        include_scene_titles=args.scene_titles,
    )
    output = args.output or args.book.parent / default_output_name(
        document, args.format
    )
    try:
        if args.format == "html":
            written = export_html_file(document, template, output, options)
        else:
            written = export_pdf(
                document,
                template,
                output,
                options,
                show_progress=not args.no_progress,
            )
    except ExportError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(written)
    return 0


if __name__ == "__main__":
    sys.exit(main())
