"""Font catalogue, font-name resolution, and width measurement."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Dict, Protocol

from reportlab.pdfbase import pdfmetrics

NORMAL = "normal"
BOLD = "bold"
ITALIC = "italic"


class FontMetrics(Protocol):
    """Width measurement supplied by the rendering backend."""

    def measure_width(
        self, text: str, family: str, size: float, weight: str, style: str
    ) -> float:
        """Return the advance width of ``text`` in points."""


@dataclass(slots=True, frozen=True)
class BookFont:
    """A font offered by the template editor.

    Args:
        name: Display name stored in templates.
        category: ``serif``, ``sans-serif`` or ``monospace``.
        fallback: Built-in PDF family used when the font is not registered.
        web_font: CSS ``font-family`` stack for HTML output.
    """

    name: str
    category: str
    fallback: str
    web_font: str


BOOK_FONTS: Dict[str, BookFont] = {
    "palatino": BookFont(
        "Palatino Linotype",
        "serif",
        "times",
        'Palatino, "Palatino Linotype", "Book Antiqua", serif',
    ),
    "garamond": BookFont(
        "EB Garamond", "serif", "times", '"EB Garamond", Garamond, "Times New Roman", serif'
    ),
    "cormorant-garamond": BookFont(
        "Cormorant Garamond",
        "serif",
        "times",
        '"Cormorant Garamond", Garamond, "Times New Roman", serif',
    ),
    "caslon": BookFont("Adobe Caslon Pro", "serif", "times", 'Caslon, "Adobe Caslon Pro", serif'),
    "baskerville": BookFont(
        "Libre Baskerville",
        "serif",
        "times",
        '"Libre Baskerville", Baskerville, "Times New Roman", serif',
    ),
    "minion": BookFont("Minion Pro", "serif", "times", 'Minion, "Minion Pro", serif'),
    "sabon": BookFont("Sabon", "serif", "times", "Sabon, serif"),
    "bembo": BookFont("Bembo", "serif", "times", "Bembo, serif"),
    "georgia": BookFont("Georgia", "serif", "times", "Georgia, serif"),
    "times": BookFont("Times New Roman", "serif", "times", '"Times New Roman", Times, serif'),
    "crimson": BookFont(
        "Crimson Text", "serif", "times", '"Crimson Text", "Times New Roman", serif'
    ),
    "source-serif": BookFont(
        "Source Serif 4", "serif", "times", '"Source Serif Pro", "Times New Roman", serif'
    ),
    "gill-sans": BookFont(
        "Gill Sans", "sans-serif", "helvetica", '"Gill Sans", "Gill Sans MT", sans-serif'
    ),
    "helvetica": BookFont("Helvetica", "sans-serif", "helvetica", "Helvetica, Arial, sans-serif"),
    "courier": BookFont(
        "Courier New", "monospace", "courier", '"Courier New", Courier, monospace'
    ),
}

_LEGACY_FAMILIES = {
    "Arial": "helvetica",
    "Calibri": "helvetica",
    "Monaco": "courier",
    "Consolas": "courier",
    "Garamond": "times",
    "Book Antiqua": "times",
    "Baskerville": "times",
}

_BASE14 = {
    "times": {
        (NORMAL, NORMAL): "Times-Roman",
        (BOLD, NORMAL): "Times-Bold",
        (NORMAL, ITALIC): "Times-Italic",
        (BOLD, ITALIC): "Times-BoldItalic",
    },
    "helvetica": {
        (NORMAL, NORMAL): "Helvetica",
        (BOLD, NORMAL): "Helvetica-Bold",
        (NORMAL, ITALIC): "Helvetica-Oblique",
        (BOLD, ITALIC): "Helvetica-BoldOblique",
    },
    "courier": {
        (NORMAL, NORMAL): "Courier",
        (BOLD, NORMAL): "Courier-Bold",
        (NORMAL, ITALIC): "Courier-Oblique",
        (BOLD, ITALIC): "Courier-BoldOblique",
    },
}

_BUILTIN_PREFIXES = ("Times-", "Helvetica", "Courier", "Symbol", "ZapfDingbats")

_REGISTERED_SUFFIX = {
    (NORMAL, NORMAL): "",
    (BOLD, NORMAL): "-Bold",
    (NORMAL, ITALIC): "-Italic",
    (BOLD, ITALIC): "-BoldItalic",
}


def _catalog_key(font_family: str) -> str | None:
    """Return the catalogue key matching a display name or slug."""

    slug = re.sub(r"\s+", "-", font_family.strip().lower())
    for key, font in BOOK_FONTS.items():
        if font.name == font_family or key == slug:
            return key
    return None


def _is_builtin(font_name: str) -> bool:
    return font_name.startswith(_BUILTIN_PREFIXES)


def resolve_pdf_family(font_family: str) -> str:
    """Return the PDF family used for a template font.

    Catalogue and common system fonts map to a built-in fallback family.
    Otherwise a family registered with ReportLab under its own name (plus
    the ``-Bold``/``-Italic``/``-BoldItalic`` variants) is used as-is. The
    built-in fonts never count as registered families, because ReportLab
    registers them lazily on first measurement. Anything else renders in
    Times.

    Example:
        >>> resolve_pdf_family("Gill Sans")
        'helvetica'
        >>> resolve_pdf_family("Helvetica")
        'helvetica'
        >>> resolve_pdf_family("Unknown Serif")
        'times'
    """

    key = _catalog_key(font_family)
    if key is not None:
        return BOOK_FONTS[key].fallback
    if font_family in _LEGACY_FAMILIES:
        return _LEGACY_FAMILIES[font_family]
    if not _is_builtin(font_family) and (
        font_family in pdfmetrics.getRegisteredFontNames()
    ):
        return font_family
    return "times"


def pdf_font_name(family: str, weight: str = NORMAL, style: str = NORMAL) -> str:
    """Return the concrete ReportLab font name for a family variant.

    Example:
        >>> pdf_font_name("times", BOLD, ITALIC)
        'Times-BoldItalic'
    """

    variant = (
        BOLD if weight == BOLD else NORMAL,
        ITALIC if style == ITALIC else NORMAL,
    )
    if family in _BASE14:
        return _BASE14[family][variant]
    candidate = f"{family}{_REGISTERED_SUFFIX[variant]}"
    if candidate in pdfmetrics.getRegisteredFontNames():
        return candidate
    return family


def css_font_family(font_family: str) -> str:
    """Return a CSS ``font-family`` value for HTML output.

    Example:
        >>> css_font_family("Georgia")
        'Georgia, serif'
        >>> css_font_family("Monaco")
        '"Monaco", monospace'
    """

    key = _catalog_key(font_family)
    if key is not None:
        return BOOK_FONTS[key].web_font
    if "sans" in font_family.lower() or font_family in {"Arial", "Helvetica"}:
        return f'"{font_family}", sans-serif'
    if font_family in {"Courier", "Monaco"}:
        return f'"{font_family}", monospace'
    return f'"{font_family}", serif'


class ReportLabFontMetrics:
    """Measure text with ReportLab's font metrics.

    One instance serves one render; it keeps a small width cache that is
    never shared between renders.
    """

    def __init__(self) -> None:
        self._cache: Dict[tuple[str, str, float], float] = {}

    def measure_width(
        self, text: str, family: str, size: float, weight: str, style: str
    ) -> float:
        """Return the width of ``text`` in points."""

        font_name = pdf_font_name(family, weight, style)
        key = (text, font_name, size)
        if key not in self._cache:
            self._cache[key] = pdfmetrics.stringWidth(text, font_name, size)
        return self._cache[key]
