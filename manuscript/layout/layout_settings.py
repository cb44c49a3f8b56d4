"""Template settings for book layout.

Every option is normalized once, when the template is built; layout code
reads plain attributes and never re-checks for missing or legacy fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

PAGE_SIZES: Dict[str, tuple[float, float, str]] = {
    "letter": (8.5, 11.0, "US Letter"),
    "a4": (8.27, 11.69, "A4"),
    "digest": (5.5, 8.5, "Digest"),
    "trade": (6.0, 9.0, "Trade Paperback"),
    "mass-market": (4.25, 6.87, "Mass Market"),
    "hardcover": (6.14, 9.21, "Hardcover"),
    "large-print": (7.0, 10.0, "Large Print"),
}
DEFAULT_PAGE_SIZE = "letter"

INDENTED = "indented"
SEPARATED = "separated"
JUSTIFIED = "justified"
LEFT = "left"

HEADER_STYLES = ("numbered", "titled", "both", "custom")
HEADER_ALIGNMENTS = ("left", "center", "right")
RUNNING_ALIGNMENTS = ("outside", "center")


@dataclass(slots=True, frozen=True)
class MarginSettings:
    """Page margins in inches.

    ``left``/``right`` are the uniform margins used when mirroring is off;
    older books only carry ``inside``/``outside``, so both stay optional.
    """

    top: float = 1.0
    bottom: float = 1.0
    inside: float = 1.25
    outside: float = 1.0
    left: float | None = None
    right: float | None = None


@dataclass(slots=True, frozen=True)
class ChapterHeaderSettings:
    """How chapter headers are worded, styled and placed."""

    style: str = "numbered"
    format: str = "Chapter {number}"
    font_size: float = 18.0
    font_weight: str = "bold"
    alignment: str = "center"
    page_break: bool = True
    spacing: float = 2.0
    line_breaks_before: int = 3
    start_on_right_page: bool = False

    def text_for(self, *, number: int, title: str) -> str:
        """Return the header text for a chapter.

        Args:
            number: One-based chapter number.
            title: Chapter title.
        Returns:
            Header text for the configured style.

        Example:
            >>> ChapterHeaderSettings(style="both").text_for(number=2, title="Storm")
            'Chapter 2: Storm'
        """

        if self.style == "titled":
            return title
        if self.style == "both":
            return f"Chapter {number}: {title}"
        if self.style == "custom":
            return self.format.replace("{number}", str(number)).replace(
                "{title}", title
            )
        return f"Chapter {number}"

    @property
    def is_bold(self) -> bool:
        return self.font_weight == "bold"


@dataclass(slots=True, frozen=True)
class RunningHeaderSettings:
    """Running header options (author on left pages, title on right)."""

    enabled: bool = False
    alignment: str = "outside"
    skip_chapter_pages: bool = True


@dataclass(slots=True, frozen=True)
class Template:
    """Immutable layout configuration for one render.

    Example:
        >>> template = Template()
        >>> round(template.line_height_points, 2)
        19.2
    """

    font_family: str = "Times New Roman"
    font_size: float = 12.0
    line_height: float = 1.6
    paragraph_style: str = INDENTED
    page_size: str = DEFAULT_PAGE_SIZE
    text_align: str = JUSTIFIED
    margins: MarginSettings = field(default_factory=MarginSettings)
    mirror_margins: bool = False
    chapter_header: ChapterHeaderSettings = field(
        default_factory=ChapterHeaderSettings
    )
    running_headers: RunningHeaderSettings = field(
        default_factory=RunningHeaderSettings
    )

    @property
    def line_height_points(self) -> float:
        """Return the body line advance in points."""

        return self.font_size * self.line_height

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "Template":
        """Build a normalized template from editor JSON.

        Accepts the editor's camelCase keys (``fontFamily``,
        ``pageMargins``, ``chapterHeader`` ...) as well as snake_case.
        Unknown or malformed values fall back to the defaults.

        Args:
            data: Template mapping, possibly partial or ``None``.
        Returns:
            Template instance.

        Example:
            >>> Template.from_dict({"pageSize": "tabloid"}).page_size
            'letter'
        """

        data = data or {}
        base = cls()
        return cls(
            font_family=str(
                _pick(data, "fontFamily", "font_family") or base.font_family
            ),
            font_size=_positive(_pick(data, "fontSize", "font_size"), base.font_size),
            line_height=_positive(
                _pick(data, "lineHeight", "line_height"), base.line_height
            ),
            paragraph_style=_choice(
                _pick(data, "paragraphStyle", "paragraph_style"),
                (INDENTED, SEPARATED),
                base.paragraph_style,
            ),
            page_size=_page_size_key(_pick(data, "pageSize", "page_size")),
            text_align=_text_align(_pick(data, "textAlign", "text_align")),
            margins=_margins(_pick(data, "pageMargins", "page_margins", "margins")),
            mirror_margins=_flag(
                _pick(data, "mirrorMargins", "mirror_margins"), False
            ),
            chapter_header=_chapter_header(
                _pick(data, "chapterHeader", "chapter_header")
            ),
            running_headers=_running_headers(
                _pick(data, "runningHeaders", "running_headers")
            ),
        )


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the first present, non-None value among ``keys``."""

    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _number(value: Any, default: float) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _positive(value: Any, default: float) -> float:
    number = _number(value, default)
    return number if number > 0 else default


def _non_negative(value: Any, default: float) -> float:
    number = _number(value, default)
    return number if number >= 0 else default


def _flag(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _optional_number(value: Any) -> float | None:
    if value is None:
        return None
    number = _number(value, -1.0)
    return number if number >= 0 else None


def _choice(value: Any, choices: tuple[str, ...], default: str) -> str:
    text = str(value).strip().lower() if value is not None else ""
    return text if text in choices else default


def _page_size_key(value: Any) -> str:
    """Return a known page size key, defaulting to letter."""

    key = str(value).strip().lower() if value is not None else ""
    return key if key in PAGE_SIZES else DEFAULT_PAGE_SIZE


def _text_align(value: Any) -> str:
    text = str(value).strip().lower() if value is not None else ""
    if text == LEFT:
        return LEFT
    return JUSTIFIED


def _font_weight(value: Any) -> str:
    text = str(value).strip().lower() if value is not None else "bold"
    if text in {"bold", "bolder"}:
        return "bold"
    if text.isdigit() and int(text) >= 600:
        return "bold"
    return "normal"


def _header_alignment(value: Any, default: str) -> str:
    """Return a header alignment; unrecognised values align left."""

    if value is None:
        return default
    return _choice(value, HEADER_ALIGNMENTS, "left")


def _margins(data: Any) -> MarginSettings:
    """Return margins with inside/outside defaults filled in."""

    if not isinstance(data, Mapping):
        return MarginSettings()
    base = MarginSettings()
    return MarginSettings(
        top=_non_negative(data.get("top"), base.top),
        bottom=_non_negative(data.get("bottom"), base.bottom),
        inside=_positive(data.get("inside"), base.inside),
        outside=_positive(data.get("outside"), base.outside),
        left=_optional_number(data.get("left")),
        right=_optional_number(data.get("right")),
    )


def _chapter_header(data: Any) -> ChapterHeaderSettings:
    """Return chapter header settings; unknown styles become ``numbered``."""

    if not isinstance(data, Mapping):
        return ChapterHeaderSettings()
    base = ChapterHeaderSettings()
    breaks = _number(
        _pick(data, "lineBreaksBefore", "line_breaks_before"), base.line_breaks_before
    )
    return ChapterHeaderSettings(
        style=_choice(data.get("style"), HEADER_STYLES, base.style),
        format=str(data.get("format") or base.format),
        font_size=_positive(_pick(data, "fontSize", "font_size"), base.font_size),
        font_weight=_font_weight(_pick(data, "fontWeight", "font_weight")),
        alignment=_header_alignment(data.get("alignment"), base.alignment),
        page_break=_flag(_pick(data, "pageBreak", "page_break"), base.page_break),
        spacing=_number(data.get("spacing"), base.spacing),
        line_breaks_before=max(0, int(breaks)),
        start_on_right_page=_flag(
            _pick(data, "startOnRightPage", "start_on_right_page"), False
        ),
    )


def _running_headers(data: Any) -> RunningHeaderSettings:
    if not isinstance(data, Mapping):
        return RunningHeaderSettings()
    return RunningHeaderSettings(
        enabled=_flag(data.get("enabled"), False),
        alignment=_choice(data.get("alignment"), RUNNING_ALIGNMENTS, "outside"),
        skip_chapter_pages=_flag(
            _pick(data, "skipChapterPages", "skip_chapter_pages"), True
        ),
    )
