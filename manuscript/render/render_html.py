"""Standalone HTML rendering of a book, styled from the template."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import re
from typing import List

from jinja2 import Environment, FileSystemLoader

from ..cleaning import normalize_whitespace
from ..layout.layout_constants import SCENE_BREAK_TEXT
from ..layout.layout_fonts import css_font_family
from ..layout.layout_geometry import margins_for_page, page_dimensions
from ..layout.layout_lines import first_line_indent
from ..layout.layout_settings import INDENTED, JUSTIFIED, Template
from ..markup import HEADING_SCALE, MarkupRun, parse_markup
from ..models import Document, ExportOptions

_TEMPLATES_DIR = Path(__file__).parent / "templates"
_ENV = Environment(
    loader=FileSystemLoader(_TEMPLATES_DIR),
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
)
_CSS_UNSAFE = re.compile(r"[<>{};\\]")


@dataclass(slots=True)
class _Block:
    runs: List[MarkupRun]
    heading: str = ""
    first: bool = False


@dataclass(slots=True)
class _SceneView:
    title: str
    blocks: List[_Block] = field(default_factory=list)
    scene_break: bool = False


@dataclass(slots=True)
class _ChapterView:
    header: str
    scenes: List[_SceneView] = field(default_factory=list)


def _blocks_for(runs: List[MarkupRun]) -> List[_Block]:
    """Group runs into paragraph blocks; each heading run is its own block."""

    blocks: List[_Block] = []
    pending: List[MarkupRun] = []
    for run in runs:
        if run.is_heading:
            if any(item.text.strip() for item in pending):
                blocks.append(_Block(runs=pending))
            pending = []
            blocks.append(_Block(runs=[run], heading=run.kind))
            continue
        pending.append(run)
    if any(run.text.strip() for run in pending):
        blocks.append(_Block(runs=pending))
    return blocks


def _chapters(
    document: Document, template: Template, options: ExportOptions
) -> List[_ChapterView]:
    chapters: List[_ChapterView] = []
    first = True
    for index, chapter in enumerate(document.chapters):
        view = _ChapterView(
            header=template.chapter_header.text_for(
                number=index + 1, title=chapter.title
            )
        )
        for scene_index, scene in enumerate(chapter.scenes):
            scene_view = _SceneView(
                title=scene.title.strip() if options.include_scene_titles else "",
                scene_break=options.include_scene_breaks
                and scene_index < len(chapter.scenes) - 1,
            )
            for paragraph in scene.paragraphs():
                text = normalize_whitespace(paragraph)
                if not text:
                    continue
                for block in _blocks_for(parse_markup(text)):
                    if first and not block.heading:
                        block.first = True
                    first = False
                    scene_view.blocks.append(block)
            view.scenes.append(scene_view)
        chapters.append(view)
    return chapters


def _fmt(value: float) -> str:
    """Format a CSS number without trailing zeros.

    Example:
        >>> _fmt(1.250), _fmt(2.0)
        ('1.25', '2')
    """

    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_html(
    document: Document,
    template: Template,
    options: ExportOptions | None = None,
) -> str:
    """Render ``document`` as a standalone, print-styled HTML page.

    Args:
        document: Book content.
        template: Normalized template.
        options: Scene break and scene title switches.
    Returns:
        HTML document as a string.
    """

    options = options or ExportOptions()
    dims = page_dimensions(template.page_size)
    margins = template.margins
    first_page = margins_for_page(template, 1)
    header = template.chapter_header
    content_width = first_page.content_width(dims.width)
    chapter_break = ""
    if header.start_on_right_page:
        chapter_break = "right"
    elif header.page_break:
        chapter_break = "always"
    page = {
        "width_in": _fmt(dims.width / 72),
        "height_in": _fmt(dims.height / 72),
        "top": _fmt(margins.top),
        "bottom": _fmt(margins.bottom),
        "left": _fmt(first_page.left / 72),
        "right": _fmt(first_page.right / 72),
        "mirrored": template.mirror_margins,
        "inside": _fmt(margins.inside),
        "outside": _fmt(margins.outside),
    }
    css = {
        "font_family": _CSS_UNSAFE.sub("", css_font_family(template.font_family)),
        "font_size": _fmt(template.font_size),
        "line_height": _fmt(template.line_height),
        "text_align": "justify" if template.text_align == JUSTIFIED else "left",
        "separated": template.paragraph_style != INDENTED,
        "indent": f"{_fmt(first_line_indent(content_width))}pt"
        if template.paragraph_style == INDENTED
        else "0",
        "chapter_break": chapter_break,
        "header_size": _fmt(header.font_size),
        "header_weight": "bold" if header.is_bold else "normal",
        "header_align": header.alignment,
        "header_before": _fmt(header.line_breaks_before * template.line_height)
        if header.page_break
        else "0",
        "header_after": _fmt(max(header.spacing - 1.2, 0.0)),
        "scene_title_size": _fmt(template.font_size + 2),
    }
    html = _ENV.get_template("book_page.jinja").render(
        title=document.title,
        author=document.author,
        title_page=document.has_title_page(),
        chapters=_chapters(document, template, options),
        page=page,
        css=css,
        heading_scale=sorted(HEADING_SCALE.items()),
        scene_break=SCENE_BREAK_TEXT,
    )
    if not html.endswith("\n"):
        html += "\n"
    return html
