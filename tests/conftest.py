"""Shared fixtures for the layout test suite.

The fixed-advance metrics provider makes every glyph half an em wide, so
widths can be worked out by hand: at 12pt each character (and each space)
is 6pt.
"""

from __future__ import annotations

import typing as typ

import pytest

from manuscript.layout.layout_settings import ChapterHeaderSettings, Template
from manuscript.models import Chapter, Document, Scene


class FixedMetrics:
    """Width provider where every character advances ``size / 2`` points."""

    def __init__(self) -> None:
        self.calls = 0

    def measure_width(
        self, text: str, family: str, size: float, weight: str, style: str
    ) -> float:
        self.calls += 1
        return len(text) * size * 0.5


@pytest.fixture
def metrics() -> FixedMetrics:
    """Return a fresh fixed-advance metrics provider."""
    return FixedMetrics()


def make_document(
    *chapters: typ.Sequence[str],
    title: str = "",
    author: str = "",
) -> Document:
    """Build a document; each positional argument lists one chapter's scenes."""
    return Document(
        title=title,
        author=author,
        chapters=[
            Chapter(
                id=f"c{idx + 1}",
                title=f"Part {idx + 1}",
                scenes=[
                    Scene(id=f"c{idx + 1}s{pos + 1}", title=f"Scene {pos + 1}", content=text)
                    for pos, text in enumerate(scenes)
                ],
            )
            for idx, scenes in enumerate(chapters)
        ],
    )


def make_template(**overrides: typ.Any) -> Template:
    """Return a default template with chapter header overrides applied.

    Keys prefixed ``header_`` go to the chapter header settings.
    """
    header_fields = {
        key.removeprefix("header_"): overrides.pop(key)
        for key in list(overrides)
        if key.startswith("header_")
    }
    return Template(chapter_header=ChapterHeaderSettings(**header_fields), **overrides)


def numbered_paragraphs(count: int) -> str:
    """Return ``count`` one-line paragraphs: ``Line 1.`` ... ``Line N.``."""
    return "\n".join(f"Line {idx}." for idx in range(1, count + 1))
