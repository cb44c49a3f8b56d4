"""Tests for the pagination state machine.

All documents use the default Letter template (612x792pt, margins top and
bottom 72pt, left 90pt, right 72pt, so the content width is 450pt), a 12pt
body with 1.6 line height (19.2pt per line) and the fixed-advance metrics
from ``conftest``.
"""

from __future__ import annotations

import typing as typ

import pytest

from conftest import make_document, make_template, numbered_paragraphs
from manuscript.layout import layout_pagination
from manuscript.layout.layout_pagination import PaginationEngine, paginate
from manuscript.layout.layout_settings import Template
from manuscript.layout.layout_types import DrawText, PaginationResult
from manuscript.markup import parse_markup, plain_text
from manuscript.models import ExportOptions

BODY_ROLES = ("body", "heading")
LIMIT = 792.0 - 72.0


def _texts(result: PaginationResult, role: str) -> list[tuple[int, DrawText]]:
    return [
        (page.number, item)
        for page in result.pages
        for item in page.texts
        if item.role == role
    ]


def _body_words(result: PaginationResult) -> list[str]:
    """Rebuild the drawn words in page order, gluing joined pieces."""
    words: list[str] = []
    for page in result.pages:
        for item in page.texts:
            if item.role not in BODY_ROLES:
                continue
            if item.joins_previous and words:
                words[-1] += item.text
            else:
                words.append(item.text)
    return words


def test_end_to_end_two_pages(metrics) -> None:
    """Title page plus one chapter page holding the header and two paragraphs."""
    document = make_document(
        ["Hello world.\nSecond paragraph here."], title="Book", author="Ann"
    )
    document.chapters[0].title = "Intro"
    result = paginate(document, Template(), metrics)

    assert result.page_count == 2
    assert result.has_title_page
    titles = [item.text for item in result.pages[0].texts]
    assert titles == ["Book", "by Ann"]

    page2 = result.pages[1]
    headers = page2.texts_with_role("chapter_header")
    assert [item.text for item in headers] == ["Chapter 1"]
    assert headers[0].y == pytest.approx(72.0 + 3 * 19.2)
    assert headers[0].x == pytest.approx(90.0 + (450.0 - 9 * 9.0) / 2)

    body = page2.texts_with_role("body")
    assert [item.text for item in body] == [
        "Hello",
        "world.",
        "Second",
        "paragraph",
        "here.",
    ]
    first_y = 72.0 + 3 * 19.2 + 18 * 1.2 + 18 * 0.8
    assert body[0].y == pytest.approx(first_y)
    assert body[2].y == pytest.approx(first_y + 19.2)
    # First paragraph flush left, second indented by 24pt; neither stretched.
    assert body[0].x == pytest.approx(90.0)
    assert body[1].x == pytest.approx(90.0 + 30.0 + 6.0)
    assert body[2].x == pytest.approx(90.0 + 24.0)
    assert body[3].x == pytest.approx(90.0 + 24.0 + 36.0 + 6.0)

    assert result.classification.chapter_opening_pages == frozenset({2})
    assert result.classification.blank_pages == frozenset()


def test_no_title_page_starts_on_page_one(metrics) -> None:
    """Without title or author the first chapter opens page 1."""
    result = paginate(make_document(["Text."]), Template(), metrics)
    assert result.page_count == 1
    assert not result.has_title_page
    assert result.classification.chapter_opening_pages == frozenset({1})
    assert result.pages[0].texts_with_role("chapter_header")[0].text == "Chapter 1"


def test_right_hand_start_marks_even_page_blank(metrics) -> None:
    """A header that would land on page 4 moves to page 5; page 4 stays blank."""
    document = make_document([numbered_paragraphs(70)], ["Next."])
    template = make_template(header_start_on_right_page=True)
    result = paginate(document, template, metrics)

    assert 4 in result.classification.blank_pages
    assert 5 in result.classification.chapter_opening_pages
    assert result.pages[3].texts == []
    assert result.pages[4].texts_with_role("chapter_header")[0].text == "Chapter 2"
    assert result.classification.chapter_opening_pages == frozenset({1, 5})


def test_right_hand_start_after_title_page(metrics) -> None:
    """With a title page the first chapter skips page 2 and opens page 3."""
    document = make_document(["Text."], title="Book")
    template = make_template(header_start_on_right_page=True)
    result = paginate(document, template, metrics)

    assert result.page_count == 3
    assert result.classification.blank_pages == frozenset({2})
    assert result.classification.chapter_opening_pages == frozenset({3})


def test_right_hand_start_needs_page_breaks(metrics) -> None:
    """With page breaks off the first chapter follows the title page directly."""
    document = make_document(["Text."], title="Book")
    template = make_template(header_start_on_right_page=True, header_page_break=False)
    result = paginate(document, template, metrics)

    assert result.page_count == 2
    assert result.classification.blank_pages == frozenset()
    assert result.classification.chapter_opening_pages == frozenset({2})
    header = result.pages[1].texts_with_role("chapter_header")[0]
    assert header.y == pytest.approx(72.0)


def test_lines_before_header_stop_at_page_bottom(metrics) -> None:
    """Blank lines that would push the header off the page move it to a new page."""
    template = make_template(header_line_breaks_before=40)
    result = paginate(make_document(["Text."]), template, metrics)

    headers = _texts(result, "chapter_header")
    assert [(number, item.text) for number, item in headers] == [(2, "Chapter 1")]
    assert headers[0][1].y == pytest.approx(72.0)
    assert result.pages[0].texts == []
    assert result.classification.chapter_opening_pages == frozenset({2})


def test_provisional_blank_after_title_is_cleared(metrics) -> None:
    """The page after the title is only blank until a chapter lands on it."""
    result = paginate(make_document(["Text."], title="Book"), Template(), metrics)
    assert result.classification.blank_pages == frozenset()
    assert result.classification.chapter_opening_pages == frozenset({2})


def test_title_only_document(metrics) -> None:
    """No chapters: a single title page, the empty trailing page is dropped."""
    result = paginate(make_document(title="Book", author="Ann"), Template(), metrics)
    assert result.page_count == 1
    assert result.classification.blank_pages == frozenset()


def test_empty_document_still_has_a_page(metrics) -> None:
    """No title, author or chapters still yields one empty page."""
    result = paginate(make_document(), Template(), metrics)
    assert result.page_count == 1
    assert result.pages[0].texts == []


def test_later_chapters_break_pages(metrics) -> None:
    """With page breaks on, each chapter after the first starts a new page."""
    result = paginate(make_document(["One."], ["Two."], ["Three."]), Template(), metrics)
    assert result.page_count == 3
    assert result.classification.chapter_opening_pages == frozenset({1, 2, 3})


def test_chapters_flow_without_page_breaks(metrics) -> None:
    """With page breaks off, chapters follow each other on the same page."""
    template = make_template(header_page_break=False)
    result = paginate(make_document(["One."], ["Two."]), template, metrics)
    assert result.page_count == 1
    headers = _texts(result, "chapter_header")
    assert [item.text for _, item in headers] == ["Chapter 1", "Chapter 2"]
    # No blank lines before the header when page breaks are off.
    assert headers[0][1].y == pytest.approx(72.0)


def test_lines_never_cross_the_bottom_margin(metrics) -> None:
    """Every body line fits above the bottom margin."""
    result = paginate(make_document([numbered_paragraphs(150)]), Template(), metrics)
    assert result.page_count > 3
    for _, item in _texts(result, "body"):
        assert item.y + 19.2 <= LIMIT + 1e-6, f"line at {item.y} overflows"


def test_conservation_across_page_breaks(metrics) -> None:
    """Drawn words reconstruct the source paragraphs, none lost or repeated."""
    long_paragraph = " ".join(f"word{idx}" for idx in range(600))
    content = "\n".join(
        [
            "Opening line with **bold** and *italic* words.",
            long_paragraph,
            "## A heading inside the scene",
            "tail**glued** end",
        ]
    )
    document = make_document([content, "Second scene text."], ["Another chapter."])
    result = paginate(document, Template(), metrics)
    assert result.page_count > 2

    expected: list[str] = []
    for chapter in document.chapters:
        for scene in chapter.scenes:
            for paragraph in scene.paragraphs():
                expected.extend(plain_text(parse_markup(paragraph)).split())
    assert _body_words(result) == expected


def test_separated_paragraphs_add_a_blank_line(metrics) -> None:
    """Separated style leaves one extra line between paragraphs, no indent."""
    template = make_template(paragraph_style="separated")
    result = paginate(make_document(["One.\nTwo."]), template, metrics)
    body = result.pages[0].texts_with_role("body")
    assert body[1].y - body[0].y == pytest.approx(2 * 19.2)
    assert body[1].x == pytest.approx(90.0)


def test_indent_applies_after_the_first_paragraph_only(metrics) -> None:
    """The document's first paragraph is flush; later ones, even in new chapters, indent."""
    result = paginate(make_document(["A.\nB."], ["C."]), Template(), metrics)
    starts = [item.x for _, item in _texts(result, "body")]
    assert starts == pytest.approx([90.0, 114.0, 114.0])


def test_scene_breaks_between_scenes_only(metrics) -> None:
    """``* * *`` appears between scenes but not after a chapter's last scene."""
    document = make_document(["One.", "Two.", "Three."], ["Four."])
    result = paginate(document, Template(), metrics)
    breaks = _texts(result, "scene_break")
    assert len(breaks) == 2
    assert breaks[0][1].x == pytest.approx(90.0 + (450.0 - 30.0) / 2)

    off = paginate(
        document, Template(), metrics, ExportOptions(include_scene_breaks=False)
    )
    assert _texts(off, "scene_break") == []


def test_scene_titles_are_optional(metrics) -> None:
    """Scene titles print bold at body size + 2 only when requested."""
    document = make_document(["Text."])
    assert _texts(paginate(document, Template(), metrics), "scene_title") == []
    result = paginate(
        document, Template(), metrics, ExportOptions(include_scene_titles=True)
    )
    titles = _texts(result, "scene_title")
    assert [(item.text, item.size, item.weight) for _, item in titles] == [
        ("Scene 1", 14.0, "bold")
    ]


def test_header_alignment_left(metrics) -> None:
    """Left-aligned headers start at the left margin."""
    template = make_template(header_alignment="left", header_style="titled")
    result = paginate(make_document(["Text."]), template, metrics)
    header = result.pages[0].texts_with_role("chapter_header")[0]
    assert (header.text, header.x) == ("Part 1", 90.0)


def test_mirrored_margins_per_page(metrics) -> None:
    """Lines on even pages start at the outside margin when mirrored."""
    template = Template(mirror_margins=True)
    result = paginate(make_document([numbered_paragraphs(60)]), template, metrics)
    page1_x = {item.x for item in result.pages[0].texts_with_role("body")}
    page2_x = {item.x for item in result.pages[1].texts_with_role("body")}
    assert min(page1_x) == pytest.approx(90.0)
    # Every paragraph on page 2 is indented by 24pt from the 72pt margin.
    assert min(page2_x) == pytest.approx(72.0 + 24.0)
    assert result.pages[1].margins.left == pytest.approx(72.0)


def test_paragraph_continues_at_next_page_margin(metrics, monkeypatch, capsys) -> None:
    """A paragraph split by a page break resumes at the new page's left margin."""
    monkeypatch.setattr(layout_pagination, "DEBUG_PAGINATION", True)
    template = Template(mirror_margins=True)
    result = paginate(make_document([" ".join(["word"] * 600)]), template, metrics)

    assert result.page_count == 2
    continued = result.pages[1].texts_with_role("body")
    assert continued[0].x == pytest.approx(72.0)
    assert continued[0].y == pytest.approx(72.0)
    assert "page 2: paragraph continues from page 1" in capsys.readouterr().out


def test_renders_are_independent(metrics) -> None:
    """Two runs over the same input produce identical pages."""
    document = make_document([numbered_paragraphs(40)], ["More."], title="T")
    first = paginate(document, Template(), metrics)
    second = paginate(document, Template(), metrics)
    assert first == second


class _Progress:
    def __init__(self) -> None:
        self.total = 0

    def update(self, n: typ.Union[int, float] = 1) -> None:
        self.total += n


def test_progress_advances_per_chapter(metrics) -> None:
    """The tracker is advanced once for every chapter."""
    progress = _Progress()
    PaginationEngine(
        document=make_document(["a"], ["b"], ["c"]),
        template=Template(),
        metrics=metrics,
        progress=progress,
    ).run()
    assert progress.total == 3
