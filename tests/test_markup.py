"""Tests for inline markup parsing.

Covers heading detection, bold/italic recognition, overlap resolution and
the degradation of malformed markers to literal text.
"""

from __future__ import annotations

from manuscript.markup import (
    BOLD,
    H1,
    H2,
    H3,
    ITALIC,
    NORMAL,
    MarkupRun,
    parse_markup,
    plain_text,
)


def test_plain_text_is_one_normal_run() -> None:
    """Text without markers should come back as a single normal run."""
    assert parse_markup("Just words.") == [MarkupRun(NORMAL, "Just words.")]


def test_italic_inside_bold_is_dropped() -> None:
    """An italic span nested in a bold span loses and is not split out."""
    runs = parse_markup("**a *b* c**")
    assert runs == [MarkupRun(BOLD, "a *b* c")], f"unexpected runs: {runs}"


def test_bold_and_italic_in_order() -> None:
    """Adjacent spans keep reading order with normal text filling the gaps."""
    runs = parse_markup("She was **very** *quietly* gone.")
    assert [(run.kind, run.text) for run in runs] == [
        (NORMAL, "She was "),
        (BOLD, "very"),
        (NORMAL, " "),
        (ITALIC, "quietly"),
        (NORMAL, " gone."),
    ]


def test_heading_levels() -> None:
    """One to three hashes followed by a space make a whole-line heading."""
    assert parse_markup("# Book One") == [MarkupRun(H1, "Book One")]
    assert parse_markup("## Part") == [MarkupRun(H2, "Part")]
    assert parse_markup("### Aside") == [MarkupRun(H3, "Aside")]
    assert parse_markup("# Title").pop().is_heading


def test_heading_wins_over_emphasis() -> None:
    """A heading line swallows emphasis markers inside it."""
    runs = parse_markup("## The **storm**")
    assert runs == [MarkupRun(H2, "The **storm**")]


def test_hashes_without_space_or_too_many_are_literal() -> None:
    """``#tag`` and ``####`` are not headings."""
    assert parse_markup("#tag") == [MarkupRun(NORMAL, "#tag")]
    assert parse_markup("#### four") == [MarkupRun(NORMAL, "#### four")]


def test_unbalanced_markers_stay_literal() -> None:
    """Malformed emphasis degrades to literal text and never raises."""
    assert parse_markup("**open and *never closed") == [
        MarkupRun(NORMAL, "**open and *never closed")
    ]


def test_plain_text_strips_markers() -> None:
    """Concatenated run text drops only the markers."""
    assert plain_text(parse_markup("one **two** *three*")) == "one two three"


def test_empty_text() -> None:
    """Empty input yields a single empty normal run."""
    assert parse_markup("") == [MarkupRun(NORMAL, "")]
