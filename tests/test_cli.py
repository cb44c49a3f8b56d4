"""Tests for the ``manuscript-typeset`` command."""

from __future__ import annotations

import json
from pathlib import Path

from manuscript.cli import main


def _book(tmp_path: Path, **extra) -> Path:
    data = {
        "title": "Storm",
        "author": "Ann",
        "chapters": [
            {"title": "One", "scenes": [{"title": "Dock", "content": "Hello.\nAgain."}]}
        ],
    }
    data.update(extra)
    path = tmp_path / "storm.book"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_pdf_default_output(tmp_path: Path, capsys) -> None:
    """PDF output defaults to '<title>.pdf' next to the book."""
    code = main([str(_book(tmp_path)), "--no-progress"])
    assert code == 0
    output = tmp_path / "Storm.pdf"
    assert output.read_bytes().startswith(b"%PDF-")
    assert capsys.readouterr().out.strip() == str(output)


def test_html_with_options(tmp_path: Path) -> None:
    """HTML output honours the scene title and page size switches."""
    target = tmp_path / "out.html"
    code = main(
        [
            str(_book(tmp_path)),
            "--format",
            "html",
            "-o",
            str(target),
            "--scene-titles",
            "--page-size",
            "digest",
        ]
    )
    assert code == 0
    html = target.read_text(encoding="utf-8")
    assert "Dock" in html
    assert "size: 5.5in 8.5in;" in html


def test_bad_book_reports_error(tmp_path: Path, capsys) -> None:
    """A broken book file exits with status 1 and a message on stderr."""
    path = tmp_path / "bad.book"
    path.write_text("[", encoding="utf-8")
    assert main([str(path)]) == 1
    assert "error:" in capsys.readouterr().err
