"""
Helpers that turn an editor ``.book`` file into typed objects.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Mapping, Tuple

from .layout.layout_settings import Template
from .models import Chapter, Document, Scene


class BookFileError(ValueError):
    """Raised when a ``.book`` file cannot be read or has the wrong shape."""


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _scene_from_dict(data: Any, *, position: str) -> Scene:
    if not isinstance(data, Mapping):
        raise BookFileError(f"{position}: scene must be an object")
    return Scene(
        id=str(data.get("id", "")),
        title=_text(data.get("title")),
        content=_text(data.get("content")),
    )


def _chapter_from_dict(data: Any, *, position: str) -> Chapter:
    if not isinstance(data, Mapping):
        raise BookFileError(f"{position}: chapter must be an object")
    scenes = data.get("scenes") or []
    if not isinstance(scenes, list):
        raise BookFileError(f"{position}: 'scenes' must be a list")
    return Chapter(
        id=str(data.get("id", "")),
        title=_text(data.get("title")),
        scenes=[
            _scene_from_dict(scene, position=f"{position}, scene {idx + 1}")
            for idx, scene in enumerate(scenes)
        ],
    )


def document_from_dict(data: Mapping[str, Any]) -> Document:
    """Build a Document from the editor's book JSON.

    Only ``title``, ``author`` and ``chapters[].scenes[]`` are read;
    characters, sync settings and other editor state are ignored.

    Args:
        data: Parsed book mapping.
    Returns:
        Document instance.
    Raises:
        BookFileError: When the mapping or its chapters are malformed.

    Example:
        >>> doc = document_from_dict({"title": "T", "chapters": [{"title": "One"}]})
        >>> doc.chapters[0].title, doc.author
        ('One', '')
    """

    if not isinstance(data, Mapping):
        raise BookFileError("book must be a JSON object")
    chapters = data.get("chapters") or []
    if not isinstance(chapters, list):
        raise BookFileError("'chapters' must be a list")
    parsed: List[Chapter] = [
        _chapter_from_dict(chapter, position=f"chapter {idx + 1}")
        for idx, chapter in enumerate(chapters)
    ]
    return Document(
        title=_text(data.get("title")).strip(),
        author=_text(data.get("author")).strip(),
        chapters=parsed,
    )


def template_from_book(data: Mapping[str, Any]) -> Template:
    """Return the normalized template stored in a book (defaults when absent)."""

    template = data.get("template") if isinstance(data, Mapping) else None
    return Template.from_dict(template if isinstance(template, Mapping) else None)


def load_book(path: Path) -> Tuple[Document, Template]:
    """Load a ``.book`` file.

    Args:
        path: Path to the JSON book file.
    Returns:
        Tuple of (document, template).
    Raises:
        BookFileError: When the file cannot be read or parsed.

    Example:
        >>> load_book(Path("novel.book"))  # doctest: +SKIP
    """

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise BookFileError(f"cannot read {path}: {exc}") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise BookFileError(f"{path} is not valid JSON: {exc}") from exc
    return document_from_dict(data), template_from_book(data)
