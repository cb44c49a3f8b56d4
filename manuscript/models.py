"""
Typed containers for manuscript content handed to the layout engine.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class Scene:
    """A scene of raw, lightly marked-up prose.

    Attributes:
        id: Identifier assigned by the editor.
        title: Optional scene title.
        content: Paragraphs separated by single newlines.
    """

    id: str
    title: str
    content: str

    def paragraphs(self) -> List[str]:
        """Return the non-blank lines of the scene, trimmed.

        Every single newline is a paragraph boundary.

        Example:
            >>> Scene('s1', '', 'One.\\n\\n  Two.  ').paragraphs()
            ['One.', 'Two.']
        """

        if not self.content or not self.content.strip():
            return []
        return [line.strip() for line in self.content.split("\n") if line.strip()]


@dataclass(slots=True)
class Chapter:
    """Chapter-level grouping of scenes."""

    id: str
    title: str
    scenes: List[Scene] = field(default_factory=list)


@dataclass(slots=True)
class Document:
    """The book being laid out.

    Example:
        >>> Document('Book', '', []).has_title_page()
        True
    """

    title: str
    author: str
    chapters: List[Chapter] = field(default_factory=list)

    def has_title_page(self) -> bool:
        """Return True when a title or author is present."""
        return bool(self.title or self.author)


@dataclass(slots=True)
class ExportOptions:
    """Per-export switches chosen in the export dialog."""

    include_scene_breaks: bool = True
    include_scene_titles: bool = False
