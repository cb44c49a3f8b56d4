"""Run the docstring examples of every package module."""

from __future__ import annotations

import doctest
import importlib

import pytest

MODULES = [
    "manuscript.cleaning",
    "manuscript.markup",
    "manuscript.models",
    "manuscript.ingest",
    "manuscript.export",
    "manuscript.layout.layout_constants",
    "manuscript.layout.layout_settings",
    "manuscript.layout.layout_geometry",
    "manuscript.layout.layout_fonts",
    "manuscript.layout.layout_types",
    "manuscript.layout.layout_lines",
    "manuscript.layout.layout_pagination",
    "manuscript.layout.layout_headers",
    "manuscript.render.render_html",
]


@pytest.mark.parametrize("name", MODULES)
def test_docstring_examples(name: str) -> None:
    """Docstring examples in ``name`` should pass."""
    results = doctest.testmod(importlib.import_module(name))
    assert results.failed == 0, f"{results.failed} doctest(s) failed in {name}"
