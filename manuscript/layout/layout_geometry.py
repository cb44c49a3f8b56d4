"""Page dimensions and per-page margins in points."""

from __future__ import annotations

from dataclasses import dataclass

from reportlab.lib.units import inch

from .layout_settings import DEFAULT_PAGE_SIZE, PAGE_SIZES, Template


@dataclass(slots=True, frozen=True)
class PageDimensions:
    """Page size in points.

    Example:
        >>> page_dimensions("trade")
        PageDimensions(width=432.0, height=648.0, name='Trade Paperback')
    """

    width: float
    height: float
    name: str


@dataclass(slots=True, frozen=True)
class PageMargins:
    """Margins for one page, in points."""

    top: float
    bottom: float
    left: float
    right: float

    def content_width(self, page_width: float) -> float:
        """Return the width between the left and right margins."""

        return page_width - self.left - self.right

    def content_bottom(self, page_height: float) -> float:
        """Return the lowest baseline a body line may occupy."""

        return page_height - self.bottom


def page_dimensions(page_size: str) -> PageDimensions:
    """Return page dimensions for a named page size.

    Unknown keys fall back to US Letter.

    Args:
        page_size: One of the keys in ``PAGE_SIZES``.
    Returns:
        PageDimensions in points.
    """

    width, height, name = PAGE_SIZES.get(page_size) or PAGE_SIZES[DEFAULT_PAGE_SIZE]
    return PageDimensions(width=width * inch, height=height * inch, name=name)


def is_right_hand(page_number: int) -> bool:
    """Return True for odd (recto) pages; page 1 is a right-hand page.

    Example:
        >>> is_right_hand(1), is_right_hand(2)
        (True, False)
    """

    return page_number % 2 == 1


def margins_for_page(template: Template, page_number: int) -> PageMargins:
    """Return margins for a page, mirroring inside/outside when enabled.

    Args:
        template: Normalized template.
        page_number: One-based page number.
    Returns:
        PageMargins in points.

    Example:
        >>> from manuscript.layout.layout_settings import MarginSettings
        >>> margins = MarginSettings(inside=1.25, outside=1)
        >>> t = Template(mirror_margins=True, margins=margins)
        >>> margins_for_page(t, 1).left, margins_for_page(t, 2).left
        (90.0, 72.0)
    """

    margins = template.margins
    top = margins.top * inch
    bottom = margins.bottom * inch
    if template.mirror_margins:
        inside = margins.inside * inch
        outside = margins.outside * inch
        if is_right_hand(page_number):
            return PageMargins(top=top, bottom=bottom, left=inside, right=outside)
        return PageMargins(top=top, bottom=bottom, left=outside, right=inside)
    left = margins.left if margins.left is not None else margins.inside
    right = margins.right if margins.right is not None else margins.outside
    return PageMargins(top=top, bottom=bottom, left=left * inch, right=right * inch)
