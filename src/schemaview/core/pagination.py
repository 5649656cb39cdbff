"""
Pagination Sequencer: abbreviated page-number strips with ellipsis markers.

`sequence(current_page, total_pages, max_visible)` returns the markers a page
control renders. Page numbers are 1-based.

Rules
- total_pages <= max_visible: every page, verbatim.
- Otherwise at most `max_visible` page numbers are planned: the first page, the
  last page, and a window of `max_visible - 2` pages centered on the current
  page and clamped inside [2, total_pages - 1].
- Between a boundary page and the window, a gap of two or more pages becomes a
  single ELLIPSIS; a gap of exactly one page shows that page's number instead.
- At most one ellipsis per side; never two in a row.

Examples:
    >>> from schemaview.core.pagination import sequence
    >>> sequence(5, 20)
    [1, 'ellipsis', 4, 5, 6, 'ellipsis', 20]
    >>> sequence(1, 20)
    [1, 2, 3, 4, 'ellipsis', 20]
    >>> sequence(2, 4)
    [1, 2, 3, 4]
"""

from __future__ import annotations

from .constants import ELLIPSIS, MAX_VISIBLE_PAGES

__all__ = [
    "PageMarker",
    "sequence",
]

PageMarker = int | str


def sequence(
    current_page: int,
    total_pages: int,
    max_visible: int = MAX_VISIBLE_PAGES,
) -> list[PageMarker]:
    """
    Build the page strip for a pagination control.

    Args:
        current_page (int): 1-based current page; clamped into [1, total_pages].
        total_pages (int): Page count; values below 1 are treated as 1.
        max_visible (int): Upper bound on planned page numbers (>= 1).

    Returns:
        list[int | str]: Page numbers and ELLIPSIS markers in display order.

    Raises:
        ValueError: If max_visible < 1.
    """
    if max_visible < 1:
        raise ValueError(f"max_visible must be >= 1, got {max_visible}")

    total = max(1, int(total_pages))
    current = min(max(1, int(current_page)), total)
    if total <= max_visible:
        return list(range(1, total + 1))

    width = max(1, max_visible - 2)
    start = current - (width - 1) // 2
    start = max(2, min(start, total - width))
    end = start + width - 1

    markers: list[PageMarker] = [1]
    if start - 1 == 2:
        markers.append(2)
    elif start - 1 > 2:
        markers.append(ELLIPSIS)
    markers.extend(range(start, end + 1))
    if total - end == 2:
        markers.append(total - 1)
    elif total - end > 2:
        markers.append(ELLIPSIS)
    markers.append(total)
    return markers
