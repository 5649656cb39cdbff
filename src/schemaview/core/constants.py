"""
Core view-facing defaults.

Defines pagination and presentation defaults consumed by the view layer. This
module is zero-IO and uses only the Python standard library.

Notes:
    - schemaview.view.config.ViewSettings sources its defaults from here.
    - Changes to these constants change the configured defaults that `reset()`
      restores, so keep them stable.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "PAGE_SIZE_OPTIONS",
    "MAX_VISIBLE_PAGES",
    "ELLIPSIS",
    "STATUS_NAME_KEYWORDS",
    "STATUS_VALUES",
]

# Rows per page when no explicit page size is configured.
DEFAULT_PAGE_SIZE: int = 10

# Page sizes offered to page-size pickers.
PAGE_SIZE_OPTIONS: tuple[int, ...] = (10, 20, 50, 100)

# Width of the centered window of page numbers in a pagination strip.
MAX_VISIBLE_PAGES: int = 5

# Marker emitted by the pagination sequencer for elided page ranges.
ELLIPSIS: str = "ellipsis"

# Field-name fragments that mark an enum as a workflow status.
STATUS_NAME_KEYWORDS: tuple[str, ...] = ("status", "state", "stage", "phase")

# Enum values that mark an enum as a workflow status.
STATUS_VALUES: frozenset[str] = frozenset(
    {
        "pending",
        "approved",
        "rejected",
        "active",
        "inactive",
        "draft",
        "published",
        "archived",
        "locked",
        "unlocked",
        "success",
        "error",
        "warning",
        "info",
        "paid",
        "unpaid",
    }
)
