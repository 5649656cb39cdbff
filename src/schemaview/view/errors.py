"""
Custom exceptions for the schemaview.view module.

Purpose
- Provide view-layer error types for caller bugs (programmer errors).
- Keep schemaview.core as the source of truth for schema errors (see schemaview.core.errors).

Source of truth and boundaries
- schemaview.core.errors.UnknownFieldError is raised for unknown column names.
- schemaview.view raises View* errors for store/action concerns:
  - ViewConfigError: invalid settings or snapshot payloads.
  - UnknownRowError: a row key absent from the current dataset.
  - InvalidPageSizeError: a page size <= 0, which makes clamping impossible.

Notes
- Empty datasets and out-of-range page navigation are not errors; they clamp.
- These exceptions are stdlib-only.
"""

from __future__ import annotations


class ViewError(Exception):
    """
    Base class for view-layer errors in schemaview.view.

    Notes:
        Use this as a catch-all for store/action failures, distinct from schemaview.core errors.
    """


class ViewConfigError(ViewError, ValueError):
    """
    Raised when view configuration or an external snapshot is invalid.

    Examples:
        - page_size_options empty
        - snapshot with a malformed pagination slice
    """


class UnknownRowError(ViewError, KeyError):
    """Raised when an action references a row key absent from the current dataset."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"unknown row key {self.key!r}"


class InvalidPageSizeError(ViewError, ValueError):
    """Raised when a page size <= 0 is dispatched or configured."""

    def __init__(self, page_size: object) -> None:
        self.page_size = page_size
        super().__init__(f"page_size must be a positive integer, got {page_size!r}")
