"""
Export helpers for a ViewStore.

Produces headers plus display-formatted rows for the visible columns in the
current sort order, and renders them as CSV or JSON text. Writing files is left
to the caller.

Scopes
- "filtered" (default): rows surviving the current filters.
- "all": every row of the dataset, filters ignored.
- "selected": selected rows, filters ignored.

Cell formatting
- None -> "", booleans -> "Yes"/"No", sequences joined with ", ",
  dates/datetimes -> ISO 8601, mappings -> canonical JSON, otherwise str().
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Literal

import polars as pl

from schemaview.core.errors import UnknownFieldError
from schemaview.core.serde import json_dumps_canonical

from . import selectors as sel
from .errors import ViewConfigError
from .store import ViewStore

__all__ = ["ExportScope", "ExportData", "format_cell", "export_data", "to_csv", "to_json"]

ExportScope = Literal["all", "filtered", "selected"]

_SCOPES = ("all", "filtered", "selected")


@dataclass(frozen=True)
class ExportData:
    """
    Export payload.

    Attributes:
        columns (tuple[str, ...]): Field names of the exported columns.
        headers (tuple[str, ...]): Header labels (field label unless remapped).
        rows (tuple[tuple[str, ...], ...]): Formatted cells, one tuple per row.
    """

    columns: tuple[str, ...]
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]


def format_cell(value: Any) -> str:
    """Render one cell for export."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, Enum):
        return format_cell(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple, set, frozenset)):
        return ", ".join(format_cell(v) for v in value)
    if isinstance(value, Mapping):
        try:
            return json_dumps_canonical(dict(value))
        except (TypeError, ValueError):
            return str(dict(value))
    return str(value)


def _scoped_rows(store: ViewStore, scope: str) -> list[Any]:
    if scope == "filtered":
        return store.sorted_rows
    frame = sel.build_frame(store.rows, store.fields)
    if scope == "selected":
        chosen = store.state.row_selection
        selected = [i for i in range(len(store.rows)) if store.key_of(i) in chosen]
        if not selected:
            return []
        frame = frame.filter(pl.col(sel.INDEX).is_in(selected))
    order = sel.apply_sort(frame, store.state.sorting, store.fields)[sel.INDEX].to_list()
    return [store.rows[i] for i in order]


def export_data(
    store: ViewStore,
    *,
    scope: ExportScope = "filtered",
    header_map: Mapping[str, str] | None = None,
    exclude_columns: Iterable[str] | None = None,
) -> ExportData:
    """
    Collect export headers and formatted rows from a store.

    Args:
        store (ViewStore): Source view.
        scope (ExportScope): "filtered", "all" or "selected".
        header_map (Mapping[str, str] | None): Column name -> header override.
        exclude_columns (Iterable[str] | None): Columns left out of the export.

    Returns:
        ExportData: Columns, headers and rows in the current sort order.

    Raises:
        ViewConfigError: If `scope` is not a known scope.
        UnknownFieldError: If `exclude_columns` or `header_map` name an unknown column.
    """
    if scope not in _SCOPES:
        raise ViewConfigError(f"unknown export scope {scope!r}; expected one of {_SCOPES}")
    header_map = dict(header_map or {})
    excluded = set(exclude_columns or ())
    known = store.definition.field_names()
    for name in (*excluded, *header_map):
        if name not in store.definition:
            raise UnknownFieldError(name, known=known)

    fields = [f for f in store.visible_columns if f.name not in excluded]
    rows = _scoped_rows(store, scope)
    return ExportData(
        columns=tuple(f.name for f in fields),
        headers=tuple(header_map.get(f.name, f.label) for f in fields),
        rows=tuple(tuple(format_cell(sel.cell(row, f.name)) for f in fields) for row in rows),
    )


def _csv_lines(records: list[tuple[str, ...]], width: int) -> str:
    names = [f"c{i}" for i in range(width)]
    frame = pl.DataFrame(
        [pl.Series(n, [r[i] for r in records], dtype=pl.Utf8) for i, n in enumerate(names)]
    )
    return frame.write_csv(include_header=False)


def to_csv(data: ExportData, *, include_headers: bool = True) -> str:
    """
    Render export data as CSV text (RFC 4180 quoting, "\\n" line endings).

    Examples:
        >>> to_csv(ExportData(("a",), ("A",), (("x,y",),)))
        'A\\n"x,y"\\n'
    """
    width = len(data.columns)
    if width == 0:
        return ""
    text = _csv_lines(list(data.rows), width) if data.rows else ""
    if include_headers:
        text = _csv_lines([data.headers], width) + text
    return text


def to_json(data: ExportData, *, indent: int | None = 2) -> str:
    """Render export data as a JSON array of objects keyed by header."""
    records = [dict(zip(data.headers, row)) for row in data.rows]
    return json.dumps(records, ensure_ascii=False, indent=indent)
