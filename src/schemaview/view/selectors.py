"""
Derived selectors over (rows, ViewState, fields).

Rows are arbitrary in-memory records (mappings or attribute objects). Selectors
normalize each field into a typed polars column and evaluate filters and sorts
as polars expressions, then map the surviving positions back onto the input
row objects.

Frame layout (see `build_frame`)
- "__index": Int64 position of the row in the input sequence.
- "k{i}": sort/compare key of field i, typed by FieldType:
  NUMBER -> Float64, DATE -> Datetime("us"), BOOLEAN -> Boolean, otherwise Utf8.
- "t{i}": lowercased display text of field i (global filter and substring filters).

Filter semantics
- Global filter: case-insensitive substring match against any visible column.
- Column filters (AND-ed together, and with the global filter):
  - string/array/object: case-insensitive substring.
  - enum/boolean: equality; a list/tuple/set value means membership.
  - number/date: a scalar means equality; a {"min", "max"} mapping or a 2-item
    sequence means an inclusive range (either bound may be None).
- Filters naming unknown columns are ignored here; the store rejects them upstream.

Sort semantics
- Type-aware keys, stable (ties keep input order), nulls last in both directions.

Import DAG discipline
- Depends on stdlib, polars, schemaview.core and schemaview.view.state; never
  imports the store.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

import polars as pl

from schemaview.core.fields import FieldDescriptor
from schemaview.core.grammar import FieldType, SortDirection
from schemaview.core.serde import json_dumps_canonical

from .state import Pagination, SortSpec, ViewState, is_empty_filter

__all__ = [
    "INDEX",
    "TableMeta",
    "cell",
    "build_frame",
    "filter_expr",
    "apply_filters",
    "apply_sort",
    "filtered_indices",
    "sorted_indices",
    "page_slice",
    "filtered_rows",
    "sorted_rows",
    "page_rows",
    "page_count",
    "can_previous_page",
    "can_next_page",
    "visible_columns",
    "table_meta",
]

INDEX = "__index"

_TRUE = {"true", "t", "yes", "y", "1", "on"}
_FALSE = {"false", "f", "no", "n", "0", "off"}


@dataclass(frozen=True)
class TableMeta:
    """
    Row counts of a view.

    Attributes:
        total_rows (int): Rows in the dataset.
        filtered_rows (int): Rows surviving global and column filters.
        page_rows (int): Rows on the current page.
        page_count (int): Pages at the current page size (>= 1).
        is_filtered (bool): A global or column filter is active.
        is_empty (bool): No rows survive the filters.
    """

    total_rows: int
    filtered_rows: int
    page_rows: int
    page_count: int
    is_filtered: bool
    is_empty: bool


# -----------------------------------------------------------------------------
# Cell normalization
# -----------------------------------------------------------------------------


def cell(row: Any, name: str) -> Any:
    """Read one field from a mapping or attribute-style row; missing means None."""
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def _number(v: Any) -> float | None:
    if v is None:
        return None
    if isinstance(v, Enum):
        v = v.value
    if isinstance(v, (bool, int, float, Decimal)):
        out = float(v)
        return None if math.isnan(out) else out
    if isinstance(v, str):
        try:
            out = float(v.strip())
        except ValueError:
            return None
        return None if math.isnan(out) else out
    return None


def _datetime(v: Any) -> datetime | None:
    if v is None:
        return None
    if isinstance(v, datetime):
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v
    if isinstance(v, date):
        return datetime(v.year, v.month, v.day)
    if isinstance(v, str) and v.strip():
        try:
            return _datetime(datetime.fromisoformat(v.strip()))
        except ValueError:
            return None
    return None


def _bool_value(v: Any) -> bool | None:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        s = v.strip().lower()
        if s in _TRUE:
            return True
        if s in _FALSE:
            return False
    return None


def _text(v: Any) -> str | None:
    if v is None:
        return None
    if isinstance(v, str):
        return v
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, Enum):
        return _text(v.value)
    if isinstance(v, (datetime, date)):
        return v.isoformat()
    if isinstance(v, (list, tuple, set, frozenset)):
        return ", ".join(t for t in (_text(x) for x in v) if t is not None)
    if isinstance(v, Mapping):
        try:
            return json_dumps_canonical(dict(v))
        except (TypeError, ValueError):
            return str(dict(v))
    return str(v)


def _key_series(name: str, ftype: FieldType, values: list[Any]) -> pl.Series:
    if ftype == FieldType.NUMBER:
        return pl.Series(name, [_number(v) for v in values], dtype=pl.Float64)
    if ftype == FieldType.DATE:
        return pl.Series(name, [_datetime(v) for v in values], dtype=pl.Datetime("us"))
    if ftype == FieldType.BOOLEAN:
        return pl.Series(name, [_bool_value(v) for v in values], dtype=pl.Boolean)
    return pl.Series(name, [_text(v) for v in values], dtype=pl.Utf8)


def build_frame(rows: Sequence[Any], fields: Sequence[FieldDescriptor]) -> pl.DataFrame:
    """
    Normalize rows into the selector frame (see module docstring for the layout).

    Args:
        rows (Sequence[Any]): Dataset rows.
        fields (Sequence[FieldDescriptor]): Columns in declaration order.

    Returns:
        pl.DataFrame: One row per input row, in input order.
    """
    columns: list[pl.Series] = [pl.Series(INDEX, list(range(len(rows))), dtype=pl.Int64)]
    for i, field in enumerate(fields):
        values = [cell(row, field.name) for row in rows]
        columns.append(_key_series(f"k{i}", field.type, values))
        texts = [_text(v) for v in values]
        columns.append(
            pl.Series(
                f"t{i}", [t.lower() if t is not None else None for t in texts], dtype=pl.Utf8
            )
        )
    return pl.DataFrame(columns)


# -----------------------------------------------------------------------------
# Filtering
# -----------------------------------------------------------------------------


def _positions(fields: Sequence[FieldDescriptor]) -> dict[str, int]:
    return {f.name: i for i, f in enumerate(fields)}


def _scalar_key(ftype: FieldType, value: Any) -> Any:
    if ftype == FieldType.NUMBER:
        return _number(value)
    if ftype == FieldType.DATE:
        return _datetime(value)
    if ftype == FieldType.BOOLEAN:
        return _bool_value(value)
    return _text(value)


def _bounds(value: Any) -> tuple[Any, Any] | None:
    if isinstance(value, Mapping) and ("min" in value or "max" in value):
        return value.get("min"), value.get("max")
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return value[0], value[1]
    return None


def _substring(col: str, value: Any) -> pl.Expr:
    needles = value if isinstance(value, (list, tuple, set, frozenset)) else [value]
    parts = [
        pl.col(col).str.contains(n.lower(), literal=True)
        for n in (_text(v) for v in needles)
        if n
    ]
    if not parts:
        return pl.lit(True)
    return pl.any_horizontal(parts).fill_null(False)


def _column_expr(field: FieldDescriptor, i: int, value: Any) -> pl.Expr:
    key = pl.col(f"k{i}")
    ftype = field.type

    if ftype in (FieldType.NUMBER, FieldType.DATE):
        bounds = _bounds(value)
        if bounds is not None:
            lo, hi = (_scalar_key(ftype, b) for b in bounds)
            expr = pl.lit(True)
            if lo is not None:
                expr = expr & (key >= lo)
            if hi is not None:
                expr = expr & (key <= hi)
            return expr.fill_null(False)
        target = _scalar_key(ftype, value)
        if target is None:
            return pl.lit(False)
        return (key == target).fill_null(False)

    if ftype in (FieldType.ENUM, FieldType.BOOLEAN):
        if isinstance(value, (list, tuple, set, frozenset)):
            targets = [t for t in (_scalar_key(ftype, v) for v in value) if t is not None]
            if not targets:
                return pl.lit(False)
            return key.is_in(targets).fill_null(False)
        target = _scalar_key(ftype, value)
        if target is None:
            return pl.lit(False)
        return (key == target).fill_null(False)

    return _substring(f"t{i}", value)


def _global_expr(needle: str, fields: Sequence[FieldDescriptor], state: ViewState) -> pl.Expr:
    parts = [
        pl.col(f"t{i}").str.contains(needle, literal=True)
        for i, f in enumerate(fields)
        if state.is_visible(f.name)
    ]
    if not parts:
        return pl.lit(False)
    return pl.any_horizontal(parts).fill_null(False)


def filter_expr(state: ViewState, fields: Sequence[FieldDescriptor]) -> pl.Expr | None:
    """
    Combined filter expression of a state, or None when nothing filters.

    Args:
        state (ViewState): Source of global_filter, column_filters and column_visibility.
        fields (Sequence[FieldDescriptor]): Columns matching the frame layout.

    Returns:
        pl.Expr | None: Boolean expression over a `build_frame` frame.
    """
    exprs: list[pl.Expr] = []
    needle = state.global_filter.strip().lower()
    if needle:
        exprs.append(_global_expr(needle, fields, state))

    positions = _positions(fields)
    for name, value in state.column_filters.items():
        i = positions.get(name)
        if i is None or is_empty_filter(value):
            continue
        exprs.append(_column_expr(fields[i], i, value))

    if not exprs:
        return None
    return pl.all_horizontal(exprs)


def apply_filters(
    frame: pl.DataFrame, state: ViewState, fields: Sequence[FieldDescriptor]
) -> pl.DataFrame:
    expr = filter_expr(state, fields)
    return frame if expr is None else frame.filter(expr)


# -----------------------------------------------------------------------------
# Sorting
# -----------------------------------------------------------------------------


def apply_sort(
    frame: pl.DataFrame, sorting: Sequence[SortSpec], fields: Sequence[FieldDescriptor]
) -> pl.DataFrame:
    """Stable multi-key sort with nulls last; unknown columns are skipped."""
    positions = _positions(fields)
    by: list[str] = []
    descending: list[bool] = []
    for spec in sorting:
        i = positions.get(spec.column)
        if i is None:
            continue
        by.append(f"k{i}")
        descending.append(spec.direction == SortDirection.DESC)
    if not by or frame.height == 0:
        return frame
    return frame.sort(by, descending=descending, nulls_last=True, maintain_order=True)


# -----------------------------------------------------------------------------
# Index-level selectors
# -----------------------------------------------------------------------------


def _frame(
    rows: Sequence[Any], fields: Sequence[FieldDescriptor], frame: pl.DataFrame | None
) -> pl.DataFrame:
    return frame if frame is not None else build_frame(rows, fields)


def filtered_indices(
    rows: Sequence[Any],
    state: ViewState,
    fields: Sequence[FieldDescriptor],
    *,
    frame: pl.DataFrame | None = None,
) -> list[int]:
    """Positions of rows surviving the filters, in input order."""
    return apply_filters(_frame(rows, fields, frame), state, fields)[INDEX].to_list()


def sorted_indices(
    rows: Sequence[Any],
    state: ViewState,
    fields: Sequence[FieldDescriptor],
    *,
    frame: pl.DataFrame | None = None,
) -> list[int]:
    """Positions of filtered rows in sort order."""
    filtered = apply_filters(_frame(rows, fields, frame), state, fields)
    return apply_sort(filtered, state.sorting, fields)[INDEX].to_list()


def page_slice(indices: Sequence[int], pagination: Pagination) -> list[int]:
    start = pagination.page_index * pagination.page_size
    return list(indices[start : start + pagination.page_size])


def page_count(filtered: int, page_size: int) -> int:
    """Number of pages; never less than 1, even for an empty dataset."""
    if page_size <= 0:
        return 1
    return max(1, math.ceil(filtered / page_size))


def can_previous_page(state: ViewState) -> bool:
    return state.pagination.page_index > 0


def can_next_page(state: ViewState, pages: int) -> bool:
    return state.pagination.page_index < pages - 1


# -----------------------------------------------------------------------------
# Row-level selectors
# -----------------------------------------------------------------------------


def filtered_rows(
    rows: Sequence[Any], state: ViewState, fields: Sequence[FieldDescriptor]
) -> list[Any]:
    return [rows[i] for i in filtered_indices(rows, state, fields)]


def sorted_rows(
    rows: Sequence[Any], state: ViewState, fields: Sequence[FieldDescriptor]
) -> list[Any]:
    return [rows[i] for i in sorted_indices(rows, state, fields)]


def page_rows(
    rows: Sequence[Any], state: ViewState, fields: Sequence[FieldDescriptor]
) -> list[Any]:
    """Rows of the current page in sort order; empty when the page is past the end."""
    order = sorted_indices(rows, state, fields)
    return [rows[i] for i in page_slice(order, state.pagination)]


def visible_columns(
    fields: Sequence[FieldDescriptor], state: ViewState
) -> list[FieldDescriptor]:
    return [f for f in fields if state.is_visible(f.name)]


def table_meta(total: int, filtered: int, on_page: int, state: ViewState) -> TableMeta:
    return TableMeta(
        total_rows=total,
        filtered_rows=filtered,
        page_rows=on_page,
        page_count=page_count(filtered, state.pagination.page_size),
        is_filtered=bool(state.global_filter.strip())
        or any(not is_empty_filter(v) for v in state.column_filters.values()),
        is_empty=filtered == 0,
    )
