"""
ViewState model and pure reducers for one table view.

ViewState holds six independent slices (sorting, column filters, global filter,
pagination, row selection, column visibility). It is a frozen pydantic model;
every reducer takes a state plus a payload and returns a new state, or the same
instance when the action changes nothing.

Invariants maintained by the reducers
- Changing the global filter, a column filter, or the page size resets
  pagination.page_index to 0.
- Page navigation is clamped into [0, max(0, page_count - 1)]; stepping past
  either end is a no-op.
- Single-sort is the default: setting a sort on one column clears the others
  unless `additive=True`.

Reducers never look at rows. Where a bound is needed (page_count, valid row keys)
the caller passes it in; schemaview.view.store derives those from selectors.

Examples:
    >>> from schemaview.view.state import ViewState, set_global_filter, set_page_index
    >>> s = set_page_index(ViewState(), 3, page_count=10)
    >>> set_global_filter(s, "acme").pagination.page_index
    0
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer

from schemaview.core.constants import DEFAULT_PAGE_SIZE
from schemaview.core.grammar import SortDirection
from schemaview.core.serde import fingerprint

from .errors import InvalidPageSizeError, ViewConfigError

__all__ = [
    "SortSpec",
    "Pagination",
    "ViewState",
    "is_empty_filter",
    "set_global_filter",
    "set_column_filter",
    "clear_column_filter",
    "clear_filters",
    "set_sort",
    "toggle_sort",
    "clear_sort",
    "set_page_index",
    "next_page",
    "previous_page",
    "set_page_size",
    "clamp_page",
    "toggle_row_selection",
    "select_keys",
    "deselect_keys",
    "clear_selection",
    "prune_selection",
    "set_column_visibility",
]


class SortSpec(BaseModel):
    """
    One sort entry.

    Attributes:
        column (str): Field name.
        direction (SortDirection): "asc" or "desc".
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    column: str
    direction: SortDirection = SortDirection.ASC


class Pagination(BaseModel):
    """
    Pagination cursor.

    Attributes:
        page_index (int): 0-based page index.
        page_size (int): Rows per page (>= 1).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    page_index: int = Field(default=0, ge=0)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)


class ViewState(BaseModel):
    """
    State slices of one table view.

    Attributes:
        sorting (tuple[SortSpec, ...]): Active sorts; the first entry is the primary key.
        column_filters (dict[str, Any]): Column name -> filter value.
        global_filter (str): Case-insensitive text matched across visible columns.
        pagination (Pagination): Page cursor.
        row_selection (frozenset[str]): Selected row keys (never indices).
        column_visibility (dict[str, bool]): Column name -> visible; missing means visible.

    Notes:
        - Serialize with `to_snapshot()` (JSON-safe) and restore with `from_snapshot()`.
        - Row selection serializes as a sorted list.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    sorting: tuple[SortSpec, ...] = ()
    column_filters: dict[str, Any] = Field(default_factory=dict)
    global_filter: str = ""
    pagination: Pagination = Field(default_factory=Pagination)
    row_selection: frozenset[str] = frozenset()
    column_visibility: dict[str, bool] = Field(default_factory=dict)

    @field_serializer("row_selection")
    def _serialize_selection(self, value: frozenset[str]) -> list[str]:
        return sorted(value)

    def to_snapshot(self) -> dict[str, Any]:
        """Return a plain, JSON-safe dict of every slice."""
        return self.model_dump(mode="json")

    @classmethod
    def from_snapshot(cls, data: Mapping[str, Any]) -> ViewState:
        """
        Restore a state from `to_snapshot()` output (or any compatible mapping).

        Raises:
            ViewConfigError: If the mapping does not describe a valid state.
        """
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            raise ViewConfigError(f"invalid view snapshot: {exc}") from exc

    def fingerprint(self) -> str:
        """SHA-256 of the canonical snapshot; equal states share a fingerprint."""
        return fingerprint(self.to_snapshot())

    def sort_direction(self, column: str) -> SortDirection | None:
        for spec in self.sorting:
            if spec.column == column:
                return spec.direction
        return None

    def is_visible(self, column: str) -> bool:
        return self.column_visibility.get(column, True)


def _first_page(state: ViewState, **updates: Any) -> ViewState:
    updates["pagination"] = state.pagination.model_copy(update={"page_index": 0})
    return state.model_copy(update=updates)


def is_empty_filter(value: Any) -> bool:
    """None, blank strings and empty collections mean "no filter"."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, Mapping)):
        return len(value) == 0
    return False


# -----------------------------------------------------------------------------
# Filters
# -----------------------------------------------------------------------------


def set_global_filter(state: ViewState, text: str | None) -> ViewState:
    """Update the global filter text; always returns to the first page."""
    return _first_page(state, global_filter=text or "")


def set_column_filter(state: ViewState, column: str, value: Any) -> ViewState:
    """Set one column filter (an empty value clears it); always returns to the first page."""
    if is_empty_filter(value):
        return clear_column_filter(state, column)
    filters = dict(state.column_filters)
    filters[column] = value
    return _first_page(state, column_filters=filters)


def clear_column_filter(state: ViewState, column: str) -> ViewState:
    filters = {k: v for k, v in state.column_filters.items() if k != column}
    return _first_page(state, column_filters=filters)


def clear_filters(state: ViewState) -> ViewState:
    """Clear the global filter and every column filter."""
    return _first_page(state, global_filter="", column_filters={})


# -----------------------------------------------------------------------------
# Sorting
# -----------------------------------------------------------------------------


def set_sort(
    state: ViewState,
    column: str,
    direction: SortDirection | str | None,
    *,
    additive: bool = False,
) -> ViewState:
    """
    Set or clear the sort of one column.

    Args:
        state (ViewState): Current state.
        column (str): Field name.
        direction (SortDirection | str | None): New direction; None removes the
            column's entry and leaves other sorts alone.
        additive (bool): Keep other columns' sorts (multi-sort). A new column is
            appended as the lowest-priority key; an existing entry keeps its place.

    Returns:
        ViewState: New state.
    """
    if direction is None:
        remaining = tuple(s for s in state.sorting if s.column != column)
        if remaining == state.sorting:
            return state
        return state.model_copy(update={"sorting": remaining})

    spec = SortSpec(column=column, direction=SortDirection(direction))
    if not additive:
        sorting: tuple[SortSpec, ...] = (spec,)
    elif any(s.column == column for s in state.sorting):
        sorting = tuple(spec if s.column == column else s for s in state.sorting)
    else:
        sorting = (*state.sorting, spec)
    if sorting == state.sorting:
        return state
    return state.model_copy(update={"sorting": sorting})


def toggle_sort(state: ViewState, column: str, *, additive: bool = False) -> ViewState:
    """Cycle a column through unsorted -> asc -> desc -> unsorted."""
    current = state.sort_direction(column)
    if current is None:
        nxt: SortDirection | None = SortDirection.ASC
    elif current == SortDirection.ASC:
        nxt = SortDirection.DESC
    else:
        nxt = None
    return set_sort(state, column, nxt, additive=additive)


def clear_sort(state: ViewState) -> ViewState:
    if not state.sorting:
        return state
    return state.model_copy(update={"sorting": ()})


# -----------------------------------------------------------------------------
# Pagination
# -----------------------------------------------------------------------------


def _last_index(page_count: int) -> int:
    return max(0, int(page_count) - 1)


def _with_page_index(state: ViewState, index: int) -> ViewState:
    if index == state.pagination.page_index:
        return state
    return state.model_copy(
        update={"pagination": state.pagination.model_copy(update={"page_index": index})}
    )


def set_page_index(state: ViewState, index: int, page_count: int) -> ViewState:
    """Jump to a page; the index is clamped into [0, page_count - 1]."""
    return _with_page_index(state, min(max(0, int(index)), _last_index(page_count)))


def next_page(state: ViewState, page_count: int) -> ViewState:
    """Advance one page; a no-op on the last page."""
    if state.pagination.page_index >= _last_index(page_count):
        return state
    return _with_page_index(state, state.pagination.page_index + 1)


def previous_page(state: ViewState) -> ViewState:
    """Go back one page; a no-op on the first page."""
    if state.pagination.page_index <= 0:
        return state
    return _with_page_index(state, state.pagination.page_index - 1)


def set_page_size(state: ViewState, size: int) -> ViewState:
    """
    Change the page size and return to the first page.

    Raises:
        InvalidPageSizeError: If `size` is not a positive integer.
    """
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise InvalidPageSizeError(size)
    return state.model_copy(
        update={"pagination": Pagination(page_index=0, page_size=size)}
    )


def clamp_page(state: ViewState, page_count: int) -> ViewState:
    """Pull page_index back into range after the page count changed."""
    return _with_page_index(state, min(state.pagination.page_index, _last_index(page_count)))


# -----------------------------------------------------------------------------
# Selection
# -----------------------------------------------------------------------------


def toggle_row_selection(state: ViewState, key: str) -> ViewState:
    if key in state.row_selection:
        return state.model_copy(update={"row_selection": state.row_selection - {key}})
    return state.model_copy(update={"row_selection": state.row_selection | {key}})


def select_keys(state: ViewState, keys: Iterable[str]) -> ViewState:
    merged = state.row_selection | frozenset(keys)
    if merged == state.row_selection:
        return state
    return state.model_copy(update={"row_selection": merged})


def deselect_keys(state: ViewState, keys: Iterable[str]) -> ViewState:
    remaining = state.row_selection - frozenset(keys)
    if remaining == state.row_selection:
        return state
    return state.model_copy(update={"row_selection": remaining})


def clear_selection(state: ViewState) -> ViewState:
    if not state.row_selection:
        return state
    return state.model_copy(update={"row_selection": frozenset()})


def prune_selection(state: ViewState, valid_keys: Iterable[str]) -> ViewState:
    """Drop selected keys that are not in `valid_keys`."""
    kept = state.row_selection & frozenset(valid_keys)
    if kept == state.row_selection:
        return state
    return state.model_copy(update={"row_selection": kept})


# -----------------------------------------------------------------------------
# Visibility
# -----------------------------------------------------------------------------


def set_column_visibility(state: ViewState, column: str, visible: bool) -> ViewState:
    if state.is_visible(column) == bool(visible) and column in state.column_visibility:
        return state
    visibility = dict(state.column_visibility)
    visibility[column] = bool(visible)
    return state.model_copy(update={"column_visibility": visibility})
