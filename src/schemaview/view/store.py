"""
ViewStore: the state container of one table view.

A store owns one ViewState, the dataset rows and the column descriptors. Named
actions run a pure reducer from schemaview.view.state, re-establish the view
invariants, and notify subscribers. Selectors are memoized: a cached result is
reused while the rows and fields are the same objects and the state slices it
depends on compare equal, with column filter values also matching in type.

Invariants re-established after every action
- page_index is clamped into [0, page_count - 1].
- row_selection only holds keys of the current dataset (settings.prune_selection).

Errors
- Unknown column names raise schemaview.core.errors.UnknownFieldError.
- Unknown row keys raise UnknownRowError.
- Non-positive page sizes raise InvalidPageSizeError.

Notes
- Two stores never share state; pass the store itself to consumers.
- Stores are single-writer and synchronous; listeners run inline in dispatch order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

import polars as pl

from schemaview.core.errors import UnknownFieldError
from schemaview.core.fields import FieldDescriptor, SchemaDefinition
from schemaview.core.grammar import SortDirection
from schemaview.core.introspect import IntrospectionOptions, introspect
from schemaview.core.pagination import PageMarker, sequence
from schemaview.core.serde import json_dumps_canonical
from schemaview.log import get_logger

from . import selectors as sel
from . import state as st
from .config import ViewSettings
from .errors import UnknownRowError
from .state import Pagination, ViewState

__all__ = ["ViewStore", "default_row_key"]

logger = get_logger(__name__)

RowKey = Callable[[Any, int], Any]
Listener = Callable[[ViewState], None]


def default_row_key(row: Any, index: int) -> str:
    """Use the row's "id" when present, otherwise its position."""
    value = sel.cell(row, "id")
    return str(index) if value is None else str(value)


def _typed_key(value: Any) -> Any:
    # 1, 1.0 and True compare equal but filter differently on text columns.
    if isinstance(value, Mapping):
        return (dict, tuple(sorted((str(k), _typed_key(v)) for k, v in value.items())))
    if isinstance(value, (list, tuple)):
        return (type(value), tuple(_typed_key(v) for v in value))
    if isinstance(value, (set, frozenset)):
        return (type(value), frozenset(_typed_key(v) for v in value))
    return (type(value), value)


def _same_state(a: ViewState, b: ViewState) -> bool:
    return a == b and _typed_key(a.column_filters) == _typed_key(b.column_filters)


class ViewStore:
    """
    State container for one schema-driven table view.

    Args:
        schema (Any): Object schema (native ObjectNode or pydantic model class) or
            an already introspected SchemaDefinition.
        rows (Iterable[Any]): Dataset rows (mappings or attribute objects).
        row_key (RowKey | None): `(row, index) -> key`; keys are compared as strings.
        initial (ViewState | Mapping | None): Starting state or snapshot dict.
        settings (ViewSettings | None): Configured defaults, used when `initial` is None.
        options (IntrospectionOptions | None): Passed to `introspect`.

    Examples:
        >>> store = ViewStore(invoice_schema, rows)            # doctest: +SKIP
        >>> store.set_global_filter("acme")                    # doctest: +SKIP
        >>> [r["id"] for r in store.page_rows]                 # doctest: +SKIP
    """

    def __init__(
        self,
        schema: Any,
        rows: Iterable[Any] = (),
        *,
        row_key: RowKey | None = None,
        initial: ViewState | Mapping[str, Any] | None = None,
        settings: ViewSettings | None = None,
        options: IntrospectionOptions | None = None,
    ) -> None:
        if isinstance(schema, SchemaDefinition):
            self._definition = schema
        else:
            self._definition = introspect(schema, options=options)
        self._fields: tuple[FieldDescriptor, ...] = self._definition.fields
        self._settings = settings or ViewSettings()
        self._row_key = row_key or default_row_key
        self._listeners: list[Listener] = []
        self._memo: dict[str, tuple[tuple[Any, ...], tuple[Any, ...], Any]] = {}

        self._rows: tuple[Any, ...] = ()
        self._keys: tuple[str, ...] = ()
        self._positions: dict[str, int] = {}
        self._load_rows(rows)

        self._state = self._settle(self._initial_state(initial))
        self._initial = st.clear_selection(self._state)

    # -------------------------------------------------------------------------
    # Construction helpers
    # -------------------------------------------------------------------------

    def default_state(self) -> ViewState:
        """State described by the configured settings."""
        return ViewState(pagination=Pagination(page_size=self._settings.page_size))

    def _initial_state(self, initial: ViewState | Mapping[str, Any] | None) -> ViewState:
        if initial is None:
            return self.default_state()
        state = initial if isinstance(initial, ViewState) else ViewState.from_snapshot(initial)
        return self._drop_unknown_columns(state)

    def _drop_unknown_columns(self, state: ViewState) -> ViewState:
        known = set(self._definition.field_names())
        unknown = (
            {s.column for s in state.sorting}
            | set(state.column_filters)
            | set(state.column_visibility)
        ) - known
        if not unknown:
            return state
        logger.warning("dropping unknown columns from view state: %s", sorted(unknown))
        return state.model_copy(
            update={
                "sorting": tuple(s for s in state.sorting if s.column in known),
                "column_filters": {
                    k: v for k, v in state.column_filters.items() if k in known
                },
                "column_visibility": {
                    k: v for k, v in state.column_visibility.items() if k in known
                },
            }
        )

    def _load_rows(self, rows: Iterable[Any]) -> None:
        self._rows = tuple(rows)
        keys = tuple(str(self._row_key(row, i)) for i, row in enumerate(self._rows))
        positions: dict[str, int] = {}
        for i, key in enumerate(keys):
            if key in positions:
                logger.warning(
                    "duplicate row key %r at index %d; keeping index %d", key, i, positions[key]
                )
                continue
            positions[key] = i
        self._keys = keys
        self._positions = positions

    # -------------------------------------------------------------------------
    # Subscription
    # -------------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with the new state after each change.

        Returns:
            Callable[[], None]: Unsubscribe function (idempotent).
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _settle(self, state: ViewState) -> ViewState:
        if self._settings.prune_selection:
            state = st.prune_selection(state, self._positions)
        pages = sel.page_count(self._filtered_count(state), state.pagination.page_size)
        return st.clamp_page(state, pages)

    def _commit(self, action: str, state: ViewState, *, force: bool = False) -> ViewState:
        state = self._settle(state)
        if not force and (state is self._state or _same_state(state, self._state)):
            return self._state
        self._state = state
        logger.debug(
            "view action %s: page %d, %d selected",
            action,
            state.pagination.page_index,
            len(state.row_selection),
        )
        for listener in list(self._listeners):
            listener(state)
        return state

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    def _check_column(self, column: str) -> str:
        if column not in self._definition:
            raise UnknownFieldError(column, known=self._definition.field_names())
        return column

    def _check_key(self, key: Any) -> str:
        k = str(key)
        if k not in self._positions:
            raise UnknownRowError(k)
        return k

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def set_global_filter(self, text: str | None) -> ViewState:
        return self._commit("set_global_filter", st.set_global_filter(self._state, text))

    def set_column_filter(self, column: str, value: Any) -> ViewState:
        self._check_column(column)
        return self._commit("set_column_filter", st.set_column_filter(self._state, column, value))

    def clear_column_filter(self, column: str) -> ViewState:
        self._check_column(column)
        return self._commit("clear_column_filter", st.clear_column_filter(self._state, column))

    def clear_filters(self) -> ViewState:
        return self._commit("clear_filters", st.clear_filters(self._state))

    def set_sort(
        self,
        column: str,
        direction: SortDirection | str | None,
        *,
        additive: bool | None = None,
    ) -> ViewState:
        """Set (or with None, clear) a column sort; `additive` defaults to settings.multi_sort."""
        self._check_column(column)
        multi = self._settings.multi_sort if additive is None else additive
        return self._commit(
            "set_sort", st.set_sort(self._state, column, direction, additive=multi)
        )

    def toggle_sort(self, column: str, *, additive: bool | None = None) -> ViewState:
        self._check_column(column)
        multi = self._settings.multi_sort if additive is None else additive
        return self._commit("toggle_sort", st.toggle_sort(self._state, column, additive=multi))

    def clear_sort(self) -> ViewState:
        return self._commit("clear_sort", st.clear_sort(self._state))

    def set_page_index(self, index: int) -> ViewState:
        return self._commit(
            "set_page_index", st.set_page_index(self._state, index, self.page_count)
        )

    def next_page(self) -> ViewState:
        return self._commit("next_page", st.next_page(self._state, self.page_count))

    def previous_page(self) -> ViewState:
        return self._commit("previous_page", st.previous_page(self._state))

    def set_page_size(self, size: int) -> ViewState:
        return self._commit("set_page_size", st.set_page_size(self._state, size))

    def toggle_row_selection(self, key: Any) -> ViewState:
        k = self._check_key(key)
        return self._commit("toggle_row_selection", st.toggle_row_selection(self._state, k))

    def select_rows(self, keys: Iterable[Any]) -> ViewState:
        checked = [self._check_key(k) for k in keys]
        return self._commit("select_rows", st.select_keys(self._state, checked))

    def deselect_rows(self, keys: Iterable[Any]) -> ViewState:
        checked = [self._check_key(k) for k in keys]
        return self._commit("deselect_rows", st.deselect_keys(self._state, checked))

    def select_all_on_page(self) -> ViewState:
        """Add every row of the current page to the selection."""
        return self._commit(
            "select_all_on_page", st.select_keys(self._state, self._page_keys())
        )

    def toggle_all_selection(self) -> ViewState:
        """Deselect the page when all of it is selected; otherwise select all of it."""
        keys = self._page_keys()
        if self.is_all_selected:
            return self._commit("toggle_all_selection", st.deselect_keys(self._state, keys))
        return self._commit("toggle_all_selection", st.select_keys(self._state, keys))

    def clear_selection(self) -> ViewState:
        return self._commit("clear_selection", st.clear_selection(self._state))

    def set_column_visibility(self, column: str, visible: bool) -> ViewState:
        self._check_column(column)
        return self._commit(
            "set_column_visibility", st.set_column_visibility(self._state, column, visible)
        )

    def toggle_column_visibility(self, column: str) -> ViewState:
        self._check_column(column)
        return self.set_column_visibility(column, not self._state.is_visible(column))

    def set_rows(self, rows: Iterable[Any]) -> ViewState:
        """
        Replace the dataset.

        Selection keys absent from the new rows are dropped when
        settings.prune_selection is on (the default) and the page index is clamped.
        Listeners are always notified since the derived rows changed.
        """
        self._load_rows(rows)
        return self._commit("set_rows", self._state, force=True)

    def reset(self) -> ViewState:
        """
        Return to the state the store was created with.

        Sort, filters, pagination and visibility come back as supplied through
        `initial` (or the settings defaults); the selection is cleared.
        """
        return self._commit("reset", self._initial)

    # -------------------------------------------------------------------------
    # Memoized selectors
    # -------------------------------------------------------------------------

    def _memoized(
        self,
        slot: str,
        refs: tuple[Any, ...],
        values: tuple[Any, ...],
        compute: Callable[[], Any],
    ) -> Any:
        hit = self._memo.get(slot)
        if hit is not None:
            old_refs, old_values, result = hit
            if all(a is b for a, b in zip(old_refs, refs)) and old_values == values:
                return result
        result = compute()
        self._memo[slot] = (refs, values, result)
        return result

    def _frame(self) -> pl.DataFrame:
        return self._memoized(
            "frame",
            (self._rows, self._fields),
            (),
            lambda: sel.build_frame(self._rows, self._fields),
        )

    def _filter_values(self, state: ViewState) -> tuple[Any, ...]:
        return (
            state.global_filter,
            _typed_key(state.column_filters),
            state.column_visibility,
        )

    def _filtered_indices(self, state: ViewState) -> list[int]:
        return self._memoized(
            "filtered",
            (self._rows, self._fields),
            self._filter_values(state),
            lambda: sel.filtered_indices(self._rows, state, self._fields, frame=self._frame()),
        )

    def _filtered_count(self, state: ViewState) -> int:
        return len(self._filtered_indices(state))

    def _sorted_indices(self) -> list[int]:
        state = self._state
        return self._memoized(
            "sorted",
            (self._rows, self._fields),
            (*self._filter_values(state), state.sorting),
            lambda: sel.sorted_indices(self._rows, state, self._fields, frame=self._frame()),
        )

    def _page_indices(self) -> list[int]:
        return sel.page_slice(self._sorted_indices(), self._state.pagination)

    def _page_keys(self) -> list[str]:
        return [self._keys[i] for i in self._page_indices()]

    # -------------------------------------------------------------------------
    # Read API
    # -------------------------------------------------------------------------

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def definition(self) -> SchemaDefinition:
        return self._definition

    @property
    def fields(self) -> tuple[FieldDescriptor, ...]:
        return self._fields

    @property
    def settings(self) -> ViewSettings:
        return self._settings

    @property
    def rows(self) -> tuple[Any, ...]:
        return self._rows

    def key_of(self, index: int) -> str:
        return self._keys[index]

    @property
    def filtered_rows(self) -> list[Any]:
        """Rows surviving the filters, in dataset order."""
        return [self._rows[i] for i in self._filtered_indices(self._state)]

    @property
    def sorted_rows(self) -> list[Any]:
        """Filtered rows in sort order."""
        return [self._rows[i] for i in self._sorted_indices()]

    @property
    def page_rows(self) -> list[Any]:
        return [self._rows[i] for i in self._page_indices()]

    @property
    def page_keys(self) -> list[str]:
        return self._page_keys()

    @property
    def page_count(self) -> int:
        return sel.page_count(
            self._filtered_count(self._state), self._state.pagination.page_size
        )

    @property
    def can_previous_page(self) -> bool:
        return sel.can_previous_page(self._state)

    @property
    def can_next_page(self) -> bool:
        return sel.can_next_page(self._state, self.page_count)

    @property
    def selected_rows(self) -> list[Any]:
        """Selected rows in dataset order, regardless of filters."""
        selected = self._state.row_selection
        return [row for row, key in zip(self._rows, self._keys) if key in selected]

    @property
    def is_all_selected(self) -> bool:
        """Every row of a non-empty current page is selected."""
        keys = self._page_keys()
        return bool(keys) and all(k in self._state.row_selection for k in keys)

    @property
    def is_some_selected(self) -> bool:
        """Some, but not all, rows of the current page are selected."""
        keys = self._page_keys()
        return any(k in self._state.row_selection for k in keys) and not self.is_all_selected

    @property
    def visible_columns(self) -> list[FieldDescriptor]:
        return sel.visible_columns(self._fields, self._state)

    @property
    def meta(self) -> sel.TableMeta:
        return sel.table_meta(
            len(self._rows),
            self._filtered_count(self._state),
            len(self._page_indices()),
            self._state,
        )

    @property
    def page_size_options(self) -> tuple[int, ...]:
        """Configured options, with the current page size merged in (sorted)."""
        options = set(self._settings.page_size_options)
        options.add(self._state.pagination.page_size)
        return tuple(sorted(options))

    def pagination_strip(self, max_visible: int | None = None) -> list[PageMarker]:
        """Page numbers and ellipsis markers around the current page (1-based)."""
        return sequence(
            self._state.pagination.page_index + 1,
            self.page_count,
            max_visible if max_visible is not None else self._settings.max_visible_pages,
        )

    def snapshot(self) -> dict[str, Any]:
        """JSON-safe dict of the current state; restore with `initial=`."""
        return self._state.to_snapshot()

    def to_json(self) -> str:
        return json_dumps_canonical(self.snapshot())

    def rows_by_key(self, keys: Sequence[Any]) -> list[Any]:
        return [self._rows[self._positions[self._check_key(k)]] for k in keys]
