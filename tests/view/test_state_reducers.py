from __future__ import annotations

import pytest

from schemaview.core.grammar import SortDirection
from schemaview.view import state as st
from schemaview.view.errors import InvalidPageSizeError, ViewConfigError
from schemaview.view.state import Pagination, SortSpec, ViewState


def _on_page(index: int, size: int = 10) -> ViewState:
    return ViewState(pagination=Pagination(page_index=index, page_size=size))


def test_filter_changes_reset_page_index() -> None:
    s = _on_page(3)
    assert st.set_global_filter(s, "acme").pagination.page_index == 0
    assert st.set_column_filter(s, "status", "approved").pagination.page_index == 0
    assert st.clear_column_filter(s, "status").pagination.page_index == 0
    assert st.clear_filters(s).pagination.page_index == 0


def test_page_size_change_resets_page_index_and_validates() -> None:
    s = st.set_page_size(_on_page(3), 25)
    assert s.pagination == Pagination(page_index=0, page_size=25)
    for bad in (0, -5):
        with pytest.raises(InvalidPageSizeError):
            st.set_page_size(s, bad)


def test_empty_column_filter_value_clears_filter() -> None:
    s = st.set_column_filter(ViewState(), "status", "approved")
    assert s.column_filters == {"status": "approved"}
    assert st.set_column_filter(s, "status", "").column_filters == {}
    assert st.set_column_filter(s, "status", []).column_filters == {}
    assert st.set_column_filter(s, "status", None).column_filters == {}


def test_single_sort_replaces_and_additive_appends() -> None:
    s = st.set_sort(ViewState(), "amount", "asc")
    s = st.set_sort(s, "name", SortDirection.DESC)
    assert s.sorting == (SortSpec(column="name", direction=SortDirection.DESC),)

    s = st.set_sort(s, "amount", "asc", additive=True)
    assert [x.column for x in s.sorting] == ["name", "amount"]

    s = st.set_sort(s, "name", "asc", additive=True)
    assert s.sorting[0] == SortSpec(column="name", direction=SortDirection.ASC)

    s = st.set_sort(s, "name", None)
    assert [x.column for x in s.sorting] == ["amount"]


def test_toggle_sort_cycles() -> None:
    s = st.toggle_sort(ViewState(), "amount")
    assert s.sort_direction("amount") == SortDirection.ASC
    s = st.toggle_sort(s, "amount")
    assert s.sort_direction("amount") == SortDirection.DESC
    s = st.toggle_sort(s, "amount")
    assert s.sorting == ()


def test_sort_change_keeps_page_index() -> None:
    assert st.set_sort(_on_page(2), "amount", "desc").pagination.page_index == 2


def test_page_navigation_clamps() -> None:
    s = _on_page(0)
    assert st.previous_page(s) is s
    assert st.set_page_index(s, 99, page_count=3).pagination.page_index == 2
    assert st.set_page_index(s, -4, page_count=3).pagination.page_index == 0
    last = _on_page(2)
    assert st.next_page(last, page_count=3) is last
    assert st.next_page(s, page_count=3).pagination.page_index == 1
    assert st.clamp_page(_on_page(5), page_count=2).pagination.page_index == 1
    assert st.clamp_page(_on_page(5), page_count=0).pagination.page_index == 0


def test_selection_reducers() -> None:
    s = st.toggle_row_selection(ViewState(), "a")
    s = st.select_keys(s, ["b", "c"])
    assert s.row_selection == frozenset({"a", "b", "c"})
    s = st.toggle_row_selection(s, "a")
    assert s.row_selection == frozenset({"b", "c"})
    s = st.deselect_keys(s, ["b"])
    assert s.row_selection == frozenset({"c"})
    assert st.prune_selection(s, ["x"]).row_selection == frozenset()
    assert st.clear_selection(s).row_selection == frozenset()


def test_no_op_reducers_return_same_instance() -> None:
    s = ViewState()
    assert st.clear_sort(s) is s
    assert st.clear_selection(s) is s
    assert st.prune_selection(s, []) is s
    assert st.set_sort(s, "amount", None) is s


def test_column_visibility() -> None:
    s = ViewState()
    assert s.is_visible("amount") is True
    s = st.set_column_visibility(s, "amount", False)
    assert s.is_visible("amount") is False
    assert st.set_column_visibility(s, "amount", False) is s


def test_reducers_do_not_mutate_input() -> None:
    s = ViewState()
    st.set_column_filter(s, "status", "draft")
    st.toggle_row_selection(s, "a")
    assert s == ViewState()


def test_snapshot_round_trip_is_json_safe() -> None:
    s = ViewState(
        sorting=(SortSpec(column="amount", direction=SortDirection.DESC),),
        column_filters={"status": ["approved"], "amount": {"min": 10, "max": None}},
        global_filter="acme",
        pagination=Pagination(page_index=1, page_size=20),
        row_selection=frozenset({"b", "a"}),
        column_visibility={"notes": False},
    )
    snap = s.to_snapshot()
    assert snap["sorting"] == [{"column": "amount", "direction": "desc"}]
    assert snap["row_selection"] == ["a", "b"]
    assert ViewState.from_snapshot(snap) == s
    assert ViewState.from_snapshot(snap).fingerprint() == s.fingerprint()


def test_malformed_snapshot_raises_config_error() -> None:
    with pytest.raises(ViewConfigError):
        ViewState.from_snapshot({"pagination": {"page_index": -1, "page_size": 10}})
    with pytest.raises(ViewConfigError):
        ViewState.from_snapshot({"bogus": 1})
