from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone

import pytest

from schemaview.core import nodes as s
from schemaview.core.introspect import introspect
from schemaview.view import selectors as sel
from schemaview.view import state as st
from schemaview.view.state import Pagination, ViewState

SCHEMA = s.obj(
    {
        "id": s.string(),
        "name": s.string(),
        "amount": s.number().optional(),
        "status": s.enum(["draft", "approved", "rejected"]),
        "paid": s.boolean(),
        "issued": s.date_().optional(),
        "tags": s.array(s.string()).optional(),
    }
)
FIELDS = introspect(SCHEMA).fields

ROWS = [
    {"id": "1", "name": "Acme Ltd", "amount": 300, "status": "draft", "paid": False,
     "issued": "2024-03-01", "tags": ["urgent"]},
    {"id": "2", "name": "Globex", "amount": 100, "status": "approved", "paid": True,
     "issued": date(2024, 1, 15), "tags": []},
    {"id": "3", "name": "Initech", "amount": None, "status": "approved", "paid": False,
     "issued": None, "tags": ["net30", "urgent"]},
    {"id": "4", "name": "acme corp", "amount": 100, "status": "rejected", "paid": True,
     "issued": datetime(2024, 2, 1, 12, tzinfo=timezone.utc), "tags": None},
]


def _ids(rows) -> list[str]:
    return [r["id"] for r in rows]


def test_no_filters_returns_all_rows_in_input_order() -> None:
    assert _ids(sel.filtered_rows(ROWS, ViewState(), FIELDS)) == ["1", "2", "3", "4"]


def test_global_filter_is_case_insensitive_substring() -> None:
    s0 = st.set_global_filter(ViewState(), "ACME")
    assert _ids(sel.filtered_rows(ROWS, s0, FIELDS)) == ["1", "4"]


def test_global_filter_skips_hidden_columns() -> None:
    s0 = st.set_global_filter(ViewState(), "urgent")
    assert _ids(sel.filtered_rows(ROWS, s0, FIELDS)) == ["1", "3"]
    hidden = st.set_column_visibility(s0, "tags", False)
    assert sel.filtered_rows(ROWS, hidden, FIELDS) == []


def test_enum_filter_is_exact_with_membership_lists() -> None:
    s0 = st.set_column_filter(ViewState(), "status", "approved")
    assert _ids(sel.filtered_rows(ROWS, s0, FIELDS)) == ["2", "3"]
    s1 = st.set_column_filter(ViewState(), "status", ["draft", "rejected"])
    assert _ids(sel.filtered_rows(ROWS, s1, FIELDS)) == ["1", "4"]
    s2 = st.set_column_filter(ViewState(), "status", "appro")
    assert sel.filtered_rows(ROWS, s2, FIELDS) == []


def test_boolean_filter() -> None:
    s0 = st.set_column_filter(ViewState(), "paid", True)
    assert _ids(sel.filtered_rows(ROWS, s0, FIELDS)) == ["2", "4"]


def test_number_filter_equality_and_range() -> None:
    eq = st.set_column_filter(ViewState(), "amount", 100)
    assert _ids(sel.filtered_rows(ROWS, eq, FIELDS)) == ["2", "4"]
    rng = st.set_column_filter(ViewState(), "amount", {"min": 150, "max": None})
    assert _ids(sel.filtered_rows(ROWS, rng, FIELDS)) == ["1"]
    pair = st.set_column_filter(ViewState(), "amount", (100, 300))
    assert _ids(sel.filtered_rows(ROWS, pair, FIELDS)) == ["1", "2", "4"]


def test_date_range_filter_normalizes_inputs() -> None:
    bounds = {"min": "2024-01-31", "max": date(2024, 2, 29)}
    s0 = st.set_column_filter(ViewState(), "issued", bounds)
    assert _ids(sel.filtered_rows(ROWS, s0, FIELDS)) == ["4"]


def test_string_and_array_filters_are_substring() -> None:
    s0 = st.set_column_filter(ViewState(), "name", "tech")
    assert _ids(sel.filtered_rows(ROWS, s0, FIELDS)) == ["3"]
    s1 = st.set_column_filter(ViewState(), "tags", "net")
    assert _ids(sel.filtered_rows(ROWS, s1, FIELDS)) == ["3"]


def test_filters_are_anded() -> None:
    s0 = st.set_global_filter(ViewState(), "acme")
    s0 = st.set_column_filter(s0, "paid", True)
    assert _ids(sel.filtered_rows(ROWS, s0, FIELDS)) == ["4"]


def test_unknown_filter_columns_are_ignored() -> None:
    s0 = ViewState(column_filters={"nope": "x"})
    assert len(sel.filtered_rows(ROWS, s0, FIELDS)) == 4


def test_sort_is_stable_on_ties_in_both_directions() -> None:
    asc = st.set_sort(ViewState(), "amount", "asc")
    assert _ids(sel.sorted_rows(ROWS, asc, FIELDS)) == ["2", "4", "1", "3"]
    desc = st.set_sort(ViewState(), "amount", "desc")
    # ties keep input order and nulls stay last
    assert _ids(sel.sorted_rows(ROWS, desc, FIELDS)) == ["1", "2", "4", "3"]


def test_sort_by_date_boolean_and_multi_key() -> None:
    by_date = st.set_sort(ViewState(), "issued", "asc")
    assert _ids(sel.sorted_rows(ROWS, by_date, FIELDS)) == ["2", "4", "1", "3"]
    by_bool = st.set_sort(ViewState(), "paid", "asc")
    assert _ids(sel.sorted_rows(ROWS, by_bool, FIELDS)) == ["1", "3", "2", "4"]
    multi = st.set_sort(by_bool, "amount", "desc", additive=True)
    assert _ids(sel.sorted_rows(ROWS, multi, FIELDS)) == ["1", "3", "2", "4"]
    multi = st.set_sort(st.set_sort(ViewState(), "status", "asc"), "name", "desc", additive=True)
    assert _ids(sel.sorted_rows(ROWS, multi, FIELDS)) == ["3", "2", "1", "4"]


def test_page_rows_and_page_count() -> None:
    s0 = ViewState(pagination=Pagination(page_index=1, page_size=3))
    assert _ids(sel.page_rows(ROWS, s0, FIELDS)) == ["4"]
    assert sel.page_count(4, 3) == 2
    assert sel.page_count(0, 10) == 1
    assert sel.page_count(30, 10) == 3
    assert sel.page_count(31, 10) == 4


def test_empty_dataset() -> None:
    assert sel.filtered_rows([], ViewState(), FIELDS) == []
    assert sel.page_rows([], st.set_sort(ViewState(), "amount", "asc"), FIELDS) == []
    meta = sel.table_meta(0, 0, 0, ViewState())
    assert meta.page_count == 1 and meta.is_empty and not meta.is_filtered


@dataclass
class _Obj:
    id: str
    name: str
    amount: float


def test_attribute_rows_are_supported() -> None:
    rows = [_Obj("a", "x", 2.0), _Obj("b", "y", 1.0)]
    s0 = st.set_sort(ViewState(), "amount", "asc")
    assert [r.id for r in sel.sorted_rows(rows, s0, FIELDS)] == ["b", "a"]


@pytest.mark.parametrize(
    ("value", "expected"),
    [({"id": 1}, 1), (_Obj("a", "x", 1.0), "a"), ({}, None)],
)
def test_cell(value, expected) -> None:
    assert sel.cell(value, "id") == expected
