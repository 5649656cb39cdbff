"""
schemaview.view: Tabular view state layer.

## Responsibilities
- Keep one table view's sort/filter/page/selection/visibility state consistent.
- Derive filtered, sorted and paged rows from in-memory datasets (polars-backed).
- Export the current view as headers + formatted rows, CSV or JSON text.

## Public API
- ViewSettings: Configured defaults (env > TOML > defaults from schemaview.core.constants).
- ViewState: Frozen state model; pure reducers live in schemaview.view.state.
- ViewStore: Container with named actions, memoized selectors and subscribers.
- export_data / to_csv / to_json: Export helpers.

## Import DAG discipline
- Depends on stdlib, pydantic, polars and schemaview.core.*.
- schemaview.core never imports this package.

## Examples
```python
from schemaview.core import nodes as s
from schemaview.view import ViewStore

invoice = s.obj({"id": s.string(), "amount": s.number(), "status": s.enum(["draft", "approved"])})
store = ViewStore(invoice, rows)  # doctest: +SKIP
store.set_column_filter("status", "approved")  # doctest: +SKIP
store.page_count, store.pagination_strip()  # doctest: +SKIP
```
"""

from __future__ import annotations

from .config import ViewSettings
from .errors import InvalidPageSizeError, UnknownRowError, ViewConfigError, ViewError
from .export import ExportData, export_data, to_csv, to_json
from .selectors import TableMeta
from .state import Pagination, SortSpec, ViewState
from .store import ViewStore, default_row_key

__all__ = [
    "ViewSettings",
    "ViewError",
    "ViewConfigError",
    "UnknownRowError",
    "InvalidPageSizeError",
    "ExportData",
    "export_data",
    "to_csv",
    "to_json",
    "TableMeta",
    "Pagination",
    "SortSpec",
    "ViewState",
    "ViewStore",
    "default_row_key",
]
