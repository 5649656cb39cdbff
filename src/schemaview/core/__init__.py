"""
Core package aggregator for schemaview contracts (grammar, nodes, introspection, validation, pagination).

## Contracts (single source of truth)
- Grammar: FieldType/NodeKind/SortDirection enums, kind classification, labels.
- Nodes: tagged-variant SchemaNode interface plus a native builder DSL.
- Pydantic adapter: pydantic models exposed as SchemaNode trees.
- Fields: FieldDescriptor / SchemaDefinition models.
- Introspect: schema -> SchemaDefinition, cached by schema identity.
- Validate: schema validation with dotted path -> message maps.
- Pagination: page strip sequencing with ellipsis markers.

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/network IO.
- Fail-open policy: unknown schema kinds render as string fields.
- Programmer errors (unknown field names) raise UnknownFieldError.

## Downstream usage
- schemaview.view: builds table columns from SchemaDefinition.fields and picks
  filter/sort semantics from FieldType.

## Examples
```python
from schemaview.core import nodes as s
from schemaview.core import introspect, validate, sequence

invoice = s.obj({
    "name": s.string(min=1),
    "amount": s.number().optional(),
    "status": s.enum(["draft", "approved"]),
})
definition = introspect(invoice)
[f.name for f in definition.fields]  # ['name', 'amount', 'status']
validate(invoice, {"status": "draft"}).errors  # {'name': 'Required'}
sequence(5, 20)  # [1, 'ellipsis', 4, 5, 6, 'ellipsis', 20]
```
"""

from __future__ import annotations

from .errors import SchemaError, UnknownFieldError
from .fields import FieldDescriptor, FieldValidation, SchemaDefinition, UiHints
from .grammar import FieldType, NodeKind, SortDirection, to_label
from .introspect import IntrospectionOptions, clear_cache, introspect
from .pagination import sequence
from .validate import ValidationResult, format_errors, validate, validate_field

__all__ = [
    "SchemaError",
    "UnknownFieldError",
    "FieldDescriptor",
    "FieldValidation",
    "SchemaDefinition",
    "UiHints",
    "FieldType",
    "NodeKind",
    "SortDirection",
    "to_label",
    "IntrospectionOptions",
    "clear_cache",
    "introspect",
    "sequence",
    "ValidationResult",
    "format_errors",
    "validate",
    "validate_field",
]
