"""
Canonical schemaview vocabulary and naming helpers.

Defines the closed field-type family, schema node kinds, sort directions, and the
zero-IO helpers that normalize names and kinds across the stack.

Responsibilities
- Define enums with lower_snake serialized values.
- Map free-form node kind strings (as reported by schema adapters) onto NodeKind.
- Map NodeKind onto the closed FieldType family, failing open to STRING.
- Derive human-readable labels from field names.

Design principles
-----------------
1) One naming standard:
   - Enum classes: PascalCase
   - Enum member names: UPPER_SNAKE (Python constants)
   - Enum serialized values (snapshots, descriptors): lower_snake

2) Fail open:
   - Classification is total. Anything not recognized is NodeKind.UNKNOWN and
     renders as FieldType.STRING, so introspection never blocks rendering.

Downstream usage
----------------
- schemaview.core.introspect classifies unwrapped nodes with `field_type_for_kind`
  and labels fields with `to_label`.
- schemaview.core.pydantic_adapter reports kinds through `kind_from_value`.
- schemaview.view.selectors picks compare/filter semantics from FieldType.

Examples
--------
>>> from schemaview.core.grammar import to_label, kind_from_value, NodeKind
>>> to_label("vendorLegalName")
'Vendor Legal Name'
>>> to_label("tax_code")
'Tax Code'
>>> kind_from_value("ZodOptional") == NodeKind.OPTIONAL
True
"""

from __future__ import annotations

import re
from collections.abc import Hashable, Iterable
from enum import Enum
from typing import Any

__all__ = [
    "FieldType",
    "NodeKind",
    "SortDirection",
    "WRAPPER_KINDS",
    "is_lower_snake",
    "kind_from_value",
    "field_type_for_kind",
    "to_label",
    "dedupe_preserving_order",
    "ensure_all_enum_values_lower_snake",
]


class FieldType(Enum):
    """
    Semantic primitive family of a field, independent of any wrapper type.

    Serialized values appear in:
      - FieldDescriptor.type
      - view snapshots (indirectly, through column filter semantics)
    """

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ENUM = "enum"
    ARRAY = "array"
    OBJECT = "object"


class NodeKind(Enum):
    """
    Tag of a schema node.

    Wrapper kinds (OPTIONAL, NULLABLE, DEFAULT) carry an inner node reachable
    through `SchemaNode.unwrap()`. UNKNOWN is the explicit variant for anything
    an adapter cannot name; it classifies as FieldType.STRING.
    """

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ENUM = "enum"
    ARRAY = "array"
    OBJECT = "object"
    OPTIONAL = "optional"
    NULLABLE = "nullable"
    DEFAULT = "default"
    UNKNOWN = "unknown"


class SortDirection(Enum):
    """Sort direction of one entry in ViewState.sorting."""

    ASC = "asc"
    DESC = "desc"


WRAPPER_KINDS: frozenset[NodeKind] = frozenset(
    {NodeKind.OPTIONAL, NodeKind.NULLABLE, NodeKind.DEFAULT}
)

_LOWER_SNAKE_RE = re.compile(r"^[a-z][a-z0-9_]*$")
_UPPER_RE = re.compile(r"(?<!^)([A-Z])")
_KIND_WORD_RE = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")

# Whole-word probes, checked in order against the words of a kind name. Wrappers
# come first so that names such as "ZodOptionalString" are still treated as wrappers.
_KIND_PROBES: tuple[tuple[str, NodeKind], ...] = (
    ("optional", NodeKind.OPTIONAL),
    ("nullable", NodeKind.NULLABLE),
    ("default", NodeKind.DEFAULT),
    ("enum", NodeKind.ENUM),
    ("literal", NodeKind.ENUM),
    ("string", NodeKind.STRING),
    ("str", NodeKind.STRING),
    ("number", NodeKind.NUMBER),
    ("int", NodeKind.NUMBER),
    ("integer", NodeKind.NUMBER),
    ("float", NodeKind.NUMBER),
    ("decimal", NodeKind.NUMBER),
    ("bigint", NodeKind.NUMBER),
    ("bool", NodeKind.BOOLEAN),
    ("boolean", NodeKind.BOOLEAN),
    ("date", NodeKind.DATE),
    ("datetime", NodeKind.DATE),
    ("time", NodeKind.DATE),
    ("timestamp", NodeKind.DATE),
    ("array", NodeKind.ARRAY),
    ("list", NodeKind.ARRAY),
    ("tuple", NodeKind.ARRAY),
    ("set", NodeKind.ARRAY),
    ("object", NodeKind.OBJECT),
    ("record", NodeKind.OBJECT),
    ("dict", NodeKind.OBJECT),
    ("model", NodeKind.OBJECT),
)

_FIELD_TYPE_BY_KIND: dict[NodeKind, FieldType] = {
    NodeKind.STRING: FieldType.STRING,
    NodeKind.NUMBER: FieldType.NUMBER,
    NodeKind.BOOLEAN: FieldType.BOOLEAN,
    NodeKind.DATE: FieldType.DATE,
    NodeKind.ENUM: FieldType.ENUM,
    NodeKind.ARRAY: FieldType.ARRAY,
    NodeKind.OBJECT: FieldType.OBJECT,
}


def is_lower_snake(s: str) -> bool:
    """Return True if `s` is lower_snake (starts with a letter; [a-z0-9_] only)."""
    return bool(_LOWER_SNAKE_RE.match(s))


def kind_from_value(value: NodeKind | str | None) -> NodeKind:
    """
    Resolve a node kind from a NodeKind or a free-form kind name.

    Args:
        value (NodeKind | str | None): Kind tag or adapter-specific kind name,
            e.g. "ZodNullable", "datetime", "Literal".

    Returns:
        NodeKind: Exact enum value when `value` is one, otherwise the first
        probe that equals a word of the name, otherwise UNKNOWN.
    """
    if isinstance(value, NodeKind):
        return value
    if not isinstance(value, str) or not value:
        return NodeKind.UNKNOWN
    lowered = value.strip().lower()
    try:
        return NodeKind(lowered)
    except ValueError:
        pass
    words = {w.lower() for w in _KIND_WORD_RE.findall(value)}
    for probe, kind in _KIND_PROBES:
        if probe in words:
            return kind
    return NodeKind.UNKNOWN


def field_type_for_kind(kind: NodeKind) -> FieldType:
    """
    Classify a base (non-wrapper) node kind into the closed FieldType family.

    Wrapper kinds and UNKNOWN fall back to FieldType.STRING.
    """
    return _FIELD_TYPE_BY_KIND.get(kind, FieldType.STRING)


def to_label(name: str) -> str:
    """
    Convert a camelCase or snake_case field name into a Title Case label.

    A space is inserted before every internal uppercase letter and underscores
    become spaces; each word is then capitalized with the remainder lowercased.
    The transform does not consult the locale.

    Args:
        name (str): Field name.

    Returns:
        str: Label such as "Vendor Legal Name" for "vendorLegalName".

    Examples:
        >>> to_label("id")
        'Id'
        >>> to_label("invoice_dueDate")
        'Invoice Due Date'
    """
    spaced = _UPPER_RE.sub(r" \1", name.replace("_", " "))
    return " ".join(word[:1].upper() + word[1:].lower() for word in spaced.split())


def dedupe_preserving_order(items: Iterable[Hashable]) -> tuple[Any, ...]:
    seen: set[Hashable] = set()
    ordered: list[Any] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return tuple(ordered)


def ensure_all_enum_values_lower_snake(enums: Iterable[type[Enum]]) -> None:
    """
    Assert that every member value of the given enums is lower_snake.

    Raises:
        ValueError: Naming the first offending enum member.
    """
    for enum_cls in enums:
        for member in enum_cls:
            if not isinstance(member.value, str) or not is_lower_snake(member.value):
                raise ValueError(
                    f"{enum_cls.__name__}.{member.name} value {member.value!r} is not lower_snake"
                )
