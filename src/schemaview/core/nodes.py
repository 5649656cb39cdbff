"""
Tagged-variant schema nodes and the capability interface the introspector reads.

A schema is a tree of nodes. Every node carries a `kind` tag (NodeKind or a
free-form kind name) and answers `unwrap()`: wrapper nodes (optional, nullable,
default) return their inner node, base nodes return None. The introspector and
validator only talk to this interface, so any validation library can be plugged
in by an adapter (see schemaview.core.pydantic_adapter).

Responsibilities
- Define the SchemaNode / ObjectSchema protocols (capabilities a-e of a schema input).
- Provide a native node implementation with a small builder DSL.
- Validate values against native nodes, reporting Issue(path, message) items.

Notes
- Zero-IO; stdlib only.
- Nodes are immutable and compare by identity, so they can key identity caches.
- A missing object key is represented by the MISSING sentinel, distinct from None.

Examples
--------
>>> from schemaview.core import nodes as s
>>> invoice = s.obj(
...     {
...         "name": s.string(min=1),
...         "amount": s.number(min=0).optional(),
...         "status": s.enum(["draft", "approved"]),
...     },
...     name="invoice",
... )
>>> [i.message for i in invoice.validate({"name": "", "status": "draft"})]
['String must contain at least 1 character(s)']
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Protocol, runtime_checkable

from .grammar import NodeKind, kind_from_value

__all__ = [
    "MISSING",
    "Issue",
    "PathSegment",
    "SchemaNode",
    "ObjectSchema",
    "Node",
    "ObjectNode",
    "string",
    "number",
    "boolean",
    "date_",
    "enum",
    "array",
    "obj",
    "unknown",
    "optional",
    "nullable",
    "default",
]

PathSegment = str | int


class _Missing:
    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass(frozen=True)
class Issue:
    """
    One validation failure.

    Attributes:
        path (tuple[str | int, ...]): Location of the failing value; strings are
            object keys, ints are array indices. Empty for the root value.
        message (str): Human-readable message.
    """

    path: tuple[PathSegment, ...]
    message: str

    def prefixed(self, *segments: PathSegment) -> Issue:
        return Issue(path=(*segments, *self.path), message=self.message)


@runtime_checkable
class SchemaNode(Protocol):
    """
    Capability interface of one schema node.

    Only `kind` and `unwrap` are required by the introspector's unwrap loop;
    the remaining capabilities are read with getattr and treated as absent when
    an adapter does not provide them.
    """

    @property
    def kind(self) -> NodeKind | str: ...

    def unwrap(self) -> SchemaNode | None: ...

    def validate(self, value: Any) -> list[Issue]: ...


@runtime_checkable
class ObjectSchema(SchemaNode, Protocol):
    """A node exposing an ordered set of named field nodes."""

    def fields(self) -> Mapping[str, SchemaNode]: ...


Validator = Callable[[Any], list[Issue]]


@dataclass(frozen=True, eq=False)
class Node:
    """
    Native schema node.

    Attributes:
        kind (NodeKind): Variant tag.
        inner (Node | None): Wrapped node for wrapper kinds.
        values (tuple[Any, ...]): Enum literals (ENUM only).
        items (Node | None): Element node (ARRAY only).
        min (float | None): Numeric bound, or length bound for strings/arrays.
        max (float | None): Numeric bound, or length bound for strings/arrays.
        pattern (str | None): Regex a string must match (re.search semantics).
        default_value (Any): Value substituted for MISSING (DEFAULT only).
        description (str | None): Documentation carried to the descriptor.
        placeholder (str | None): Presentation hint.
        readonly (bool): Presentation hint.
        validator (Callable | None): Replacement validation routine, used by
            adapters that delegate to a foreign validation library.
    """

    kind: NodeKind
    inner: Node | None = None
    values: tuple[Any, ...] = ()
    items: Node | None = None
    min: float | None = None
    max: float | None = None
    pattern: str | None = None
    default_value: Any = MISSING
    description: str | None = None
    placeholder: str | None = None
    readonly: bool = False
    validator: Validator | None = field(default=None, repr=False)

    # -- capability interface -------------------------------------------------

    def unwrap(self) -> Node | None:
        return self.inner

    def enum_values(self) -> tuple[Any, ...]:
        return self.values

    def constraints(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.min is not None:
            out["min"] = self.min
        if self.max is not None:
            out["max"] = self.max
        if self.pattern is not None:
            out["pattern"] = self.pattern
        return out

    # -- builder chaining -----------------------------------------------------

    def optional(self) -> Node:
        return optional(self)

    def nullable(self) -> Node:
        return nullable(self)

    def default(self, value: Any) -> Node:
        return default(self, value)

    def describe(self, text: str) -> Node:
        return replace(self, description=text)

    def hints(self, *, placeholder: str | None = None, readonly: bool = False) -> Node:
        return replace(self, placeholder=placeholder, readonly=readonly)

    # -- validation -----------------------------------------------------------

    def validate(self, value: Any) -> list[Issue]:
        if self.validator is not None:
            return list(self.validator(value))
        return _validate_node(self, value)


@dataclass(frozen=True, eq=False)
class ObjectNode(Node):
    """
    Object node with ordered named fields.

    Attributes:
        shape (tuple[tuple[str, Node], ...]): (name, node) pairs in declaration order.
        name (str | None): Schema name used for SchemaDefinition.name.
    """

    shape: tuple[tuple[str, Node], ...] = ()
    name: str | None = None

    def fields(self) -> dict[str, Node]:
        return dict(self.shape)

    def validate(self, value: Any) -> list[Issue]:
        if self.validator is not None:
            return list(self.validator(value))
        if not isinstance(value, Mapping):
            return [Issue((), f"Expected object, received {_type_name(value)}")]
        issues: list[Issue] = []
        for key, node in self.shape:
            for issue in node.validate(value.get(key, MISSING)):
                issues.append(issue.prefixed(key))
        return issues


# =============================================================================
# Builders
# =============================================================================


def string(
    *,
    min: int | None = None,
    max: int | None = None,
    pattern: str | None = None,
    description: str | None = None,
) -> Node:
    return Node(NodeKind.STRING, min=min, max=max, pattern=pattern, description=description)


def number(
    *,
    min: float | None = None,
    max: float | None = None,
    description: str | None = None,
) -> Node:
    return Node(NodeKind.NUMBER, min=min, max=max, description=description)


def boolean(*, description: str | None = None) -> Node:
    return Node(NodeKind.BOOLEAN, description=description)


def date_(*, description: str | None = None) -> Node:
    return Node(NodeKind.DATE, description=description)


def enum(values: Sequence[Any], *, description: str | None = None) -> Node:
    return Node(NodeKind.ENUM, values=tuple(values), description=description)


def array(
    items: Node,
    *,
    min: int | None = None,
    max: int | None = None,
    description: str | None = None,
) -> Node:
    return Node(NodeKind.ARRAY, items=items, min=min, max=max, description=description)


def obj(
    fields: Mapping[str, Node],
    *,
    name: str | None = None,
    description: str | None = None,
) -> ObjectNode:
    return ObjectNode(
        NodeKind.OBJECT, shape=tuple(fields.items()), name=name, description=description
    )


def unknown(*, description: str | None = None) -> Node:
    return Node(NodeKind.UNKNOWN, description=description)


def optional(node: Node) -> Node:
    return Node(NodeKind.OPTIONAL, inner=node)


def nullable(node: Node) -> Node:
    return Node(NodeKind.NULLABLE, inner=node)


def default(node: Node, value: Any) -> Node:
    return Node(NodeKind.DEFAULT, inner=node, default_value=value)


# =============================================================================
# Native validation
# =============================================================================


def _type_name(value: Any) -> str:
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (datetime, date)):
        return "date"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def _is_date(value: Any) -> bool:
    if isinstance(value, (datetime, date)):
        return True
    if isinstance(value, str):
        try:
            datetime.fromisoformat(value)
        except ValueError:
            return False
        return True
    return False


def _validate_node(node: Node, value: Any) -> list[Issue]:
    kind = kind_from_value(node.kind)

    if kind == NodeKind.OPTIONAL:
        if value is MISSING or value is None:
            return []
        return node.inner.validate(value) if node.inner is not None else []
    if kind == NodeKind.NULLABLE:
        if value is None:
            return []
        return node.inner.validate(value) if node.inner is not None else []
    if kind == NodeKind.DEFAULT:
        if value is MISSING:
            return []
        return node.inner.validate(value) if node.inner is not None else []

    if value is MISSING:
        return [Issue((), "Required")]
    if kind == NodeKind.UNKNOWN:
        return []

    if kind == NodeKind.STRING:
        if not isinstance(value, str):
            return [Issue((), f"Expected string, received {_type_name(value)}")]
        issues: list[Issue] = []
        if node.min is not None and len(value) < node.min:
            issues.append(Issue((), f"String must contain at least {node.min:g} character(s)"))
        if node.max is not None and len(value) > node.max:
            issues.append(Issue((), f"String must contain at most {node.max:g} character(s)"))
        if node.pattern is not None and re.search(node.pattern, value) is None:
            issues.append(Issue((), "Invalid"))
        return issues

    if kind == NodeKind.NUMBER:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return [Issue((), f"Expected number, received {_type_name(value)}")]
        issues = []
        if node.min is not None and value < node.min:
            issues.append(Issue((), f"Number must be greater than or equal to {node.min:g}"))
        if node.max is not None and value > node.max:
            issues.append(Issue((), f"Number must be less than or equal to {node.max:g}"))
        return issues

    if kind == NodeKind.BOOLEAN:
        if not isinstance(value, bool):
            return [Issue((), f"Expected boolean, received {_type_name(value)}")]
        return []

    if kind == NodeKind.DATE:
        if not _is_date(value):
            return [Issue((), "Invalid date")]
        return []

    if kind == NodeKind.ENUM:
        if value not in node.values:
            expected = " | ".join(repr(v) for v in node.values)
            return [Issue((), f"Invalid enum value. Expected {expected}, received {value!r}")]
        return []

    if kind == NodeKind.ARRAY:
        if not isinstance(value, (list, tuple)):
            return [Issue((), f"Expected array, received {_type_name(value)}")]
        issues = []
        if node.min is not None and len(value) < node.min:
            issues.append(Issue((), f"Array must contain at least {node.min:g} element(s)"))
        if node.max is not None and len(value) > node.max:
            issues.append(Issue((), f"Array must contain at most {node.max:g} element(s)"))
        if node.items is not None:
            for index, item in enumerate(value):
                issues.extend(i.prefixed(index) for i in node.items.validate(item))
        return issues

    if kind == NodeKind.OBJECT:
        if not isinstance(value, Mapping):
            return [Issue((), f"Expected object, received {_type_name(value)}")]
        return []

    return []
