"""
Adapter exposing pydantic v2 models through the SchemaNode interface.

Translates a BaseModel subclass into an ObjectNode whose field nodes mirror the
annotations: `X | None` becomes a nullable wrapper, a field with a default becomes
a default wrapper, Literal/Enum become enum nodes, nested models become object
nodes, and anything unrecognized becomes an unknown node. Validation is delegated
to pydantic itself; ValidationError `loc` tuples become Issue paths.

Notes
- Only the adapter knows pydantic internals; the introspector sees plain nodes.
- Field constraints (ge/gt/le/lt, min_length/max_length, pattern) are read from
  FieldInfo.metadata by duck typing, so annotated_types and pydantic's own
  metadata objects are both understood.
- Adapted nodes are cached per model class.

Examples
--------
>>> from pydantic import BaseModel, Field
>>> from schemaview.core.pydantic_adapter import object_node_from_model
>>> class Vendor(BaseModel):
...     vendorLegalName: str = Field(min_length=1, description="Registered name")
...     taxCode: str | None = None
>>> node = object_node_from_model(Vendor)
>>> list(node.fields())
['vendorLegalName', 'taxCode']
"""

from __future__ import annotations

import enum as _enum
import functools
import types
import typing
from collections.abc import Mapping
from dataclasses import replace
from datetime import date, datetime, time
from decimal import Decimal
from typing import Annotated, Any, Literal, Union, get_args, get_origin

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic.fields import FieldInfo

from .grammar import NodeKind
from .nodes import MISSING, Issue, Node, ObjectNode

__all__ = [
    "object_node_from_model",
    "node_from_annotation",
    "issues_from_validation_error",
]

_NONE_TYPE = type(None)
_ARRAY_ORIGINS = (list, tuple, set, frozenset)
_OBJECT_ORIGINS = (dict, Mapping)


def issues_from_validation_error(exc: ValidationError) -> list[Issue]:
    """Convert a pydantic ValidationError into Issue items (loc -> path, msg -> message)."""
    return [
        Issue(path=tuple(err.get("loc", ())), message=str(err.get("msg", "")))
        for err in exc.errors()
    ]


def _is_union(origin: Any) -> bool:
    return origin is Union or origin is types.UnionType


def node_from_annotation(annotation: Any, *, description: str | None = None) -> Node:
    """
    Build a node for a bare type annotation (no FieldInfo).

    Unsupported annotations produce an UNKNOWN node instead of raising.
    """
    origin = get_origin(annotation)

    if origin is Annotated:
        return node_from_annotation(get_args(annotation)[0], description=description)

    if _is_union(origin):
        args = get_args(annotation)
        non_none = [a for a in args if a is not _NONE_TYPE]
        if len(non_none) == 1:
            inner = node_from_annotation(non_none[0])
            if len(non_none) < len(args):
                return Node(NodeKind.NULLABLE, inner=inner, description=description)
            return inner
        return Node(NodeKind.UNKNOWN, description=description)

    if origin is Literal:
        return Node(NodeKind.ENUM, values=get_args(annotation), description=description)

    if origin in _ARRAY_ORIGINS:
        args = [a for a in get_args(annotation) if a is not Ellipsis]
        items = node_from_annotation(args[0]) if args else None
        return Node(NodeKind.ARRAY, items=items, description=description)

    if origin in _OBJECT_ORIGINS:
        return Node(NodeKind.OBJECT, description=description)

    if annotation is typing.Any:
        return Node(NodeKind.UNKNOWN, description=description)

    if isinstance(annotation, type):
        if issubclass(annotation, BaseModel):
            return object_node_from_model(annotation)
        if issubclass(annotation, _enum.Enum):
            return Node(
                NodeKind.ENUM,
                values=tuple(m.value for m in annotation),
                description=description,
            )
        if issubclass(annotation, bool):
            return Node(NodeKind.BOOLEAN, description=description)
        if issubclass(annotation, (int, float, Decimal)):
            return Node(NodeKind.NUMBER, description=description)
        if issubclass(annotation, str):
            return Node(NodeKind.STRING, description=description)
        if issubclass(annotation, (datetime, date, time)):
            return Node(NodeKind.DATE, description=description)
        if issubclass(annotation, (list, tuple, set, frozenset)):
            return Node(NodeKind.ARRAY, description=description)
        if issubclass(annotation, dict):
            return Node(NodeKind.OBJECT, description=description)

    return Node(NodeKind.UNKNOWN, description=description)


def _constraints(info: FieldInfo) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for meta in info.metadata:
        for attr, key in (
            ("ge", "min"),
            ("gt", "min"),
            ("min_length", "min"),
            ("le", "max"),
            ("lt", "max"),
            ("max_length", "max"),
        ):
            value = getattr(meta, attr, None)
            if value is not None:
                out[key] = value
        pattern = getattr(meta, "pattern", None)
        if pattern is not None:
            out["pattern"] = pattern if isinstance(pattern, str) else pattern.pattern
    return out


def _field_validator(info: FieldInfo) -> Any:
    annotation = Annotated[(info.annotation, *info.metadata)] if info.metadata else info.annotation
    adapter = TypeAdapter(annotation)
    required = info.is_required()

    def validate(value: Any) -> list[Issue]:
        if value is MISSING:
            return [Issue((), "Field required")] if required else []
        try:
            adapter.validate_python(value)
        except ValidationError as exc:
            return issues_from_validation_error(exc)
        return []

    return validate


def _node_for_field(info: FieldInfo) -> Node:
    base = node_from_annotation(info.annotation)
    is_nullable = base.kind == NodeKind.NULLABLE and base.inner is not None
    if is_nullable:
        base = base.inner

    # Constraints and hints live on the base node, below the wrappers.
    if not isinstance(base, ObjectNode):
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        placeholder = extra.get("placeholder")
        base = replace(
            base,
            placeholder=placeholder if isinstance(placeholder, str) else None,
            readonly=bool(info.frozen) or bool(extra.get("readonly", False)),
            **_constraints(info),
        )

    node = Node(NodeKind.NULLABLE, inner=base) if is_nullable else base
    if not info.is_required():
        default_value = info.default if info.default_factory is None else MISSING
        node = Node(NodeKind.DEFAULT, inner=node, default_value=default_value)
    return replace(
        node,
        description=info.description or node.description,
        validator=_field_validator(info),
    )


@functools.lru_cache(maxsize=256)
def object_node_from_model(model: type[BaseModel]) -> ObjectNode:
    """
    Adapt a pydantic model class into an ObjectNode.

    Args:
        model (type[BaseModel]): Model class; fields are taken from
            `model.model_fields` in declaration order.

    Returns:
        ObjectNode: Node named after the model, validating through
        `model.model_validate`.
    """

    def validate(value: Any) -> list[Issue]:
        try:
            model.model_validate(value)
        except ValidationError as exc:
            return issues_from_validation_error(exc)
        return []

    shape = tuple((name, _node_for_field(info)) for name, info in model.model_fields.items())
    doc = model.__doc__
    description = model.model_config.get("title") or (doc.strip() if doc else None)
    return ObjectNode(
        NodeKind.OBJECT,
        shape=shape,
        name=model.__name__,
        description=description,
        validator=validate,
    )
