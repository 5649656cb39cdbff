"""
Schema Introspector: turn a possibly-wrapped object schema into ordered field descriptors.

Algorithm
---------
For every declared field, in declaration order:

1) Unwrap. Follow `unwrap()` through optional/nullable/default wrappers; the first
   wrapper flips `required` to False. Stop when a base node is reached, when a
   wrapper yields no inner node, or when a node repeats (cycle).
2) Classify. Map the base node's kind onto FieldType; unknown kinds become STRING.
3) Label. `grammar.to_label(name)`.
4) Enum extraction. Options in declaration order (duplicates dropped).
5) Description. First description met while unwrapping, outermost first.

Failure semantics
-----------------
Introspection is advisory metadata. A field whose node cannot be inspected
degrades to a required STRING field and a warning is logged; the rest of the
definition is still produced. Only input that is not an object schema at all
raises SchemaError.

Caching
-------
Definitions are cached by schema identity (weak references), so repeated calls
with the same schema object return the same SchemaDefinition instance. Calls
with `options` or an explicit `name` bypass the cache.

Examples
--------
>>> from schemaview.core import nodes as s
>>> from schemaview.core.introspect import introspect
>>> schema = s.obj({"amount": s.number().default(0).nullable().optional()})
>>> d = introspect(schema).fields[0]
>>> (d.type.value, d.required)
('number', False)
"""

from __future__ import annotations

import weakref
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from ..log import get_logger
from .constants import STATUS_NAME_KEYWORDS, STATUS_VALUES
from .errors import SchemaError
from .fields import FieldDescriptor, FieldValidation, SchemaDefinition, UiHints
from .grammar import (
    WRAPPER_KINDS,
    FieldType,
    NodeKind,
    dedupe_preserving_order,
    field_type_for_kind,
    kind_from_value,
    to_label,
)
from .nodes import ObjectSchema, SchemaNode
from .pydantic_adapter import object_node_from_model

__all__ = [
    "IntrospectionOptions",
    "as_object_schema",
    "unwrap",
    "describe_field",
    "introspect",
    "clear_cache",
]

logger = get_logger(__name__)

_CACHE: weakref.WeakKeyDictionary[Any, SchemaDefinition] = weakref.WeakKeyDictionary()


@dataclass(frozen=True)
class IntrospectionOptions:
    """
    Caller overrides applied on top of what the schema declares.

    Attributes:
        label_map (dict[str, str]): Field name -> label.
        description_map (dict[str, str]): Field name -> description.
        required_fields (frozenset[str]): Fields forced to required.
        hidden_fields (frozenset[str]): Fields left out of the definition.
        field_order (dict[str, int]): Ordering weights; unweighted fields keep
            declaration order after weighted ones.
        field_groups (dict[str, str]): Field name -> form group.
    """

    label_map: Mapping[str, str] = field(default_factory=dict)
    description_map: Mapping[str, str] = field(default_factory=dict)
    required_fields: frozenset[str] = frozenset()
    hidden_fields: frozenset[str] = frozenset()
    field_order: Mapping[str, int] = field(default_factory=dict)
    field_groups: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Unwrapped:
    """Result of unwrapping one field node: base node, required flag, and the visited chain."""

    base: Any
    required: bool
    chain: tuple[Any, ...]


def as_object_schema(schema: Any) -> ObjectSchema:
    """
    Resolve a schema input to an object schema.

    Accepts any object exposing `fields()` (native ObjectNode or an adapter) or a
    pydantic BaseModel subclass.

    Raises:
        SchemaError: If `schema` is neither.
    """
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return object_node_from_model(schema)
    if callable(getattr(schema, "fields", None)):
        return schema
    raise SchemaError(f"expected an object schema or pydantic model, got {type(schema).__name__}")


def _kind(node: Any) -> NodeKind:
    return kind_from_value(getattr(node, "kind", None))


def unwrap(node: SchemaNode) -> Unwrapped:
    """
    Strip optional/nullable/default wrappers down to the base node.

    Terminates when the current node is not a wrapper, when `unwrap()` returns
    None, or when a node is visited twice.
    """
    required = True
    chain: list[Any] = [node]
    seen = {id(node)}
    current: Any = node
    while _kind(current) in WRAPPER_KINDS:
        required = False
        step = getattr(current, "unwrap", None)
        inner = step() if callable(step) else None
        if inner is None or id(inner) in seen:
            break
        seen.add(id(inner))
        chain.append(inner)
        current = inner
    return Unwrapped(base=current, required=required, chain=tuple(chain))


def _first(chain: Iterable[Any], attr: str) -> Any:
    for node in chain:
        value = getattr(node, attr, None)
        if value is not None:
            return value
    return None


def _enum_options(base: Any) -> tuple[Any, ...]:
    accessor = getattr(base, "enum_values", None)
    values = accessor() if callable(accessor) else accessor
    if not values:
        return ()
    return dedupe_preserving_order(values)


def _validation(base: Any, ftype: FieldType) -> FieldValidation | None:
    accessor = getattr(base, "constraints", None)
    raw = accessor() if callable(accessor) else accessor
    constraints: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    options = _enum_options(base) if ftype == FieldType.ENUM else None
    if not constraints and options is None:
        return None
    return FieldValidation(
        min=constraints.get("min"),
        max=constraints.get("max"),
        pattern=constraints.get("pattern"),
        options=options,
    )


def _is_status(name: str, options: Iterable[Any]) -> bool:
    lowered = name.lower()
    if any(keyword in lowered for keyword in STATUS_NAME_KEYWORDS):
        return True
    return any(isinstance(v, str) and v.lower() in STATUS_VALUES for v in options)


def describe_field(
    name: str,
    node: SchemaNode,
    options: IntrospectionOptions | None = None,
) -> FieldDescriptor:
    """
    Build the descriptor for one field node.

    Never raises for odd node shapes: inspection failures degrade to a required
    STRING descriptor.
    """
    opts = options or IntrospectionOptions()
    label = opts.label_map.get(name) or to_label(name)
    try:
        unwrapped = unwrap(node)
        ftype = field_type_for_kind(_kind(unwrapped.base))
        validation = _validation(unwrapped.base, ftype)
        description = opts.description_map.get(name) or _first(unwrapped.chain, "description")
        placeholder = _first(unwrapped.chain, "placeholder")
        readonly = any(getattr(n, "readonly", False) is True for n in unwrapped.chain)
        required = unwrapped.required
    except Exception as exc:
        logger.warning("field %r degraded to string: %s", name, exc)
        return FieldDescriptor(name=name, type=FieldType.STRING, label=label, required=True)

    status = ftype == FieldType.ENUM and _is_status(name, validation.options if validation else ())
    group = opts.field_groups.get(name)
    order = opts.field_order.get(name)
    hints: UiHints | None = None
    if placeholder is not None or readonly or status or group is not None or order is not None:
        hints = UiHints(
            placeholder=placeholder if isinstance(placeholder, str) else None,
            readonly=readonly,
            status=status,
            group=group,
            order=order,
        )
    return FieldDescriptor(
        name=name,
        type=ftype,
        label=label,
        required=required or name in opts.required_fields,
        description=description if isinstance(description, str) else None,
        validation=validation,
        ui_hints=hints,
    )


def _ordered(
    descriptors: list[FieldDescriptor], field_order: Mapping[str, int]
) -> list[FieldDescriptor]:
    if not field_order:
        return descriptors
    # sorted() is stable, so unweighted fields keep declaration order.
    return sorted(
        descriptors,
        key=lambda d: (0, field_order[d.name]) if d.name in field_order else (1, 0),
    )


def introspect(
    schema: Any,
    *,
    name: str | None = None,
    options: IntrospectionOptions | None = None,
) -> SchemaDefinition:
    """
    Introspect an object schema into a SchemaDefinition.

    Args:
        schema (Any): Native ObjectNode, any object exposing `fields()`, or a
            pydantic BaseModel subclass.
        name (str | None): Override for SchemaDefinition.name.
        options (IntrospectionOptions | None): Caller overrides.

    Returns:
        SchemaDefinition: Descriptors in declaration order (or `field_order`).

    Raises:
        SchemaError: If `schema` is not an object schema.

    Notes:
        - Idempotent: the same schema object yields the same definition.
        - Unknown kinds become STRING fields rather than errors.
    """
    cacheable = name is None and options is None
    if cacheable:
        try:
            cached = _CACHE.get(schema)
        except TypeError:
            cacheable = False
            cached = None
        if cached is not None:
            return cached

    obj = as_object_schema(schema)
    try:
        shape = obj.fields()
        items = list(shape.items())
    except Exception as exc:
        raise SchemaError(f"schema fields could not be read: {exc}") from exc

    opts = options or IntrospectionOptions()
    descriptors = [
        describe_field(field_name, node, opts)
        for field_name, node in items
        if field_name not in opts.hidden_fields
    ]
    schema_name = name or getattr(obj, "name", None) or getattr(schema, "__name__", None)
    schema_description = getattr(obj, "description", None)
    definition = SchemaDefinition(
        name=schema_name if isinstance(schema_name, str) else "schema",
        description=schema_description if isinstance(schema_description, str) else None,
        fields=tuple(_ordered(descriptors, opts.field_order)),
    )
    logger.debug("introspected %s: %d field(s)", definition.name, len(definition.fields))

    if cacheable:
        try:
            _CACHE[schema] = definition
        except TypeError:
            pass
    return definition


def clear_cache() -> None:
    """Drop all cached definitions."""
    _CACHE.clear()
