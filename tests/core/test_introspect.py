from __future__ import annotations

import logging

import pytest

from schemaview.core import nodes as s
from schemaview.core.errors import SchemaError, UnknownFieldError
from schemaview.core.grammar import FieldType, NodeKind
from schemaview.core.introspect import (
    IntrospectionOptions,
    clear_cache,
    describe_field,
    introspect,
    unwrap,
)


def _invoice() -> s.ObjectNode:
    return s.obj(
        {
            "name": s.string(min=1),
            "amount": s.number().optional(),
            "status": s.enum(["draft", "approved"]),
        },
        name="invoice",
    )


def test_descriptors_follow_declaration_order() -> None:
    d = introspect(_invoice())
    assert d.name == "invoice"
    assert [f.name for f in d.fields] == ["name", "amount", "status"]
    assert d.field("name").required is True
    assert d.field("amount").required is False
    assert d.field("status").validation.options == ("draft", "approved")
    assert d.field("status").type == FieldType.ENUM


def test_introspect_is_idempotent_per_schema_object() -> None:
    schema = _invoice()
    first = introspect(schema)
    second = introspect(schema)
    assert first is second
    clear_cache()
    assert introspect(schema) == first


def test_three_layer_wrapping_unwraps_to_base() -> None:
    node = s.default(s.nullable(s.optional(s.number(min=0))), 0)
    d = introspect(s.obj({"total": node}))
    f = d.field("total")
    assert f.type == FieldType.NUMBER
    assert f.required is False
    assert f.validation is not None and f.validation.min == 0


def test_unknown_kind_degrades_to_string() -> None:
    d = introspect(s.obj({"blob": s.unknown(), "odd": s.Node("ZodEffects")}))
    assert [f.type for f in d.fields] == [FieldType.STRING, FieldType.STRING]
    assert all(f.required for f in d.fields)


def test_broken_wrapper_stops_unwrapping() -> None:
    dangling = s.Node(NodeKind.OPTIONAL, inner=None)
    result = unwrap(dangling)
    assert result.base is dangling
    assert result.required is False
    assert describe_field("x", dangling).type == FieldType.STRING


class _Exploding:
    kind = NodeKind.OPTIONAL

    def unwrap(self):
        raise RuntimeError("boom")


def test_field_raising_during_inspection_degrades_and_logs(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="schemaview"):
        f = describe_field("weird", _Exploding())
    assert f.type == FieldType.STRING
    assert f.required is True
    assert "weird" in caplog.text


def test_description_outermost_wins() -> None:
    inner = s.string(description="inner")
    outer = s.optional(inner).describe("outer")
    assert describe_field("a", outer).description == "outer"
    assert describe_field("b", s.optional(inner)).description == "inner"


def test_enum_options_are_deduplicated_in_order() -> None:
    f = describe_field("kind", s.enum(["b", "a", "b"]))
    assert f.options == ("b", "a")


def test_status_hint_from_name_or_values() -> None:
    d = introspect(
        s.obj(
            {
                "status": s.enum(["x", "y"]),
                "color": s.enum(["red", "blue"]),
                "review": s.enum(["pending", "approved"]),
            }
        )
    )
    assert d.field("status").ui_hints.status is True
    assert d.field("color").ui_hints is None
    assert d.field("review").ui_hints.status is True


def test_presentation_hints_are_copied() -> None:
    node = s.string().hints(placeholder="ACME Ltd", readonly=True).optional()
    f = describe_field("vendor", node)
    assert f.ui_hints.placeholder == "ACME Ltd"
    assert f.ui_hints.readonly is True


def test_options_override_labels_order_and_visibility() -> None:
    schema = _invoice()
    opts = IntrospectionOptions(
        label_map={"name": "Vendor"},
        description_map={"amount": "Gross amount"},
        required_fields=frozenset({"amount"}),
        hidden_fields=frozenset({"status"}),
        field_order={"amount": 0},
        field_groups={"name": "header"},
    )
    d = introspect(schema, options=opts)
    assert [f.name for f in d.fields] == ["amount", "name"]
    assert d.field("name").label == "Vendor"
    assert d.field("name").ui_hints.group == "header"
    assert d.field("amount").required is True
    assert d.field("amount").description == "Gross amount"
    # options bypass the identity cache
    assert introspect(schema) is not d
    assert "status" in introspect(schema)


def test_unknown_field_lookup_raises() -> None:
    d = introspect(_invoice())
    with pytest.raises(UnknownFieldError) as ei:
        d.field("vendor")
    assert isinstance(ei.value, KeyError)
    assert "vendor" in str(ei.value)


def test_non_object_schema_raises() -> None:
    with pytest.raises(SchemaError):
        introspect(s.string())
    with pytest.raises(SchemaError):
        introspect(42)
