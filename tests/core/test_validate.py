from __future__ import annotations

import pytest

from schemaview.core import nodes as s
from schemaview.core.errors import UnknownFieldError
from schemaview.core.nodes import Issue
from schemaview.core.validate import (
    errors_from_issues,
    flatten_path,
    format_errors,
    validate,
    validate_field,
)


def _invoice() -> s.ObjectNode:
    return s.obj(
        {
            "name": s.string(min=1),
            "amount": s.number(min=0).optional(),
            "status": s.enum(["draft", "approved"]),
            "lines": s.array(s.obj({"qty": s.number(min=1)})).optional(),
        }
    )


def test_valid_value_succeeds_with_empty_errors() -> None:
    result = validate(_invoice(), {"name": "ACME", "status": "draft"})
    assert result.success is True
    assert bool(result) is True
    assert result.errors == {}


def test_missing_required_and_bad_enum() -> None:
    result = validate(_invoice(), {"status": "paid"})
    assert result.success is False
    assert result.errors["name"] == "Required"
    assert result.errors["status"].startswith("Invalid enum value")
    assert "amount" not in result.errors


def test_nested_array_paths_are_dotted() -> None:
    result = validate(
        _invoice(),
        {"name": "ACME", "status": "draft", "lines": [{"qty": 2}, {"qty": 0}]},
    )
    assert result.errors == {"lines.1.qty": "Number must be greater than or equal to 1"}
    assert result.message_for("lines.1.qty") is not None
    assert result.message_for("lines.0.qty") is None


def test_type_mismatch_message() -> None:
    result = validate(_invoice(), {"name": 5, "status": "draft"})
    assert result.errors == {"name": "Expected string, received number"}


def test_pattern_and_length_bounds() -> None:
    schema = s.obj({"code": s.string(min=2, max=4, pattern=r"^[A-Z]+$")})
    assert validate(schema, {"code": "AB"}).success
    assert validate(schema, {"code": "ab"}).errors == {"code": "Invalid"}
    assert "code" in validate(schema, {"code": "ABCDE"}).errors


def test_nullable_and_default_wrappers() -> None:
    schema = s.obj({"note": s.string().nullable(), "qty": s.number().default(1)})
    assert validate(schema, {"note": None}).success
    assert validate(schema, {}).errors == {"note": "Required"}


def test_last_write_wins_per_path() -> None:
    issues = [Issue(("a",), "first"), Issue(("a",), "second"), Issue(("b", 0), "x")]
    assert errors_from_issues(issues) == {"a": "second", "b.0": "x"}


def test_flatten_path() -> None:
    assert flatten_path(("lines", 0, "qty")) == "lines.0.qty"
    assert flatten_path(()) == ""
    assert flatten_path("name") == "name"


def test_validate_field_roots_paths_at_field_name() -> None:
    schema = _invoice()
    assert validate_field(schema, "amount", -1).errors == {
        "amount": "Number must be greater than or equal to 0"
    }
    assert validate_field(schema, "amount", 10).success
    nested = validate_field(schema, "lines", [{"qty": 0}])
    assert list(nested.errors) == ["lines.0.qty"]


def test_validate_field_unknown_name_raises() -> None:
    with pytest.raises(UnknownFieldError):
        validate_field(_invoice(), "vendor", "x")


def test_format_errors() -> None:
    result = validate(_invoice(), {"status": "draft"})
    assert format_errors(result) == ["name: Required"]
