"""
Field Validator: run a schema's own validation and normalize issue paths.

The introspector only describes shape; constraint checking is delegated to the
schema's `validate(value)` routine. This module flattens each issue path into a
dotted key so that renderers can look up one message per field in O(1).

Notes:
    - Path segments are joined with "." ("lines.0.amount"); the root path is "".
    - Several issues on one path: the last one wins.
    - Validation failures are returned, never raised. Referencing a field the
      schema does not declare is a caller bug and raises UnknownFieldError.

Examples:
    >>> from schemaview.core import nodes as s
    >>> from schemaview.core.validate import validate, validate_field
    >>> schema = s.obj({"name": s.string(min=1), "lines": s.array(s.obj({"qty": s.number(min=1)}))})
    >>> validate(schema, {"name": "ACME", "lines": [{"qty": 0}]}).errors
    {'lines.0.qty': 'Number must be greater than or equal to 1'}
    >>> validate_field(schema, "name", "ACME").success
    True
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .errors import UnknownFieldError
from .introspect import as_object_schema
from .nodes import Issue, PathSegment

__all__ = [
    "ValidationResult",
    "flatten_path",
    "errors_from_issues",
    "validate",
    "validate_field",
    "format_errors",
]


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of one validation pass.

    Attributes:
        success (bool): True when no issues were reported.
        errors (dict[str, str]): Dotted path -> message; empty on success.
    """

    success: bool
    errors: dict[str, str] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.success

    def message_for(self, path: str) -> str | None:
        return self.errors.get(path)


def flatten_path(path: Sequence[PathSegment] | PathSegment) -> str:
    """Join path segments with "." (a bare segment is returned as a string)."""
    if isinstance(path, (str, int)):
        return str(path)
    return ".".join(str(segment) for segment in path)


def _issue_parts(issue: Any) -> tuple[Sequence[PathSegment], str]:
    if isinstance(issue, Issue):
        return issue.path, issue.message
    if isinstance(issue, Mapping):
        return issue.get("path", ()) or (), str(issue.get("message", ""))
    return getattr(issue, "path", ()) or (), str(getattr(issue, "message", ""))


def errors_from_issues(issues: Iterable[Any]) -> dict[str, str]:
    """Flatten issue paths into a path -> message map (last write wins)."""
    errors: dict[str, str] = {}
    for issue in issues:
        path, message = _issue_parts(issue)
        errors[flatten_path(path)] = message
    return errors


def _result(issues: Iterable[Any]) -> ValidationResult:
    errors = errors_from_issues(issues)
    return ValidationResult(success=not errors, errors=errors)


def validate(schema: Any, value: Any) -> ValidationResult:
    """
    Validate a whole object value against a schema.

    Args:
        schema (Any): Native ObjectNode, any object schema exposing `fields()` and
            `validate()`, or a pydantic BaseModel subclass.
        value (Any): Candidate value (usually a mapping of field values).

    Returns:
        ValidationResult: success flag and path -> message map.
    """
    return _result(as_object_schema(schema).validate(value))


def validate_field(schema: Any, field_name: str, value: Any) -> ValidationResult:
    """
    Validate a single field value (as-you-type validation).

    Error paths are rooted at the field name ("amount", "lines.0.qty").

    Raises:
        UnknownFieldError: If the schema does not declare `field_name`.
    """
    fields = as_object_schema(schema).fields()
    if field_name not in fields:
        raise UnknownFieldError(field_name, known=list(fields))
    issues = fields[field_name].validate(value)
    prefixed = []
    for issue in issues:
        path, message = _issue_parts(issue)
        prefixed.append(Issue(path=(field_name, *path), message=message))
    return _result(prefixed)


def format_errors(result: ValidationResult) -> list[str]:
    """Render errors as "path: message" lines (bare message for the root path)."""
    return [f"{path}: {message}" if path else message for path, message in result.errors.items()]
