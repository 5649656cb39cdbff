"""
Core exception types raised by introspection lookups and validation helpers.

Provides typed exceptions for core-domain failures:
- SchemaError for input that is not an object schema at all.
- UnknownFieldError for references to a field name absent from a schema.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Field-level shape surprises (unknown kinds, missing inner types) never raise;
      the introspector degrades them to string fields instead.
    - Validation failures are returned as data by schemaview.core.validate, not raised.

Examples:
    Catch a lookup of a missing field.

    >>> from schemaview.core.errors import UnknownFieldError
    >>> try:
    ...     raise UnknownFieldError("vendorName", known=["vendorLegalName"])
    ... except KeyError as e:
    ...     msg = str(e)
    >>> "vendorName" in msg
    True
"""

from __future__ import annotations

from collections.abc import Iterable

__all__ = [
    "SchemaError",
    "UnknownFieldError",
]


class SchemaError(ValueError):
    """Schema input failure (not an object schema, or no usable field set)."""


class UnknownFieldError(SchemaError, KeyError):
    """A field or column name was referenced that the schema does not declare."""

    def __init__(self, name: str, known: Iterable[str] = ()) -> None:
        self.name = name
        self.known = tuple(known)
        super().__init__(name)

    def __str__(self) -> str:
        if self.known:
            return f"unknown field {self.name!r} (known={list(self.known)!r})"
        return f"unknown field {self.name!r}"
