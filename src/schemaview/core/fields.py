"""
Pydantic v2 models for introspection output: field descriptors and schema definitions.

Responsibilities
- Define the immutable FieldDescriptor record (one per schema property).
- Define SchemaDefinition, the ordered descriptor list produced once per schema.
- Provide lookups that raise UnknownFieldError for names the schema does not declare.

Style
- Zero-IO (stdlib + pydantic only).
- Models are frozen; descriptor order is declaration order and is semantically
  meaningful (default column/field order).

References
- grammar: src/schemaview/core/grammar.py (FieldType)
- errors: src/schemaview/core/errors.py (UnknownFieldError)
- tests: tests/core/test_introspect.py
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from .errors import UnknownFieldError
from .grammar import FieldType

__all__ = [
    "FieldValidation",
    "UiHints",
    "FieldDescriptor",
    "SchemaDefinition",
]


class FieldValidation(BaseModel):
    """
    Declared constraints of a field.

    Attributes:
        min (float | None): Lower bound (numeric value, or length for strings/arrays).
        max (float | None): Upper bound (numeric value, or length for strings/arrays).
        pattern (str | None): Regular expression a string value must match.
        options (tuple[Any, ...] | None): Enum literals in declaration order; only
            populated for enum fields.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    min: float | None = None
    max: float | None = None
    pattern: str | None = None
    options: tuple[Any, ...] | None = None


class UiHints(BaseModel):
    """
    Presentation-only hints. Never consulted for type or required inference.

    Attributes:
        placeholder (str | None): Input placeholder text.
        readonly (bool): Render as read-only.
        status (bool): Enum looks like a workflow status (render as a badge).
        group (str | None): Form section the field belongs to.
        order (int | None): Explicit ordering weight supplied by the caller.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    placeholder: str | None = None
    readonly: bool = False
    status: bool = False
    group: str | None = None
    order: int | None = None


class FieldDescriptor(BaseModel):
    """
    Normalized metadata for one schema property.

    Attributes:
        name (str): Unique key within the schema; identity for sorting, filtering
            and error mapping.
        type (FieldType): Semantic primitive family of the unwrapped base node.
        label (str): Human-readable title derived from `name`.
        required (bool): False when any optional/nullable/default wrapper was seen.
        description (str | None): Schema documentation, verbatim.
        validation (FieldValidation | None): Declared constraints, if any.
        ui_hints (UiHints | None): Presentation hints, if any.

    Examples:
        >>> from schemaview.core.fields import FieldDescriptor
        >>> from schemaview.core.grammar import FieldType
        >>> FieldDescriptor(name="amount", type=FieldType.NUMBER, label="Amount").required
        True
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    type: FieldType
    label: str
    required: bool = True
    description: str | None = None
    validation: FieldValidation | None = None
    ui_hints: UiHints | None = None

    @property
    def options(self) -> tuple[Any, ...]:
        """Enum options, or an empty tuple for non-enum fields."""
        if self.validation is None or self.validation.options is None:
            return ()
        return self.validation.options


class SchemaDefinition(BaseModel):
    """
    Ordered field descriptors for one schema.

    Produced once per distinct schema object by `introspect` and treated as
    immutable; callers may cache it by schema identity.

    Attributes:
        name (str): Schema name (model or object node name).
        description (str | None): Schema-level documentation.
        fields (tuple[FieldDescriptor, ...]): Descriptors in declaration order.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    description: str | None = None
    fields: tuple[FieldDescriptor, ...] = ()

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def field(self, name: str) -> FieldDescriptor:
        """
        Look up a descriptor by field name.

        Raises:
            UnknownFieldError: If the schema declares no such field.
        """
        for f in self.fields:
            if f.name == name:
                return f
        raise UnknownFieldError(name, known=self.field_names())

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self.fields)
