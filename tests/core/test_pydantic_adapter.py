from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from schemaview.core.grammar import FieldType
from schemaview.core.introspect import introspect
from schemaview.core.validate import validate, validate_field


class Currency(Enum):
    USD = "USD"
    EUR = "EUR"


class Line(BaseModel):
    sku: str
    qty: int = Field(ge=1)


class Invoice(BaseModel):
    vendorLegalName: str = Field(min_length=1, description="Registered name")
    amount: float | None = None
    status: Literal["draft", "approved"] = "draft"
    currency: Currency
    issued: date
    paid: bool = False
    tags: list[str] = Field(default_factory=list)
    lines: list[Line] = Field(default_factory=list)


def test_model_fields_introspect_in_declaration_order() -> None:
    d = introspect(Invoice)
    assert d.name == "Invoice"
    assert d.field_names() == [
        "vendorLegalName",
        "amount",
        "status",
        "currency",
        "issued",
        "paid",
        "tags",
        "lines",
    ]
    types = {f.name: f.type for f in d.fields}
    assert types == {
        "vendorLegalName": FieldType.STRING,
        "amount": FieldType.NUMBER,
        "status": FieldType.ENUM,
        "currency": FieldType.ENUM,
        "issued": FieldType.DATE,
        "paid": FieldType.BOOLEAN,
        "tags": FieldType.ARRAY,
        "lines": FieldType.ARRAY,
    }


def test_required_labels_and_constraints() -> None:
    d = introspect(Invoice)
    name = d.field("vendorLegalName")
    assert name.required is True
    assert name.label == "Vendor Legal Name"
    assert name.description == "Registered name"
    assert name.validation.min == 1
    assert d.field("amount").required is False
    assert d.field("status").required is False
    assert d.field("status").options == ("draft", "approved")
    assert d.field("currency").options == ("USD", "EUR")


def test_validation_delegates_to_pydantic_with_dotted_paths() -> None:
    result = validate(
        Invoice,
        {
            "vendorLegalName": "",
            "currency": "USD",
            "issued": "2024-01-31",
            "lines": [{"sku": "A", "qty": 0}],
        },
    )
    assert not result.success
    assert set(result.errors) == {"vendorLegalName", "lines.0.qty"}


def test_valid_model_payload() -> None:
    ok = validate(Invoice, {"vendorLegalName": "ACME", "currency": "EUR", "issued": "2024-01-31"})
    assert ok.success and ok.errors == {}


def test_single_field_validation() -> None:
    bad = validate_field(Invoice, "vendorLegalName", "")
    assert list(bad.errors) == ["vendorLegalName"]
    assert validate_field(Invoice, "amount", None).success
