"""Data models for purchase records."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any

# snake_case attribute → camelCase key used in the flat mirror
_CAMEL_KEYS: dict[str, str] = {
    "id": "id",
    "product_name": "productName",
    "store_name": "storeName",
    "quantity": "quantity",
    "unit": "unit",
    "price": "price",
    "currency": "currency",
    "purchase_date": "purchaseDate",
    "notes": "notes",
}


@dataclass
class RecordFields:
    """The editable fields of a purchase, as submitted by a form or CLI."""

    product_name: str
    store_name: str
    quantity: float
    unit: str
    price: float
    currency: str
    purchase_date: str     # ISO date, YYYY-MM-DD
    notes: str = ""


@dataclass
class PurchaseRecord:
    """A single recorded food purchase."""

    product_name: str
    store_name: str
    quantity: float
    unit: str              # g, kg, ml, L, piece, bunch
    price: float           # total price paid, not per unit
    currency: str          # DKK, EUR, USD
    purchase_date: str     # ISO date, YYYY-MM-DD
    notes: str = ""
    id: int | None = None  # assigned by the structured store

    @classmethod
    def from_fields(
        cls, values: RecordFields, record_id: int | None = None
    ) -> PurchaseRecord:
        return cls(id=record_id, **asdict(values))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PurchaseRecord:
        """Build a record from either camelCase or snake_case keys."""
        kwargs: dict[str, Any] = {}
        for attr, camel in _CAMEL_KEYS.items():
            if camel in data:
                kwargs[attr] = data[camel]
            elif attr in data:
                kwargs[attr] = data[attr]
        kwargs["quantity"] = float(kwargs.get("quantity", 0.0))
        kwargs["price"] = float(kwargs.get("price", 0.0))
        kwargs["notes"] = kwargs.get("notes") or ""
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the mirror's camelCase keys."""
        return {_CAMEL_KEYS[f.name]: getattr(self, f.name) for f in fields(self)}

    def to_fields(self) -> RecordFields:
        data = asdict(self)
        data.pop("id")
        return RecordFields(**data)

    def with_id(self, record_id: int) -> PurchaseRecord:
        return replace(self, id=record_id)

    def without_id(self) -> PurchaseRecord:
        return replace(self, id=None)
