"""Standardized unit price calculation for purchase records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .currency import CurrencyConverter
from .units import base_unit_of, quantity_in_base_unit

if TYPE_CHECKING:
    from ..models import PurchaseRecord


def standardized_price(price: float, quantity: float, unit: str) -> float:
    """Price per one base unit (kg, L or piece).

    A zero base quantity yields 0 rather than an error. No currency
    conversion happens here.

    Raises:
        UnsupportedUnit: If the unit is not supported.
    """
    base_quantity = quantity_in_base_unit(quantity, unit)
    if base_quantity == 0:
        return 0
    return price / base_quantity


@dataclass
class PriceBreakdown:
    """Derived price values for a single purchase."""

    base_unit: str
    standardized_price: float         # in the record's own currency
    currency: str
    price_anchor: float               # total price in the anchor currency
    standardized_price_anchor: float  # per base unit, anchor currency
    anchor: str


class PricingCalculator:
    """Combines unit and currency normalization for purchase records."""

    def __init__(self, converter: CurrencyConverter | None = None) -> None:
        self.converter = converter or CurrencyConverter()

    @property
    def anchor(self) -> str:
        return self.converter.anchor

    def anchor_price(self, record: PurchaseRecord) -> float:
        """Total price paid, converted to the anchor currency."""
        return self.converter.to_anchor(record.price, record.currency)

    def anchor_standardized_price(self, record: PurchaseRecord) -> float:
        per_unit = standardized_price(record.price, record.quantity, record.unit)
        return self.converter.to_anchor(per_unit, record.currency)

    def breakdown(self, record: PurchaseRecord) -> PriceBreakdown:
        per_unit = standardized_price(record.price, record.quantity, record.unit)
        return PriceBreakdown(
            base_unit=base_unit_of(record.unit),
            standardized_price=per_unit,
            currency=record.currency,
            price_anchor=self.anchor_price(record),
            standardized_price_anchor=self.converter.to_anchor(
                per_unit, record.currency
            ),
            anchor=self.anchor,
        )

    def describe(self, record: PurchaseRecord, *, in_anchor: bool = False) -> str:
        """Per-base-unit price line such as ``"24.95 DKK/kg"``."""
        b = self.breakdown(record)
        if in_anchor:
            return f"{b.standardized_price_anchor:.2f} {b.anchor}/{b.base_unit}"
        return f"{b.standardized_price:.2f} {b.currency}/{b.base_unit}"
