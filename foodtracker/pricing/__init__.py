"""Unit, currency and price normalization."""

from .calculator import PriceBreakdown, PricingCalculator, standardized_price
from .currency import (
    ANCHOR_CURRENCY,
    DEFAULT_RATES,
    CurrencyConverter,
    convert,
    format_currency,
)
from .units import (
    BASE_UNITS,
    SUPPORTED_UNITS,
    base_unit_of,
    is_supported_unit,
    quantity_in_base_unit,
)

__all__ = [
    "ANCHOR_CURRENCY",
    "BASE_UNITS",
    "DEFAULT_RATES",
    "SUPPORTED_UNITS",
    "CurrencyConverter",
    "PriceBreakdown",
    "PricingCalculator",
    "base_unit_of",
    "convert",
    "format_currency",
    "is_supported_unit",
    "quantity_in_base_unit",
    "standardized_price",
]
