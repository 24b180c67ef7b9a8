"""Unit of measurement normalization utilities."""

from __future__ import annotations

from ..errors import UnsupportedUnit

# Purchase unit → base unit used for price comparison
BASE_UNITS: dict[str, str] = {
    "g": "kg",
    "kg": "kg",
    "ml": "L",
    "L": "L",
    "piece": "piece",
    "bunch": "piece",
}

SUPPORTED_UNITS: tuple[str, ...] = tuple(BASE_UNITS)


def is_supported_unit(unit: str) -> bool:
    return unit in BASE_UNITS


def base_unit_of(unit: str) -> str:
    """Return the base unit (kg, L or piece) for a purchase unit.

    Raises:
        UnsupportedUnit: If the unit is not one of SUPPORTED_UNITS.
    """
    try:
        return BASE_UNITS[unit]
    except (KeyError, TypeError):
        raise UnsupportedUnit(unit) from None


def quantity_in_base_unit(quantity: float, unit: str) -> float:
    """Convert a quantity into its base unit.

    g and ml are divided by 1000, every other unit passes through unchanged.
    No rounding is applied.

    Raises:
        UnsupportedUnit: If the unit is not one of SUPPORTED_UNITS.
    """
    if not is_supported_unit(unit):
        raise UnsupportedUnit(unit)
    if unit in ("g", "ml"):
        return quantity / 1000
    return quantity
