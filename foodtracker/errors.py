"""Exception types raised by the tracker."""

from __future__ import annotations


class FoodTrackerError(Exception):
    """Base class for all tracker errors."""


class UnsupportedUnit(FoodTrackerError, ValueError):
    """A unit symbol outside the supported set was used."""

    def __init__(self, unit: str) -> None:
        self.unit = unit
        super().__init__(f"Unsupported unit of measurement: {unit}")


class UnsupportedCurrency(FoodTrackerError, ValueError):
    """A currency code missing from the rate table was used."""

    def __init__(self, currency: str) -> None:
        self.currency = currency
        super().__init__(f"Unsupported currency: {currency}")


class InvalidPurchaseDate(FoodTrackerError, ValueError):
    """A purchase date that is not an ISO ``YYYY-MM-DD`` calendar date."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid purchase date (expected YYYY-MM-DD): {value}")


class StoreError(FoodTrackerError):
    """Base class for structured store failures."""


class StoreInitError(StoreError):
    """The structured store could not be opened or created."""


class StoreReadError(StoreError):
    """Reading from the structured store failed."""


class StoreWriteError(StoreError):
    """Writing to the structured store failed."""
