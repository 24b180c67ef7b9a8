"""Personal food-purchase tracker with unit price comparison."""

from .config import (
    CurrencyConfig,
    DatabaseConfig,
    DisplayConfig,
    MirrorConfig,
    TrackerConfig,
    load_config,
)
from .controller import (
    ComparisonRow,
    FilterSpec,
    LoadState,
    OperationResult,
    TrackerController,
    TrackerState,
    reconcile,
    sample_records,
)
from .db import FlatMirror, PurchaseDB
from .errors import (
    FoodTrackerError,
    InvalidPurchaseDate,
    StoreError,
    StoreInitError,
    StoreReadError,
    StoreWriteError,
    UnsupportedCurrency,
    UnsupportedUnit,
)
from .models import PurchaseRecord, RecordFields
from .pricing import CurrencyConverter, PricingCalculator

__all__ = [
    "PurchaseRecord",
    "RecordFields",
    "TrackerController",
    "TrackerState",
    "LoadState",
    "FilterSpec",
    "OperationResult",
    "ComparisonRow",
    "reconcile",
    "sample_records",
    "PurchaseDB",
    "FlatMirror",
    "CurrencyConverter",
    "PricingCalculator",
    "FoodTrackerError",
    "UnsupportedUnit",
    "UnsupportedCurrency",
    "InvalidPurchaseDate",
    "StoreError",
    "StoreInitError",
    "StoreReadError",
    "StoreWriteError",
    "TrackerConfig",
    "DatabaseConfig",
    "MirrorConfig",
    "CurrencyConfig",
    "DisplayConfig",
    "load_config",
]
