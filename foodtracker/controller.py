"""Application controller: load, filter, sort, CRUD and price comparison."""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import date, timedelta

from .db import FlatMirror, PurchaseDB
from .errors import (
    InvalidPurchaseDate,
    StoreError,
    StoreReadError,
    UnsupportedCurrency,
    UnsupportedUnit,
)
from .models import PurchaseRecord, RecordFields
from .pricing import PricingCalculator, base_unit_of, is_supported_unit

logger = logging.getLogger(__name__)

SORT_KEYS = ("name", "date", "price", "priceDesc")

# Record attribute names accepted by unique_values_of (camelCase aliases too)
_FIELD_ALIASES: dict[str, str] = {
    "productName": "product_name",
    "storeName": "store_name",
    "purchaseDate": "purchase_date",
}


class LoadState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOADED_FROM_PRIMARY = "loaded_from_primary"
    LOADED_FROM_FALLBACK = "loaded_from_fallback"
    SEEDED = "seeded"


@dataclass
class TrackerState:
    """In-memory mirror of the structured store, owned by the controller."""

    records: list[PurchaseRecord] = field(default_factory=list)
    load_state: LoadState = LoadState.UNINITIALIZED

    def find(self, record_id: int) -> PurchaseRecord | None:
        return next((r for r in self.records if r.id == record_id), None)

    def index_of(self, record_id: int) -> int | None:
        for i, r in enumerate(self.records):
            if r.id == record_id:
                return i
        return None


@dataclass
class FilterSpec:
    """Conjunctive filter. Empty criteria match everything."""

    product: str = ""   # case-insensitive substring
    store: str = ""     # case-insensitive substring
    unit: str = ""      # exact match

    def matches(self, record: PurchaseRecord) -> bool:
        if self.product and self.product.lower() not in record.product_name.lower():
            return False
        if self.store and self.store.lower() not in record.store_name.lower():
            return False
        if self.unit and record.unit != self.unit:
            return False
        return True


@dataclass
class OperationResult:
    """Outcome of a mutating operation."""

    ok: bool
    record: PurchaseRecord | None = None
    error: str = ""


@dataclass
class ComparisonRow:
    """One purchase of a product, normalized for side-by-side comparison."""

    record: PurchaseRecord
    base_unit: str
    standardized_price: float  # anchor currency per base unit
    currency: str              # the anchor currency


def sample_records(today: date | None = None) -> list[PurchaseRecord]:
    """Built-in records used when both storage tiers are empty."""
    today = today or date.today()
    yesterday = today - timedelta(days=1)
    return [
        PurchaseRecord(
            product_name="Organic Bananas",
            store_name="Super Brugsen",
            quantity=1,
            unit="kg",
            price=24.95,
            currency="DKK",
            purchase_date=today.isoformat(),
            notes="Really ripe and sweet",
        ),
        PurchaseRecord(
            product_name="Avocados",
            store_name="Netto",
            quantity=3,
            unit="piece",
            price=30,
            currency="DKK",
            purchase_date=yesterday.isoformat(),
            notes="On sale this week",
        ),
        PurchaseRecord(
            product_name="Organic Almonds",
            store_name="Irma",
            quantity=500,
            unit="g",
            price=12.50,
            currency="EUR",
            purchase_date=yesterday.isoformat(),
            notes="",
        ),
    ]


def _persist_all(db: PurchaseDB, records: list[PurchaseRecord]) -> list[PurchaseRecord]:
    """Insert every record with a fresh id.

    Records that fail to insert are kept without an id.
    """
    stored: list[PurchaseRecord] = []
    for record in records:
        try:
            new_id = db.add_record(record)
        except StoreError:
            logger.exception("Failed to copy %r into the structured store", record.product_name)
            stored.append(record.without_id())
            continue
        stored.append(record.with_id(new_id))
    return stored


def _date_sort_key(record: PurchaseRecord) -> tuple[int, int]:
    # Newest first; dates that do not parse go last, in store order
    try:
        return (0, -date.fromisoformat(record.purchase_date).toordinal())
    except (TypeError, ValueError):
        return (1, 0)


def reconcile(
    db: PurchaseDB,
    mirror: FlatMirror | None,
    seed: Callable[[], list[PurchaseRecord]] = sample_records,
    accept: Callable[[PurchaseRecord], bool] | None = None,
) -> TrackerState:
    """Build the startup state from the two storage tiers.

    Structured store first; if it is empty (or unreadable) the flat mirror is
    authoritative and gets copied into the structured store; if both are
    empty the seed records are persisted to both tiers. Mirror records
    rejected by ``accept`` are dropped before they reach the store.
    """
    try:
        records = db.get_all_records()
    except StoreReadError:
        logger.exception("Reading the structured store failed; treating as empty")
        records = []

    if records:
        logger.info("Loaded %d records from the structured store", len(records))
        return TrackerState(records=records, load_state=LoadState.LOADED_FROM_PRIMARY)

    mirrored = mirror.load_records() if mirror is not None else []
    if accept is not None:
        kept = []
        for r in mirrored:
            if accept(r):
                kept.append(r)
            else:
                logger.warning(
                    "Skipping mirror entry %r with unit %r / currency %r",
                    r.product_name, r.unit, r.currency,
                )
        mirrored = kept
    if mirrored:
        logger.info("Restoring %d records from the flat mirror", len(mirrored))
        stored = _persist_all(db, [r.without_id() for r in mirrored])
        return TrackerState(records=stored, load_state=LoadState.LOADED_FROM_FALLBACK)

    logger.info("No stored purchases found; seeding sample data")
    stored = _persist_all(db, seed())
    if mirror is not None:
        mirror.save_records(stored)
    return TrackerState(records=stored, load_state=LoadState.SEEDED)


class TrackerController:
    """Orchestrates workflows over the in-memory purchase collection.

    The in-memory state is only changed after the structured store confirms
    a write. Update and delete requests for the same id are serialized.
    """

    def __init__(
        self,
        db: PurchaseDB,
        mirror: FlatMirror | None = None,
        calculator: PricingCalculator | None = None,
    ) -> None:
        self._db = db
        self._mirror = mirror
        self.calculator = calculator or PricingCalculator()
        self.state = TrackerState()
        self._locks: dict[int, asyncio.Lock] = {}

    @property
    def records(self) -> list[PurchaseRecord]:
        return list(self.state.records)

    def close(self) -> None:
        self._db.close()

    def _lock_for(self, record_id: int) -> asyncio.Lock:
        lock = self._locks.get(record_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[record_id] = lock
        return lock

    def _snapshot(self) -> None:
        if self._mirror is not None:
            self._mirror.save_records(self.state.records)

    def _validate(self, values: RecordFields) -> None:
        if not is_supported_unit(values.unit):
            raise UnsupportedUnit(values.unit)
        if not self.calculator.converter.supports(values.currency):
            raise UnsupportedCurrency(values.currency)
        try:
            date.fromisoformat(values.purchase_date)
        except (TypeError, ValueError):
            raise InvalidPurchaseDate(values.purchase_date) from None

    def _is_priceable(self, record: PurchaseRecord) -> bool:
        return is_supported_unit(record.unit) and self.calculator.converter.supports(
            record.currency
        )

    # ── loading ──

    async def load_all(self) -> list[PurchaseRecord]:
        """Rebuild the in-memory collection from storage.

        Raises:
            StoreInitError: If the structured store cannot be opened.
        """
        await asyncio.to_thread(self._db.initialize)
        self.state = await asyncio.to_thread(
            reconcile, self._db, self._mirror, accept=self._is_priceable
        )
        return self.records

    # ── mutations ──

    async def create(self, values: RecordFields) -> OperationResult:
        """Persist a new purchase and append it to the collection.

        Raises:
            UnsupportedUnit, UnsupportedCurrency, InvalidPurchaseDate: For
                invalid field values.
        """
        self._validate(values)
        record = PurchaseRecord.from_fields(values)
        try:
            new_id = await asyncio.to_thread(self._db.add_record, record)
        except StoreError as e:
            logger.exception("Error adding purchase")
            return OperationResult(ok=False, error=f"Failed to add item: {e}")

        record = record.with_id(new_id)
        self.state.records.append(record)
        self._snapshot()
        return OperationResult(ok=True, record=record)

    async def update(self, record_id: int, values: RecordFields) -> OperationResult:
        """Replace every field of an existing purchase.

        Raises:
            UnsupportedUnit, UnsupportedCurrency, InvalidPurchaseDate: For
                invalid field values.
        """
        self._validate(values)
        async with self._lock_for(record_id):
            if self.state.find(record_id) is None:
                return OperationResult(ok=False, error=f"No purchase with id {record_id}")

            record = PurchaseRecord.from_fields(values, record_id=record_id)
            try:
                await asyncio.to_thread(self._db.update_record, record)
            except StoreError as e:
                logger.exception("Error updating purchase %d", record_id)
                return OperationResult(ok=False, error=f"Failed to update item: {e}")

            # Other ids may have been added or removed while the write ran
            index = self.state.index_of(record_id)
            if index is not None:
                self.state.records[index] = record
            self._snapshot()
            return OperationResult(ok=True, record=record)

    async def delete(self, record_id: int) -> OperationResult:
        async with self._lock_for(record_id):
            record = self.state.find(record_id)
            if record is None:
                return OperationResult(ok=False, error=f"No purchase with id {record_id}")

            try:
                await asyncio.to_thread(self._db.delete_record, record_id)
            except StoreError as e:
                logger.exception("Error deleting purchase %d", record_id)
                return OperationResult(ok=False, error=f"Failed to delete item: {e}")

            self.state.records = [r for r in self.state.records if r.id != record_id]
            self._locks.pop(record_id, None)
            self._snapshot()
            return OperationResult(ok=True, record=record)

    # ── queries ──

    def get(self, record_id: int) -> PurchaseRecord | None:
        return self.state.find(record_id)

    def list_filtered(
        self, filter_spec: FilterSpec | None = None, sort_key: str = "date"
    ) -> list[PurchaseRecord]:
        """Filter the collection and order it by ``sort_key``.

        Unknown sort keys keep store order.
        """
        filter_spec = filter_spec or FilterSpec()
        items = [r for r in self.state.records if filter_spec.matches(r)]

        match sort_key:
            case "name":
                items.sort(key=lambda r: r.product_name.casefold())
            case "date":
                items.sort(key=_date_sort_key)
            case "price":
                items.sort(key=self.calculator.anchor_price)
            case "priceDesc":
                items.sort(key=self.calculator.anchor_price, reverse=True)
        return items

    def compare_by_product_name(self, name: str) -> list[ComparisonRow]:
        """Purchases of the same product with anchor-currency unit prices."""
        wanted = name.lower()
        return [
            ComparisonRow(
                record=r,
                base_unit=base_unit_of(r.unit),
                standardized_price=self.calculator.anchor_standardized_price(r),
                currency=self.calculator.anchor,
            )
            for r in self.state.records
            if r.product_name.lower() == wanted
        ]

    def unique_values_of(self, field_name: str) -> list:
        """Distinct non-empty values of a record field, in first-seen order."""
        attr = _FIELD_ALIASES.get(field_name, field_name)
        if attr not in PurchaseRecord.__dataclass_fields__:
            raise ValueError(f"Unknown purchase field: {field_name!r}")

        seen: dict = {}
        for r in self.state.records:
            value = getattr(r, attr)
            if value:
                seen.setdefault(value, None)
        return list(seen)

    def total_spent(self) -> float:
        """Sum of all purchases in the anchor currency."""
        return sum(self.calculator.anchor_price(r) for r in self.state.records)


def with_changes(record: PurchaseRecord, **changes) -> RecordFields:
    """Field set of ``record`` with some values replaced."""
    return replace(record.to_fields(), **changes)
