"""Purchase record CRUD operations."""

from __future__ import annotations

import functools
import logging
import sqlite3
import threading
from pathlib import Path

from ..errors import StoreReadError, StoreWriteError
from ..models import PurchaseRecord
from .schema import ensure_schema

logger = logging.getLogger(__name__)

_COLUMNS = (
    "product_name, store_name, quantity, unit, price, currency, "
    "purchase_date, notes"
)


def _locked(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


def _row_to_record(row: sqlite3.Row) -> PurchaseRecord:
    return PurchaseRecord(
        id=row["id"],
        product_name=row["product_name"],
        store_name=row["store_name"],
        quantity=row["quantity"],
        unit=row["unit"],
        price=row["price"],
        currency=row["currency"],
        purchase_date=row["purchase_date"],
        notes=row["notes"],
    )


def _values(record: PurchaseRecord) -> tuple:
    return (
        record.product_name,
        record.store_name,
        record.quantity,
        record.unit,
        record.price,
        record.currency,
        record.purchase_date,
        record.notes or "",
    )


class PurchaseDB:
    """Manages the purchases table (the structured store)."""

    def __init__(
        self, db_path: str | Path = "~/.config/foodtracker/purchases.db"
    ) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        # Calls arrive from worker threads; one statement sequence at a time
        self._lock = threading.RLock()

    def __enter__(self) -> PurchaseDB:
        self.initialize()
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _get_conn(self) -> sqlite3.Connection:
        with self._lock:
            if self._conn is None:
                self._conn = ensure_schema(self._db_path)
            return self._conn

    def initialize(self) -> None:
        """Open the store eagerly.

        Raises:
            StoreInitError: If the database cannot be opened or created.
        """
        self._get_conn()
        logger.debug("Purchase store ready: %s", self._db_path)

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    @_locked
    def add_record(self, record: PurchaseRecord) -> int:
        """Insert a record, ignoring any id it carries.

        Returns:
            The newly assigned row ID.
        """
        conn = self._get_conn()
        try:
            cur = conn.execute(
                f"INSERT INTO purchases ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                _values(record),
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreWriteError(f"Failed to add record: {e}") from e
        return cur.lastrowid

    @_locked
    def get_all_records(self) -> list[PurchaseRecord]:
        """Return every record in insertion order."""
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM purchases ORDER BY id").fetchall()
        except sqlite3.Error as e:
            raise StoreReadError(f"Failed to read records: {e}") from e
        return [_row_to_record(r) for r in rows]

    @_locked
    def get_record(self, record_id: int) -> PurchaseRecord | None:
        """Look up a record by ID. Returns None if it does not exist."""
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM purchases WHERE id = ?", (record_id,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreReadError(f"Failed to read record {record_id}: {e}") from e
        return _row_to_record(row) if row else None

    @_locked
    def update_record(self, record: PurchaseRecord) -> None:
        """Replace every non-id field of an existing record.

        Raises:
            StoreWriteError: If the record has no id, the id does not exist,
                or the write fails. A missing record is never created.
        """
        if record.id is None:
            raise StoreWriteError("Cannot update a record without an id")

        conn = self._get_conn()
        try:
            cur = conn.execute(
                """UPDATE purchases
                   SET product_name = ?, store_name = ?, quantity = ?, unit = ?,
                       price = ?, currency = ?, purchase_date = ?, notes = ?,
                       updated_at = datetime('now', 'localtime')
                   WHERE id = ?""",
                (*_values(record), record.id),
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreWriteError(f"Failed to update record {record.id}: {e}") from e

        if cur.rowcount == 0:
            raise StoreWriteError(f"No record with id {record.id}")

    @_locked
    def delete_record(self, record_id: int) -> None:
        """Delete a record by ID. Deleting a missing ID is a no-op."""
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM purchases WHERE id = ?", (record_id,))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreWriteError(f"Failed to delete record {record_id}: {e}") from e

    @_locked
    def clear_all(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM purchases")
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreWriteError(f"Failed to clear records: {e}") from e

    @_locked
    def count(self) -> int:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT COUNT(*) AS cnt FROM purchases").fetchone()
        except sqlite3.Error as e:
            raise StoreReadError(f"Failed to count records: {e}") from e
        return row["cnt"]

    @_locked
    def search_by_product_name(self, prefix: str) -> list[PurchaseRecord]:
        """Records whose product name starts with ``prefix``, ignoring case."""
        conn = self._get_conn()
        escaped = (
            prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        )
        try:
            rows = conn.execute(
                """SELECT * FROM purchases
                   WHERE lower(product_name) LIKE lower(?) || '%' ESCAPE '\\'
                   ORDER BY product_name, id""",
                (escaped,),
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreReadError(f"Failed to search records: {e}") from e
        return [_row_to_record(r) for r in rows]

    @_locked
    def get_by_store(self, store_name: str) -> list[PurchaseRecord]:
        """Records bought at exactly ``store_name``."""
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM purchases WHERE store_name = ? ORDER BY id",
                (store_name,),
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreReadError(f"Failed to read records for store: {e}") from e
        return [_row_to_record(r) for r in rows]
