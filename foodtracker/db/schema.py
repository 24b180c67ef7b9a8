"""Database schema definitions and migration helpers."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from ..errors import StoreInitError

_SCHEMA_VERSION = 1

_DDL = """
CREATE TABLE IF NOT EXISTS purchases (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    product_name TEXT NOT NULL,
    store_name TEXT NOT NULL,
    quantity REAL NOT NULL,
    unit TEXT NOT NULL,
    price REAL NOT NULL,
    currency TEXT NOT NULL,
    purchase_date TEXT NOT NULL,
    notes TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL DEFAULT (datetime('now', 'localtime')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now', 'localtime'))
);

CREATE INDEX IF NOT EXISTS idx_purchases_product_name ON purchases(product_name);
CREATE INDEX IF NOT EXISTS idx_purchases_store_name ON purchases(store_name);
CREATE INDEX IF NOT EXISTS idx_purchases_unit ON purchases(unit);
CREATE INDEX IF NOT EXISTS idx_purchases_currency ON purchases(currency);
CREATE INDEX IF NOT EXISTS idx_purchases_purchase_date ON purchases(purchase_date);

CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER NOT NULL
);
"""


def ensure_schema(db_path: str | Path) -> sqlite3.Connection:
    """Open (or create) the database and ensure the schema is up to date.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        An open sqlite3.Connection with the schema applied.

    Raises:
        StoreInitError: If the file cannot be created or opened.
    """
    db_path = Path(db_path).expanduser()
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(db_path), check_same_thread=False)
    except (OSError, sqlite3.Error) as e:
        raise StoreInitError(f"Cannot open purchase store at {db_path}: {e}") from e

    try:
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")

        try:
            row = conn.execute("SELECT version FROM schema_version").fetchone()
            current_version = row["version"] if row else 0
        except sqlite3.OperationalError:
            current_version = 0

        if current_version < _SCHEMA_VERSION:
            conn.executescript(_DDL)
            conn.execute("DELETE FROM schema_version")
            conn.execute(
                "INSERT INTO schema_version (version) VALUES (?)",
                (_SCHEMA_VERSION,),
            )
            conn.commit()
    except sqlite3.Error as e:
        conn.close()
        raise StoreInitError(f"Cannot initialize purchase store at {db_path}: {e}") from e

    return conn
