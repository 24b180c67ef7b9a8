"""Local persistence: SQLite structured store plus a flat JSON mirror."""

from .mirror import FlatMirror
from .purchases import PurchaseDB
from .schema import ensure_schema

__all__ = [
    "FlatMirror",
    "PurchaseDB",
    "ensure_schema",
]
