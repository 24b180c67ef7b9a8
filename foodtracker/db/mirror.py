"""Flat key-value mirror stored as a single JSON file.

This tier is a best-effort fallback: every operation logs and degrades to
``False`` / ``None`` on failure instead of raising.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from ..models import PurchaseRecord

logger = logging.getLogger(__name__)

_SENTINEL_KEY = "__foodtracker_probe__"


class FlatMirror:
    """String-keyed, string-valued store persisted to one JSON file."""

    def __init__(
        self,
        path: str | Path = "~/.config/foodtracker/mirror.json",
        records_key: str = "foodItems",
    ) -> None:
        self._path = Path(path).expanduser()
        self.records_key = records_key

    @property
    def path(self) -> Path:
        return self._path

    def _read_entries(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        with open(self._path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Mirror file {self._path} does not hold an object")
        return data

    def _write_entries(self, entries: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(entries, f, ensure_ascii=False)
            os.replace(tmp, self._path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def is_available(self) -> bool:
        """Probe the store by writing then deleting a sentinel key."""
        try:
            entries = self._read_entries()
            entries[_SENTINEL_KEY] = _SENTINEL_KEY
            self._write_entries(entries)
            del entries[_SENTINEL_KEY]
            self._write_entries(entries)
            return True
        except (OSError, ValueError) as e:
            logger.debug("Flat mirror unavailable at %s: %s", self._path, e)
            return False

    def save(self, key: str, value: Any) -> bool:
        """Serialize ``value`` to JSON and store it under ``key``."""
        if not self.is_available():
            logger.warning("Flat mirror is not available")
            return False

        try:
            entries = self._read_entries()
            entries[key] = json.dumps(value, ensure_ascii=False)
            self._write_entries(entries)
            return True
        except (OSError, TypeError, ValueError):
            logger.exception("Error saving %r to flat mirror", key)
            return False

    def load(self, key: str) -> Any | None:
        """Return the deserialized value under ``key``, or None."""
        if not self.is_available():
            logger.warning("Flat mirror is not available")
            return None

        try:
            serialized = self._read_entries().get(key)
            if serialized is None:
                return None
            return json.loads(serialized)
        except (OSError, TypeError, ValueError):
            logger.exception("Error loading %r from flat mirror", key)
            return None

    def remove(self, key: str) -> bool:
        if not self.is_available():
            logger.warning("Flat mirror is not available")
            return False

        try:
            entries = self._read_entries()
            entries.pop(key, None)
            self._write_entries(entries)
            return True
        except (OSError, ValueError):
            logger.exception("Error removing %r from flat mirror", key)
            return False

    def clear(self) -> bool:
        if not self.is_available():
            logger.warning("Flat mirror is not available")
            return False

        try:
            self._write_entries({})
            return True
        except OSError:
            logger.exception("Error clearing flat mirror")
            return False

    def save_records(self, records: list[PurchaseRecord]) -> bool:
        """Snapshot the whole collection under the records key."""
        return self.save(self.records_key, [r.to_dict() for r in records])

    def load_records(self) -> list[PurchaseRecord]:
        """Load the snapshot under the records key. Empty on any failure."""
        data = self.load(self.records_key)
        if not isinstance(data, list):
            return []

        records: list[PurchaseRecord] = []
        for item in data:
            try:
                records.append(PurchaseRecord.from_dict(item))
            except (TypeError, ValueError, AttributeError):
                logger.warning("Skipping malformed mirror entry: %r", item)
        return records
