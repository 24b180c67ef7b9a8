"""Tests for the flat JSON mirror."""

import json

import pytest

from foodtracker.db.mirror import FlatMirror
from foodtracker.models import PurchaseRecord


@pytest.fixture
def mirror(tmp_path):
    return FlatMirror(tmp_path / "mirror.json")


@pytest.fixture
def records():
    return [
        PurchaseRecord(
            id=1,
            product_name="Avocados",
            store_name="Netto",
            quantity=3.0,
            unit="piece",
            price=30.0,
            currency="DKK",
            purchase_date="2025-01-09",
            notes="On sale this week",
        ),
        PurchaseRecord(
            id=2,
            product_name="Organic Almonds",
            store_name="Irma",
            quantity=500.0,
            unit="g",
            price=12.5,
            currency="EUR",
            purchase_date="2025-01-09",
        ),
    ]


def test_is_available(mirror):
    assert mirror.is_available() is True


def test_probe_leaves_no_sentinel(mirror):
    mirror.save("k", 1)
    mirror.is_available()
    entries = json.loads(mirror.path.read_text())
    assert list(entries) == ["k"]


def test_save_and_load(mirror):
    assert mirror.save("numbers", [1, 2, 3]) is True
    assert mirror.load("numbers") == [1, 2, 3]


def test_values_stored_as_strings(mirror):
    """Each entry is a serialized string, not a nested JSON value."""
    mirror.save("numbers", [1, 2])
    entries = json.loads(mirror.path.read_text())
    assert entries["numbers"] == "[1, 2]"


def test_load_missing_key(mirror):
    assert mirror.load("nothing") is None


def test_remove_and_clear(mirror):
    mirror.save("a", 1)
    mirror.save("b", 2)
    assert mirror.remove("a") is True
    assert mirror.load("a") is None
    assert mirror.clear() is True
    assert mirror.load("b") is None


def test_unserializable_value_returns_false(mirror):
    assert mirror.save("bad", object()) is False


def test_corrupt_file_degrades(mirror):
    mirror.path.write_text("{not json")
    assert mirror.is_available() is False
    assert mirror.load("foodItems") is None
    assert mirror.save("foodItems", []) is False
    assert mirror.load_records() == []


def test_unwritable_location_degrades(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    mirror = FlatMirror(blocker / "mirror.json")

    assert mirror.is_available() is False
    assert mirror.save("k", 1) is False
    assert mirror.load("k") is None
    assert mirror.remove("k") is False
    assert mirror.clear() is False


def test_save_and_load_records(mirror, records):
    assert mirror.save_records(records) is True
    assert mirror.load_records() == records


def test_records_use_camel_case_keys(mirror, records):
    mirror.save_records(records)
    data = mirror.load("foodItems")
    assert data[0]["productName"] == "Avocados"
    assert data[0]["purchaseDate"] == "2025-01-09"


def test_custom_records_key(tmp_path, records):
    mirror = FlatMirror(tmp_path / "m.json", records_key="purchases")
    mirror.save_records(records)
    assert mirror.load("purchases") is not None
    assert mirror.load("foodItems") is None


def test_malformed_entries_skipped(mirror, records):
    mirror.save("foodItems", [records[0].to_dict(), {"unexpected": True}, 5])
    assert mirror.load_records() == [records[0]]


def test_non_list_snapshot(mirror):
    mirror.save("foodItems", {"productName": "Avocados"})
    assert mirror.load_records() == []
