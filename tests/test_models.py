"""Tests for purchase record serialization."""

from foodtracker.models import PurchaseRecord, RecordFields


def _fields() -> RecordFields:
    return RecordFields(
        product_name="Avocados",
        store_name="Netto",
        quantity=3,
        unit="piece",
        price=30,
        currency="DKK",
        purchase_date="2025-01-09",
        notes="On sale this week",
    )


def test_from_fields_without_id():
    record = PurchaseRecord.from_fields(_fields())
    assert record.id is None
    assert record.product_name == "Avocados"


def test_from_fields_with_id():
    assert PurchaseRecord.from_fields(_fields(), record_id=7).id == 7


def test_to_fields_round_trip():
    record = PurchaseRecord.from_fields(_fields(), record_id=7)
    assert record.to_fields() == _fields()


def test_to_dict_camel_case():
    data = PurchaseRecord.from_fields(_fields(), record_id=7).to_dict()
    assert data == {
        "id": 7,
        "productName": "Avocados",
        "storeName": "Netto",
        "quantity": 3,
        "unit": "piece",
        "price": 30,
        "currency": "DKK",
        "purchaseDate": "2025-01-09",
        "notes": "On sale this week",
    }


def test_from_dict_camel_case_without_id():
    record = PurchaseRecord.from_dict(
        {
            "productName": "Organic Almonds",
            "storeName": "Irma",
            "quantity": "500",
            "unit": "g",
            "price": 12.5,
            "currency": "EUR",
            "purchaseDate": "2025-01-09",
        }
    )
    assert record.id is None
    assert record.quantity == 500.0
    assert record.notes == ""


def test_from_dict_snake_case():
    record = PurchaseRecord.from_dict(
        {
            "id": 3,
            "product_name": "Avocados",
            "store_name": "Netto",
            "quantity": 3,
            "unit": "piece",
            "price": 30,
            "currency": "DKK",
            "purchase_date": "2025-01-09",
            "notes": None,
        }
    )
    assert record.id == 3
    assert record.notes == ""


def test_with_and_without_id():
    record = PurchaseRecord.from_fields(_fields())
    assert record.with_id(5).id == 5
    assert record.with_id(5).without_id() == record
    assert record.id is None
