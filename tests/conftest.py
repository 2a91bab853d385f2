"""Shared test fixtures."""

from datetime import datetime

import pytest

from catalog import create_app, db as _db
from catalog.models import ProductRecord
from catalog.services import cache_service
from catalog.services.import_service import ImportOptions, ImportService


class FakePersistence:
    """In-memory store with the same surface as ProductPersistence."""

    def __init__(self, records=None, fail_on=None):
        self.records = {}
        self.categories = {}
        self.fail_on = set(fail_on or [])
        self.next_id = 1
        self.add_calls = 0
        self.update_calls = 0
        for record in records or []:
            self._store(record.copy())

    def _store(self, record):
        if not record.id:
            record.id = self.next_id
        self.next_id = max(self.next_id, record.id + 1)
        self.records[record.id] = record
        return record

    def get_all(self):
        return [r.copy() for r in self.records.values()]

    def add(self, record):
        self.add_calls += 1
        if record.name in self.fail_on:
            raise RuntimeError("database is locked")
        return self._store(record.copy()).copy()

    def update(self, record):
        self.update_calls += 1
        if record.name in self.fail_on:
            raise RuntimeError("database is locked")
        if record.id not in self.records:
            raise LookupError(f"Product {record.id} not found")
        self.records[record.id] = record.copy()

    def get_or_create_category_id(self, name, create=True):
        key = name.strip().lower()
        if key not in self.categories:
            if not create:
                return None
            self.categories[key] = len(self.categories) + 1
        return self.categories[key]

    def by_name(self, name):
        return next((r for r in self.records.values() if r.name == name), None)


@pytest.fixture
def app():
    """Application with a fresh in-memory database per test."""
    cache_service.invalidate()
    app = create_app('testing')
    with app.app_context():
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_store():
    """Factory for a FakePersistence seeded with records."""
    return FakePersistence


@pytest.fixture
def store():
    return FakePersistence()


@pytest.fixture
def service(store):
    return ImportService(persistence=store, sleep=lambda seconds: None)


@pytest.fixture
def options():
    return ImportOptions(batch_delay=0)


@pytest.fixture
def existing_record():
    """A fully populated catalog record as loaded from storage."""
    return ProductRecord(
        id=7,
        name="Lavabo Seti",
        sku="SKU123",
        brand="ACME",
        category="Banyo",
        category_id=3,
        description="<p>Seramik lavabo</p>",
        weight=5.0,
        desi=12.5,
        warranty_months=24,
        color="Beyaz",
        trendyol_barcode="TY-001",
        logo_barcodes=["L1", "", "L3"],
        image_urls=["https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg"],
        video_urls=["https://cdn.example.com/v.mp4"],
        image_url="https://cdn.example.com/a.jpg",
        is_archived=True,
        created_date=datetime(2024, 1, 10, 9, 30, 0),
        updated_date=datetime(2024, 2, 1, 12, 0, 0),
    ).normalize()
