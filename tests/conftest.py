"""Shared test fixtures for all tests."""
import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from stockcheck.core.database import Base, get_db
from stockcheck.models import Godown, GodownItem
from stockcheck.main import app
from stockcheck.middleware import limiter
from stockcheck.session_registry import registry
from stockcheck.schemas.stock_check import ExpectedItem


@pytest.fixture(scope="function")
def test_db():
    """Create a fresh in-memory SQLite database for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def client(test_db):
    """Create a test client with dependency override."""
    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    registry.clear()
    limiter.reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    registry.clear()


@pytest.fixture
def sample_godown(test_db):
    """A godown holding two XYZ boxes, one ABC box and a malformed barcode."""
    godown = Godown(name="Main Godown", city="Jaipur", state="Rajasthan")
    test_db.add(godown)
    test_db.commit()

    items = [
        GodownItem(godown_id=godown.id, barcode="XYZ001", item_code="XYZ Tiles", item_name="XYZ Tiles 60x60"),
        GodownItem(godown_id=godown.id, barcode="XYZ002", item_code="XYZ Tiles", item_name="XYZ Tiles 60x60"),
        GodownItem(godown_id=godown.id, barcode="ABC999", item_code="ABC Marble", item_name="ABC Marble Slab"),
        GodownItem(godown_id=godown.id, barcode="AB", item_code="Broken label"),
    ]
    test_db.add_all(items)
    test_db.commit()
    return godown


@pytest.fixture
def other_godown(test_db):
    godown = Godown(name="East Godown", city="Kota", state="Rajasthan")
    test_db.add(godown)
    test_db.commit()
    test_db.add(GodownItem(godown_id=godown.id, barcode="XYZ500", item_code="XYZ Tiles"))
    test_db.commit()
    return godown


@pytest.fixture
def expected_xyz():
    """Expected items of the XYZ product type."""
    return [
        ExpectedItem(barcode="XYZ001", item_code="XYZ"),
        ExpectedItem(barcode="XYZ002", item_code="XYZ"),
    ]


@pytest.fixture
def report_payload(sample_godown):
    """Wire-format report for the sample godown."""
    return {
        "godownId": sample_godown.id,
        "godownName": sample_godown.name,
        "productType": "XYZ Tiles",
        "productPrefix": "XYZ",
        "expectedCount": 2,
        "scannedCount": 1,
        "missingCount": 1,
        "wrongScansCount": 1,
        "scannedItems": [
            {"barcode": "XYZ001", "scanTime": "2025-01-15T10:00:00+00:00", "manuallyMarked": False}
        ],
        "missingItems": [
            {"barcode": "XYZ002", "itemCode": "XYZ Tiles"}
        ],
        "wrongScans": [
            {"barcode": "ABC999", "expectedPrefix": "XYZ", "actualPrefix": "ABC", "time": "2025-01-15T10:01:00+00:00"}
        ],
        "submittedAt": "2025-01-15T10:05:00+00:00",
        "submittedBy": "Operator 1"
    }
