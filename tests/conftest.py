# tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - In-memory SQLite (DATABASE_URL=sqlite://) on one shared connection
# - Tables dropped and recreated for every test
# - Seed through the db fixture and commit before calling the client;
#   the client's session shares the same connection
# - Every request carries the C1/G1 scope headers
# ---------------------------------------------------------------------

import os
import tempfile
from decimal import Decimal

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="scrap-ledger-logs-"))

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine
from main import app
from crud import pricing
from models.vendors import Vendor, VendorCategory
from utils.scope import Scope

SCOPE = Scope(company_id="C1", godown_id="G1")
OTHER_SCOPE = Scope(company_id="C1", godown_id="G2")
SCOPE_HEADERS = {"X-Company-ID": "C1", "X-Godown-ID": "G1", "X-User-ID": "tester"}


@pytest.fixture(autouse=True)
def _reset_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        test_client.headers.update(SCOPE_HEADERS)
        yield test_client


@pytest.fixture
def make_vendor(db):
    """Committed vendor factory."""
    def _make(name, category=VendorCategory.KABADIWALA):
        vendor = Vendor(name=name, category=category)
        db.add(vendor)
        db.commit()
        db.refresh(vendor)
        return vendor
    return _make


@pytest.fixture
def make_material(db):
    """Committed scrap type factory."""
    def _make(material_type, global_rate):
        scrap_type = pricing.create_scrap_type(db, material_type, Decimal(str(global_rate)))
        db.commit()
        db.refresh(scrap_type)
        return scrap_type
    return _make


@pytest.fixture
def set_rate(db):
    """Give a vendor a committed rate for a material."""
    def _set(vendor, scrap_type, vendor_rate):
        db_rate = pricing.set_vendor_rate(db, vendor.id, scrap_type.id, Decimal(str(vendor_rate)))
        db.commit()
        db.refresh(db_rate)
        return db_rate
    return _set


def money(value) -> Decimal:
    """JSON decimals arrive as strings; compare them as Decimals."""
    return Decimal(str(value))
