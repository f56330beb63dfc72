from decimal import Decimal

import pytest

from conftest import money
from models.daily_balances import VendorDailyBalance
from models.vendors import VendorCategory


@pytest.fixture
def bala(make_vendor, make_material, set_rate):
    """Feriwala selling iron at 12/kg. Returns (vendor_id, iron_id)."""
    iron = make_material("Iron", "10")
    vendor = make_vendor("Bala", VendorCategory.FERIWALA)
    set_rate(vendor, iron, "12")
    return vendor.id, iron.id


def test_balance_is_computed_on_read_and_never_stored(client, db, bala):
    vendor_id, iron_id = bala

    response = client.post("/feriwala/add", json={
        "vendor_id": vendor_id,
        "purchase_date": "2025-01-10",
        "lines": [{"scrap_type_id": iron_id, "weight": "100"}],
    })
    assert response.status_code == 201
    assert response.json()["balance"] is None
    assert money(response.json()["purchase"]["total_amount"]) == Decimal("1200")

    response = client.post("/feriwala/withdrawal", json={"vendor_id": vendor_id, "amount": "1200", "payment_date": "2025-01-12"})
    assert response.status_code == 201

    balance = client.get("/feriwala/balance", params={"vendor_id": vendor_id, "date": "2025-01-12"}).json()
    assert money(balance["previous_balance"]) == Decimal("1200")
    assert money(balance["today_paid"]) == Decimal("1200")
    assert money(balance["current_balance"]) == Decimal("0")

    on_purchase_day = client.get("/feriwala/balance", params={"vendor_id": vendor_id, "date": "2025-01-10"}).json()
    assert money(on_purchase_day["current_balance"]) == Decimal("1200")

    assert db.query(VendorDailyBalance).count() == 0


def test_balances_cover_only_feriwalas(client, bala, make_vendor):
    make_vendor("Ramesh")
    make_vendor("Arjun", VendorCategory.FERIWALA)

    balances = client.get("/feriwala/balances", params={"date": "2025-01-10"}).json()

    assert [b["vendor_name"] for b in balances] == ["Arjun", "Bala"]


def test_deleted_payment_no_longer_counts(client, bala):
    vendor_id, iron_id = bala
    client.post("/feriwala/add", json={
        "vendor_id": vendor_id,
        "purchase_date": "2025-01-10",
        "lines": [{"scrap_type_id": iron_id, "weight": "10"}],
    })
    payment_id = client.post("/feriwala/withdrawal", json={
        "vendor_id": vendor_id, "amount": "50", "payment_date": "2025-01-10",
    }).json()["payment"]["id"]

    assert client.delete(f"/feriwala/withdrawal/{payment_id}").status_code == 204

    balance = client.get("/feriwala/balance", params={"vendor_id": vendor_id, "date": "2025-01-10"}).json()
    assert money(balance["current_balance"]) == Decimal("120")


def test_kabadiwala_records_are_not_visible_here(client, make_vendor, make_material, set_rate):
    iron = make_material("Iron", "10")
    kabadiwala = make_vendor("Ramesh")
    set_rate(kabadiwala, iron, "10")
    purchase_id = client.post("/kabadiwala/add", json={
        "vendor_id": kabadiwala.id,
        "purchase_date": "2025-01-10",
        "lines": [{"scrap_type_id": iron.id, "weight": "1"}],
    }).json()["purchase"]["id"]

    assert client.get(f"/feriwala/purchases/{purchase_id}").status_code == 404
    assert client.get("/feriwala/list").json() == []
    assert client.get("/feriwala/balance", params={"vendor_id": kabadiwala.id}).status_code == 400
