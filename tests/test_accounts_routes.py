from decimal import Decimal

from conftest import money


def test_account_is_opened_in_scope(client):
    response = client.post("/accounts/", json={"name": "SBI current", "account_type": "bank", "opening_balance": "25000.50"})

    assert response.status_code == 201
    body = response.json()
    assert body["company_id"] == "C1"
    assert body["godown_id"] == "G1"
    assert money(body["balance"]) == Decimal("25000.50")

    other_godown = client.get("/accounts/", headers={"X-Godown-ID": "G2"}).json()
    assert other_godown == []


def test_vendor_payment_writes_a_debit_transaction(client, make_vendor):
    vendor_id = make_vendor("Ramesh").id
    account_id = client.post("/accounts/", json={"name": "Cash box", "opening_balance": "1000"}).json()["id"]

    client.post("/kabadiwala/withdrawal", json={
        "vendor_id": vendor_id, "amount": "300", "payment_date": "2025-01-10", "account_id": account_id,
    })

    transactions = client.get(f"/accounts/{account_id}/transactions").json()
    assert len(transactions) == 1
    assert transactions[0]["txn_type"] == "debit"
    assert transactions[0]["category"] == "kabadiwala payment"
    assert money(transactions[0]["amount"]) == Decimal("300")
    assert money(client.get("/accounts/").json()[0]["balance"]) == Decimal("700")


def test_payment_from_unknown_account_is_rolled_back(client, make_vendor):
    vendor_id = make_vendor("Ramesh").id

    response = client.post("/kabadiwala/withdrawal", json={
        "vendor_id": vendor_id, "amount": "300", "payment_date": "2025-01-10", "account_id": 77,
    })

    assert response.status_code == 404
    balance = client.get("/kabadiwala/balance", params={"vendor_id": vendor_id, "date": "2025-01-10"}).json()
    assert money(balance["today_paid"]) == Decimal("0")


def test_transactions_of_unknown_account_is_404(client):
    assert client.get("/accounts/5/transactions").status_code == 404
