from datetime import date
from decimal import Decimal

from conftest import SCOPE
from crud import daily_balances
from models.daily_balances import VendorDailyBalance
from models.purchase_line_items import PurchaseLineItem
from models.purchases import ScrapPurchase
from models.vendor_payments import VendorPayment
from scripts.rebuild_daily_balances import rebuild_daily_balances

D1, D2, D3 = date(2025, 1, 10), date(2025, 1, 11), date(2025, 1, 12)


def _seed(db, vendor):
    db.add_all([
        ScrapPurchase(company_id="C1", godown_id="G1", vendor_id=vendor.id, purchase_date=D1, total_amount=Decimal("1000.00")),
        ScrapPurchase(company_id="C1", godown_id="G1", vendor_id=vendor.id, purchase_date=D2, total_amount=Decimal("333.33")),
        VendorPayment(company_id="C1", godown_id="G1", vendor_id=vendor.id, payment_date=D2, amount=Decimal("400.00"), payment_mode="cash"),
        VendorPayment(company_id="C1", godown_id="G1", vendor_id=vendor.id, payment_date=D3, amount=Decimal("100.10"), payment_mode="bank"),
    ])
    db.commit()


def _snapshot_values(snapshot):
    return (snapshot.previous_balance, snapshot.purchase_amount, snapshot.paid_amount, snapshot.current_balance)


def test_stored_snapshot_satisfies_balance_identity(db, make_vendor):
    vendor = make_vendor("Ramesh")
    _seed(db, vendor)

    for on_date in (D1, D2, D3):
        daily_balances.recompute_and_store(db, SCOPE, vendor.id, on_date)
    db.commit()

    for snapshot in db.query(VendorDailyBalance).all():
        expected = (snapshot.previous_balance + snapshot.purchase_amount - snapshot.paid_amount).quantize(Decimal("0.01"))
        assert snapshot.current_balance == expected


def test_snapshot_does_not_depend_on_computation_order(db, make_vendor):
    vendor = make_vendor("Ramesh")
    _seed(db, vendor)

    out_of_order = _snapshot_values(daily_balances.recompute_and_store(db, SCOPE, vendor.id, D3))
    daily_balances.recompute_and_store(db, SCOPE, vendor.id, D1)
    daily_balances.recompute_and_store(db, SCOPE, vendor.id, D2)
    in_order = _snapshot_values(daily_balances.recompute_and_store(db, SCOPE, vendor.id, D3))

    assert out_of_order == in_order
    # 1000 + 333.33 - 400 before D3, then 100.10 paid on D3
    assert in_order == (Decimal("933.33"), Decimal("0.00"), Decimal("100.10"), Decimal("833.23"))


def test_recompute_is_idempotent_and_keeps_one_row(db, make_vendor):
    vendor = make_vendor("Ramesh")
    _seed(db, vendor)

    first = _snapshot_values(daily_balances.recompute_and_store(db, SCOPE, vendor.id, D2))
    second = _snapshot_values(daily_balances.recompute_and_store(db, SCOPE, vendor.id, D2))
    db.commit()

    assert first == second
    assert db.query(VendorDailyBalance).filter(VendorDailyBalance.balance_date == D2).count() == 1


def test_back_dated_write_refreshes_later_snapshots(db, make_vendor):
    vendor = make_vendor("Ramesh")
    _seed(db, vendor)
    for on_date in (D1, D2, D3):
        daily_balances.refresh_daily_balances(db, SCOPE, vendor.id, on_date)
    db.commit()

    db.add(ScrapPurchase(company_id="C1", godown_id="G1", vendor_id=vendor.id, purchase_date=D1, total_amount=Decimal("50.00")))
    db.flush()
    returned = daily_balances.refresh_daily_balances(db, SCOPE, vendor.id, D1)
    db.commit()

    assert returned.balance_date == D1
    assert returned.current_balance == Decimal("1050.00")
    d3 = daily_balances.get_snapshot(db, SCOPE, vendor.id, D3)
    assert d3.previous_balance == Decimal("983.33")
    assert d3.current_balance == Decimal("883.23")


def test_read_stored_balance_falls_back_to_computation_without_saving(db, make_vendor):
    vendor = make_vendor("Ramesh")
    _seed(db, vendor)

    balance = daily_balances.read_stored_balance(db, SCOPE, vendor, D2)

    assert balance.previous_balance == Decimal("1000.00")
    assert balance.current_balance == Decimal("933.33")
    assert db.query(VendorDailyBalance).count() == 0


def test_rebuild_script_restores_totals_and_snapshots(db, make_vendor, make_material):
    vendor = make_vendor("Ramesh")
    iron = make_material("Iron", "10")
    # Header total out of step with its only line
    purchase = ScrapPurchase(company_id="C1", godown_id="G1", vendor_id=vendor.id, purchase_date=D1, total_amount=Decimal("900.00"))
    purchase.items = [PurchaseLineItem(scrap_type_id=iron.id, material="Iron", weight=Decimal("100"), rate=Decimal("10.00"), amount=Decimal("1000.00"))]
    db.add(purchase)
    db.add(VendorPayment(company_id="C1", godown_id="G1", vendor_id=vendor.id, purchase_id=None, payment_date=D2, amount=Decimal("400.00"), payment_mode="cash"))
    # Stale snapshot left behind by a manual edit
    db.add(VendorDailyBalance(
        company_id="C1", godown_id="G1", vendor_id=vendor.id, balance_date=D2,
        previous_balance=Decimal("1"), purchase_amount=Decimal("2"), paid_amount=Decimal("3"), current_balance=Decimal("0"),
    ))
    db.commit()

    written = rebuild_daily_balances(db)
    db.commit()

    assert written == 2
    db.refresh(purchase)
    assert purchase.total_amount == Decimal("1000.00")
    d2 = daily_balances.get_snapshot(db, SCOPE, vendor.id, D2)
    assert _snapshot_values(d2) == (Decimal("1000.00"), Decimal("0.00"), Decimal("400.00"), Decimal("600.00"))
