"""
Kabadiwala daily balance snapshots.

A snapshot row per (company, godown, vendor, date) stores the figures computed
by crud.ledger so reads do not have to re-aggregate. Snapshots are written
inside the same transaction as the purchase or payment that changed them.

Because a snapshot's previous_balance depends on every earlier row, a write
dated D refreshes the snapshot for D and every stored snapshot after D. The
vendor row is locked first so two writers for the same vendor cannot both
read stale sums and overwrite each other.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from crud import ledger
from crud.errors import VendorNotFoundError
from models.audit_mixin import now_ist
from models.daily_balances import VendorDailyBalance
from models.vendors import Vendor, VendorCategory
from schemas.balances import VendorBalance
from utils.formatting import format_indian_currency
from utils.scope import Scope

logger = logging.getLogger(__name__)


def _snapshot_query(db: Session, scope: Scope, vendor_id: int):
    return db.query(VendorDailyBalance).filter(
        VendorDailyBalance.company_id == scope.company_id,
        VendorDailyBalance.godown_id == scope.godown_id,
        VendorDailyBalance.vendor_id == vendor_id,
    )


def get_snapshot(db: Session, scope: Scope, vendor_id: int, on_date: date) -> Optional[VendorDailyBalance]:
    return _snapshot_query(db, scope, vendor_id).filter(VendorDailyBalance.balance_date == on_date).first()


def recompute_and_store(db: Session, scope: Scope, vendor_id: int, on_date: date) -> VendorDailyBalance:
    """Aggregate, derive and upsert the snapshot for one vendor/date.

    Flushes but never commits; errors propagate so the caller's transaction
    is rolled back as a whole.
    """
    figures = ledger.compute_balance(ledger.aggregate(db, scope, vendor_id, on_date))

    snapshot = get_snapshot(db, scope, vendor_id, on_date)
    if snapshot is None:
        snapshot = VendorDailyBalance(
            company_id=scope.company_id,
            godown_id=scope.godown_id,
            vendor_id=vendor_id,
            balance_date=on_date,
        )
        db.add(snapshot)

    snapshot.previous_balance = figures.previous_balance
    snapshot.purchase_amount = figures.today_purchase
    snapshot.paid_amount = figures.today_paid
    snapshot.current_balance = figures.current_balance
    snapshot.updated_at = now_ist()
    db.flush()
    return snapshot


def lock_vendor(db: Session, vendor_id: int) -> Vendor:
    vendor = db.query(Vendor).filter(Vendor.id == vendor_id).with_for_update().first()
    if vendor is None:
        raise VendorNotFoundError(vendor_id)
    return vendor


def refresh_daily_balances(db: Session, scope: Scope, vendor_id: int, from_date: date) -> VendorDailyBalance:
    """Refresh the snapshot for from_date and every later stored snapshot.

    Returns the snapshot for from_date.
    """
    lock_vendor(db, vendor_id)
    snapshot = recompute_and_store(db, scope, vendor_id, from_date)

    later_dates = [
        row.balance_date
        for row in _snapshot_query(db, scope, vendor_id)
        .filter(VendorDailyBalance.balance_date > from_date)
        .order_by(VendorDailyBalance.balance_date.asc())
        .with_entities(VendorDailyBalance.balance_date)
        .all()
    ]
    for later_date in later_dates:
        recompute_and_store(db, scope, vendor_id, later_date)

    if later_dates:
        logger.info(f"Propagated balance change for vendor {vendor_id} from {from_date} through {later_dates[-1]} ({len(later_dates)} later snapshots)")
    logger.info(f"Vendor {vendor_id} balance on {from_date}: {format_indian_currency(snapshot.current_balance)} ({scope.company_id}/{scope.godown_id})")
    return snapshot


def _from_snapshot(vendor: Vendor, snapshot: VendorDailyBalance) -> VendorBalance:
    return VendorBalance(
        vendor_id=vendor.id,
        vendor_name=vendor.name,
        balance_date=snapshot.balance_date,
        previous_balance=snapshot.previous_balance,
        today_purchase=snapshot.purchase_amount,
        today_paid=snapshot.paid_amount,
        current_balance=snapshot.current_balance,
    )


def read_stored_balance(db: Session, scope: Scope, vendor: Vendor, on_date: date) -> VendorBalance:
    """Stored snapshot for the date, or an on-demand (unsaved) computation when there is none."""
    snapshot = get_snapshot(db, scope, vendor.id, on_date)
    if snapshot is not None:
        return _from_snapshot(vendor, snapshot)
    return ledger.read_balance(db, scope, vendor.id, on_date)


def read_stored_balances(db: Session, scope: Scope, on_date: date) -> List[VendorBalance]:
    vendors = db.query(Vendor).filter(Vendor.category == VendorCategory.KABADIWALA).order_by(Vendor.name.asc()).all()
    return [read_stored_balance(db, scope, vendor, on_date) for vendor in vendors]


def list_snapshots(db: Session, scope: Scope, vendor_id: int, start_date: Optional[date] = None, end_date: Optional[date] = None) -> List[VendorDailyBalance]:
    query = _snapshot_query(db, scope, vendor_id)
    if start_date:
        query = query.filter(VendorDailyBalance.balance_date >= start_date)
    if end_date:
        query = query.filter(VendorDailyBalance.balance_date <= end_date)
    return query.order_by(VendorDailyBalance.balance_date.asc()).all()

