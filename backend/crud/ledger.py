"""
Vendor ledger aggregation.

Every balance shown for a vendor is built from four sums over its purchases and
payments inside one company/godown scope:

- prior_purchase / prior_paid: rows dated strictly before the as-of date
- today_purchase / today_paid: rows dated exactly on the as-of date

Purchases are dated by purchase_date, payments by their own payment_date.
Balances are "purchases minus payments", so a positive balance is money the
business still owes the vendor.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import func, case
from sqlalchemy.orm import Session

from crud.errors import VendorNotFoundError, InactiveVendorError, CategoryMismatchError
from models.purchases import ScrapPurchase
from models.vendor_payments import VendorPayment
from models.vendors import Vendor, VendorCategory, VendorStatus
from schemas.balances import LedgerAggregate, BalanceFigures, VendorBalance
from utils.formatting import to_money
from utils.scope import Scope

logger = logging.getLogger(__name__)


def get_vendor(db: Session, vendor_id: int) -> Vendor:
    vendor = db.query(Vendor).filter(Vendor.id == vendor_id).first()
    if vendor is None:
        raise VendorNotFoundError(vendor_id)
    return vendor


def get_active_vendor(db: Session, vendor_id: int, category: Optional[VendorCategory] = None) -> Vendor:
    """Vendor that may take new purchases or payments (exists, active, right category)."""
    vendor = get_vendor(db, vendor_id)
    if category is not None and vendor.category != category:
        raise CategoryMismatchError(vendor, category)
    if vendor.status != VendorStatus.ACTIVE:
        raise InactiveVendorError(vendor)
    return vendor


def _split_sums(db: Session, model, amount_col, date_col, scope: Scope, vendor_id: int, as_of_date: date):
    prior = func.coalesce(func.sum(case((date_col < as_of_date, amount_col), else_=0)), 0)
    today = func.coalesce(func.sum(case((date_col == as_of_date, amount_col), else_=0)), 0)
    row = (
        db.query(prior.label("prior"), today.label("today"))
        .select_from(model)
        .filter(
            model.company_id == scope.company_id,
            model.godown_id == scope.godown_id,
            model.vendor_id == vendor_id,
            model.deleted_at.is_(None),
            date_col <= as_of_date,
        )
        .one()
    )
    return to_money(row.prior), to_money(row.today)


def _aggregate(db: Session, scope: Scope, vendor_id: int, as_of_date: date) -> LedgerAggregate:
    prior_purchase, today_purchase = _split_sums(
        db, ScrapPurchase, ScrapPurchase.total_amount, ScrapPurchase.purchase_date, scope, vendor_id, as_of_date
    )
    prior_paid, today_paid = _split_sums(
        db, VendorPayment, VendorPayment.amount, VendorPayment.payment_date, scope, vendor_id, as_of_date
    )
    return LedgerAggregate(
        prior_purchase=prior_purchase,
        prior_paid=prior_paid,
        today_purchase=today_purchase,
        today_paid=today_paid,
    )


def aggregate(db: Session, scope: Scope, vendor_id: int, as_of_date: date) -> LedgerAggregate:
    """Compute the four ledger sums for one vendor as of a calendar date.

    Pure read. Every value is a 2-place Decimal and zero when nothing matches.

    Raises:
        VendorNotFoundError: if the vendor does not exist.
    """
    get_vendor(db, vendor_id)
    return _aggregate(db, scope, vendor_id, as_of_date)


def compute_balance(agg: LedgerAggregate) -> BalanceFigures:
    previous_balance = to_money(agg.prior_purchase - agg.prior_paid)
    current_balance = to_money(previous_balance + agg.today_purchase - agg.today_paid)
    return BalanceFigures(
        previous_balance=previous_balance,
        today_purchase=agg.today_purchase,
        today_paid=agg.today_paid,
        current_balance=current_balance,
    )


def _vendor_balance(vendor: Vendor, as_of_date: date, figures: BalanceFigures) -> VendorBalance:
    return VendorBalance(
        vendor_id=vendor.id,
        vendor_name=vendor.name,
        balance_date=as_of_date,
        **figures.model_dump(),
    )


def read_balance(db: Session, scope: Scope, vendor_id: int, as_of_date: date) -> VendorBalance:
    """Balance of one vendor computed on demand; nothing is persisted."""
    vendor = get_vendor(db, vendor_id)
    figures = compute_balance(_aggregate(db, scope, vendor.id, as_of_date))
    return _vendor_balance(vendor, as_of_date, figures)


def read_balances(db: Session, scope: Scope, category: VendorCategory, as_of_date: date) -> List[VendorBalance]:
    """On-demand balances for every vendor of a category, ordered by name.

    One aggregate per vendor; there is no batching across vendors.
    """
    vendors = db.query(Vendor).filter(Vendor.category == category).order_by(Vendor.name.asc()).all()
    balances = []
    for vendor in vendors:
        figures = compute_balance(_aggregate(db, scope, vendor.id, as_of_date))
        balances.append(_vendor_balance(vendor, as_of_date, figures))
    logger.debug(f"Computed {len(balances)} {category.value} balances for {scope.company_id}/{scope.godown_id} on {as_of_date}")
    return balances
