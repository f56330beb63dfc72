"""
Kabadiwala (collector) purchases, payments and balances.

Every write refreshes the vendor's daily balance snapshot for the date it
touches, and every later stored snapshot, in the same transaction. Balance
reads return the stored snapshot, computing on demand when a date has none.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging

from crud import daily_balances, ledger
from crud import payments as crud_payments
from crud import purchases as crud_purchases
from crud.errors import CategoryMismatchError, LedgerError, PaymentNotFoundError
from database import get_db
from models.audit_mixin import today_ist
from models.vendors import VendorCategory
from schemas.balances import DailyBalance, PaymentResult, PurchaseResult, VendorBalance
from schemas.payments import PaymentCreate, VendorPayment
from schemas.purchases import PurchaseCreate, PurchaseLineCreate, PurchaseSummary, ScrapPurchase
from utils.http_errors import to_http_exception
from utils.scope import Scope, get_scope, get_user_identifier

router = APIRouter(prefix="/kabadiwala", tags=["Kabadiwala"])
logger = logging.getLogger("kabadiwala")

CATEGORY = VendorCategory.KABADIWALA


@router.post("/add", response_model=PurchaseResult, status_code=status.HTTP_201_CREATED)
def add_purchase(
    purchase: PurchaseCreate,
    db: Session = Depends(get_db),
    scope: Scope = Depends(get_scope),
    user_id: str = Depends(get_user_identifier),
):
    """Record a purchase from a kabadiwala, priced at the vendor's rates."""
    purchase_date = purchase.purchase_date or today_ist()
    try:
        vendor = ledger.get_active_vendor(db, purchase.vendor_id, CATEGORY)
        db_purchase = crud_purchases.create_purchase(db, scope, vendor, purchase, purchase_date, user_id)
        snapshot = daily_balances.refresh_daily_balances(db, scope, vendor.id, purchase_date)
        db.commit()
    except (LedgerError, SQLAlchemyError) as e:
        db.rollback()
        raise to_http_exception(e, f"add kabadiwala purchase for vendor {purchase.vendor_id}")

    db.refresh(db_purchase)
    db.refresh(snapshot)
    return PurchaseResult(
        purchase=ScrapPurchase.model_validate(db_purchase),
        balance=DailyBalance.model_validate(snapshot),
    )


@router.get("/list", response_model=List[PurchaseSummary])
def list_purchases(
    on_date: Optional[date] = Query(None, alias="date"),
    vendor_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    scope: Scope = Depends(get_scope),
):
    return crud_purchases.list_purchases(db, scope, CATEGORY, on_date=on_date, vendor_id=vendor_id, skip=skip, limit=limit)


@router.get("/purchases/{purchase_id}", response_model=ScrapPurchase)
def read_purchase(
    purchase_id: int,
    db: Session = Depends(get_db),
    scope: Scope = Depends(get_scope),
):
    try:
        return crud_purchases.get_purchase(db, scope, purchase_id, CATEGORY)
    except LedgerError as e:
        raise to_http_exception(e, f"read purchase {purchase_id}")


@router.post("/purchases/{purchase_id}/items", response_model=PurchaseResult)
def add_purchase_item(
    purchase_id: int,
    line: PurchaseLineCreate,
    db: Session = Depends(get_db),
    scope: Scope = Depends(get_scope),
    user_id: str = Depends(get_user_identifier),
):
    """Append a line to an existing purchase; the total and balances follow."""
    try:
        db_purchase = crud_purchases.get_purchase(db, scope, purchase_id, CATEGORY)
        ledger.get_active_vendor(db, db_purchase.vendor_id, CATEGORY)
        crud_purchases.add_line_item(db, scope, db_purchase, line, user_id)
        snapshot = daily_balances.refresh_daily_balances(db, scope, db_purchase.vendor_id, db_purchase.purchase_date)
        db.commit()
    except (LedgerError, SQLAlchemyError) as e:
        db.rollback()
        raise to_http_exception(e, f"add item to purchase {purchase_id}")

    db.refresh(db_purchase)
    db.refresh(snapshot)
    return PurchaseResult(
        purchase=ScrapPurchase.model_validate(db_purchase),
        balance=DailyBalance.model_validate(snapshot),
    )


@router.delete("/purchases/{purchase_id}", response_model=DailyBalance)
def delete_purchase(
    purchase_id: int,
    db: Session = Depends(get_db),
    scope: Scope = Depends(get_scope),
    user_id: str = Depends(get_user_identifier),
):
    """Soft delete a purchase and return the vendor's refreshed balance for its date."""
    try:
        db_purchase = crud_purchases.get_purchase(db, scope, purchase_id, CATEGORY)
        crud_purchases.delete_purchase(db, scope, db_purchase, user_id)
        snapshot = daily_balances.refresh_daily_balances(db, scope, db_purchase.vendor_id, db_purchase.purchase_date)
        db.commit()
    except (LedgerError, SQLAlchemyError) as e:
        db.rollback()
        raise to_http_exception(e, f"delete purchase {purchase_id}")
    db.refresh(snapshot)
    return snapshot


@router.post("/withdrawal", response_model=PaymentResult, status_code=status.HTTP_201_CREATED)
def add_payment(
    payment: PaymentCreate,
    db: Session = Depends(get_db),
    scope: Scope = Depends(get_scope),
    user_id: str = Depends(get_user_identifier),
):
    """Record money paid out to a kabadiwala."""
    payment_date = payment.payment_date or today_ist()
    try:
        vendor = ledger.get_active_vendor(db, payment.vendor_id, CATEGORY)
        db_payment = crud_payments.record_payment(db, scope, vendor, payment, payment_date, user_id)
        snapshot = daily_balances.refresh_daily_balances(db, scope, vendor.id, payment_date)
        db.commit()
    except (LedgerError, SQLAlchemyError) as e:
        db.rollback()
        raise to_http_exception(e, f"record payment for vendor {payment.vendor_id}")

    db.refresh(db_payment)
    db.refresh(snapshot)
    return PaymentResult(
        payment=VendorPayment.model_validate(db_payment),
        balance=DailyBalance.model_validate(snapshot),
    )


@router.delete("/withdrawal/{payment_id}", response_model=DailyBalance)
def delete_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    scope: Scope = Depends(get_scope),
    user_id: str = Depends(get_user_identifier),
):
    try:
        db_payment = crud_payments.get_payment(db, scope, payment_id)
        if db_payment.vendor.category != CATEGORY:
            raise PaymentNotFoundError(payment_id)
        crud_payments.delete_payment(db, scope, payment_id, user_id)
        snapshot = daily_balances.refresh_daily_balances(db, scope, db_payment.vendor_id, db_payment.payment_date)
        db.commit()
    except (LedgerError, SQLAlchemyError) as e:
        db.rollback()
        raise to_http_exception(e, f"delete payment {payment_id}")
    db.refresh(snapshot)
    return snapshot


@router.get("/balance", response_model=VendorBalance)
def read_balance(
    vendor_id: int,
    balance_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
    scope: Scope = Depends(get_scope),
):
    """One kabadiwala's balance on a date (default today)."""
    try:
        vendor = ledger.get_vendor(db, vendor_id)
        if vendor.category != CATEGORY:
            raise CategoryMismatchError(vendor, CATEGORY)
        return daily_balances.read_stored_balance(db, scope, vendor, balance_date or today_ist())
    except LedgerError as e:
        raise to_http_exception(e, f"read balance for vendor {vendor_id}")


@router.get("/balances", response_model=List[VendorBalance])
def read_balances(
    balance_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
    scope: Scope = Depends(get_scope),
):
    """Every kabadiwala's balance on a date, ordered by vendor name."""
    return daily_balances.read_stored_balances(db, scope, balance_date)


@router.get("/daily-balances", response_model=List[DailyBalance])
def read_daily_balances(
    vendor_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    scope: Scope = Depends(get_scope),
):
    """Stored snapshot history for one kabadiwala."""
    try:
        ledger.get_vendor(db, vendor_id)
    except LedgerError as e:
        raise to_http_exception(e, f"read daily balances for vendor {vendor_id}")
    return daily_balances.list_snapshots(db, scope, vendor_id, start_date, end_date)
