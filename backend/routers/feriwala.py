"""
Feriwala (hawker) purchases, payments and balances.

Nothing beyond the purchase and payment rows is stored; balances are computed
from them each time they are read.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging

from crud import ledger
from crud import payments as crud_payments
from crud import purchases as crud_purchases
from crud.errors import CategoryMismatchError, LedgerError, PaymentNotFoundError
from database import get_db
from models.audit_mixin import today_ist
from models.vendors import VendorCategory
from schemas.balances import PaymentResult, PurchaseResult, VendorBalance
from schemas.payments import PaymentCreate, VendorPayment
from schemas.purchases import PurchaseCreate, PurchaseLineCreate, PurchaseSummary, ScrapPurchase
from utils.http_errors import to_http_exception
from utils.scope import Scope, get_scope, get_user_identifier

router = APIRouter(prefix="/feriwala", tags=["Feriwala"])
logger = logging.getLogger("feriwala")

CATEGORY = VendorCategory.FERIWALA


@router.post("/add", response_model=PurchaseResult, status_code=status.HTTP_201_CREATED)
def add_purchase(
    purchase: PurchaseCreate,
    db: Session = Depends(get_db),
    scope: Scope = Depends(get_scope),
    user_id: str = Depends(get_user_identifier),
):
    purchase_date = purchase.purchase_date or today_ist()
    try:
        vendor = ledger.get_active_vendor(db, purchase.vendor_id, CATEGORY)
        db_purchase = crud_purchases.create_purchase(db, scope, vendor, purchase, purchase_date, user_id)
        db.commit()
    except (LedgerError, SQLAlchemyError) as e:
        db.rollback()
        raise to_http_exception(e, f"add feriwala purchase for vendor {purchase.vendor_id}")

    db.refresh(db_purchase)
    return PurchaseResult(purchase=ScrapPurchase.model_validate(db_purchase))


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
    try:
        db_purchase = crud_purchases.get_purchase(db, scope, purchase_id, CATEGORY)
        ledger.get_active_vendor(db, db_purchase.vendor_id, CATEGORY)
        crud_purchases.add_line_item(db, scope, db_purchase, line, user_id)
        db.commit()
    except (LedgerError, SQLAlchemyError) as e:
        db.rollback()
        raise to_http_exception(e, f"add item to purchase {purchase_id}")

    db.refresh(db_purchase)
    return PurchaseResult(purchase=ScrapPurchase.model_validate(db_purchase))


@router.delete("/purchases/{purchase_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_purchase(
    purchase_id: int,
    db: Session = Depends(get_db),
    scope: Scope = Depends(get_scope),
    user_id: str = Depends(get_user_identifier),
):
    try:
        db_purchase = crud_purchases.get_purchase(db, scope, purchase_id, CATEGORY)
        crud_purchases.delete_purchase(db, scope, db_purchase, user_id)
        db.commit()
    except (LedgerError, SQLAlchemyError) as e:
        db.rollback()
        raise to_http_exception(e, f"delete purchase {purchase_id}")


@router.post("/withdrawal", response_model=PaymentResult, status_code=status.HTTP_201_CREATED)
def add_payment(
    payment: PaymentCreate,
    db: Session = Depends(get_db),
    scope: Scope = Depends(get_scope),
    user_id: str = Depends(get_user_identifier),
):
    """Record money paid out to a feriwala. The balance is picked up on the next read."""
    payment_date = payment.payment_date or today_ist()
    try:
        vendor = ledger.get_active_vendor(db, payment.vendor_id, CATEGORY)
        db_payment = crud_payments.record_payment(db, scope, vendor, payment, payment_date, user_id)
        db.commit()
    except (LedgerError, SQLAlchemyError) as e:
        db.rollback()
        raise to_http_exception(e, f"record payment for vendor {payment.vendor_id}")

    db.refresh(db_payment)
    return PaymentResult(payment=VendorPayment.model_validate(db_payment))


@router.delete("/withdrawal/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
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
        db.commit()
    except (LedgerError, SQLAlchemyError) as e:
        db.rollback()
        raise to_http_exception(e, f"delete payment {payment_id}")


@router.get("/balance", response_model=VendorBalance)
def read_balance(
    vendor_id: int,
    balance_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
    scope: Scope = Depends(get_scope),
):
    """One feriwala's balance on a date (default today), computed on read."""
    try:
        vendor = ledger.get_vendor(db, vendor_id)
        if vendor.category != CATEGORY:
            raise CategoryMismatchError(vendor, CATEGORY)
        return ledger.read_balance(db, scope, vendor_id, balance_date or today_ist())
    except LedgerError as e:
        raise to_http_exception(e, f"read balance for vendor {vendor_id}")


@router.get("/balances", response_model=List[VendorBalance])
def read_balances(
    balance_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
    scope: Scope = Depends(get_scope),
):
    return ledger.read_balances(db, scope, CATEGORY, balance_date or today_ist())
