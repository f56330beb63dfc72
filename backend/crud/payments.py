import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from crud import accounts as crud_accounts
from crud.audit_log import create_audit_log
from crud.errors import InvalidAmountError, PaymentNotFoundError, PurchaseNotFoundError
from models.accounts import TransactionType
from models.audit_mixin import now_ist
from models.purchases import ScrapPurchase, PaymentStatus
from models.vendor_payments import VendorPayment
from models.vendors import Vendor
from schemas.audit_log import AuditLogCreate
from schemas.payments import PaymentCreate
from utils import sqlalchemy_to_dict
from utils.formatting import to_money
from utils.scope import Scope

logger = logging.getLogger(__name__)


def payment_status_for(total_amount: Decimal, total_paid: Decimal) -> PaymentStatus:
    if total_paid <= 0:
        return PaymentStatus.PENDING
    if total_paid >= total_amount:
        return PaymentStatus.PAID
    return PaymentStatus.PARTIAL


def total_paid_for_purchase(db: Session, purchase_id: int) -> Decimal:
    return to_money(
        db.query(func.coalesce(func.sum(VendorPayment.amount), 0))
        .filter(VendorPayment.purchase_id == purchase_id, VendorPayment.deleted_at.is_(None))
        .scalar()
    )


def refresh_payment_status(db: Session, purchase: ScrapPurchase) -> PaymentStatus:
    purchase.payment_status = payment_status_for(to_money(purchase.total_amount), total_paid_for_purchase(db, purchase.id))
    return purchase.payment_status


def record_payment(db: Session, scope: Scope, vendor: Vendor, payment: PaymentCreate, payment_date: date, user_id: str) -> VendorPayment:
    """Record a payment from the business to a vendor.

    A payment may settle a specific purchase (purchase_id) or stand alone. When
    an account is given the amount is debited from it. The caller refreshes
    balances and commits.
    """
    amount = to_money(payment.amount)
    if amount <= 0:
        raise InvalidAmountError(payment.amount)

    purchase = None
    if payment.purchase_id is not None:
        purchase = db.query(ScrapPurchase).filter(
            ScrapPurchase.id == payment.purchase_id,
            ScrapPurchase.vendor_id == vendor.id,
            ScrapPurchase.company_id == scope.company_id,
            ScrapPurchase.godown_id == scope.godown_id,
        ).first()
        if purchase is None:
            raise PurchaseNotFoundError(payment.purchase_id)

    db_payment = VendorPayment(
        company_id=scope.company_id,
        godown_id=scope.godown_id,
        vendor_id=vendor.id,
        purchase_id=payment.purchase_id,
        payment_date=payment_date,
        amount=amount,
        payment_mode=payment.payment_mode.value,
        notes=payment.notes,
        account_id=payment.account_id,
        created_by=user_id,
    )
    db.add(db_payment)
    db.flush()

    if payment.account_id is not None:
        crud_accounts.post_transaction(
            db, scope, payment.account_id, TransactionType.DEBIT, db_payment.amount,
            category=f"{vendor.category.value} payment",
            reference=f"Payment to {vendor.name}",
            user_id=user_id,
        )

    if purchase is not None:
        refresh_payment_status(db, purchase)

    logger.info(f"Payment of {db_payment.amount} to vendor {vendor.id} on {payment_date} recorded by user {user_id} for {scope.company_id}/{scope.godown_id}")
    return db_payment


def get_payment(db: Session, scope: Scope, payment_id: int) -> VendorPayment:
    db_payment = db.query(VendorPayment).filter(
        VendorPayment.id == payment_id,
        VendorPayment.company_id == scope.company_id,
        VendorPayment.godown_id == scope.godown_id,
    ).first()
    if db_payment is None:
        raise PaymentNotFoundError(payment_id)
    return db_payment


def delete_payment(db: Session, scope: Scope, payment_id: int, user_id: str) -> VendorPayment:
    """Soft delete a payment, returning any debited money to its account."""
    db_payment = get_payment(db, scope, payment_id)

    old_values = sqlalchemy_to_dict(db_payment)
    db_payment.deleted_at = now_ist()
    db_payment.deleted_by = user_id
    db.flush()

    if db_payment.account_id is not None:
        crud_accounts.post_transaction(
            db, scope, db_payment.account_id, TransactionType.CREDIT, db_payment.amount,
            category=f"{db_payment.vendor.category.value} payment reversal",
            reference=f"Reversal of payment #{db_payment.id}",
            user_id=user_id,
        )

    if db_payment.purchase_id is not None:
        purchase = db.query(ScrapPurchase).filter(ScrapPurchase.id == db_payment.purchase_id).first()
        if purchase is not None:
            refresh_payment_status(db, purchase)

    create_audit_log(db, AuditLogCreate(
        table_name='vendor_payments',
        record_id=db_payment.id,
        changed_by=user_id,
        action='DELETE',
        old_values=old_values,
        new_values=sqlalchemy_to_dict(db_payment),
    ))
    logger.info(f"Payment ID {payment_id} soft deleted by user {user_id} for {scope.company_id}/{scope.godown_id}")
    return db_payment
