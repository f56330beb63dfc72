import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from crud import payments as crud_payments
from crud import pricing
from crud.audit_log import create_audit_log
from crud.errors import PurchaseNotFoundError
from models.audit_mixin import now_ist
from models.purchases import ScrapPurchase, PaymentStatus
from models.vendors import Vendor, VendorCategory
from schemas.audit_log import AuditLogCreate
from schemas.payments import PaymentCreate
from schemas.purchases import PurchaseCreate, PurchaseLineCreate, PurchaseSummary, PurchaseLineItem
from utils import sqlalchemy_to_dict
from utils.formatting import to_money
from utils.scope import Scope

logger = logging.getLogger(__name__)


def _recompute_total(purchase: ScrapPurchase) -> Decimal:
    purchase.total_amount = to_money(sum((to_money(item.amount) for item in purchase.items), Decimal("0")))
    return purchase.total_amount


def create_purchase(db: Session, scope: Scope, vendor: Vendor, purchase: PurchaseCreate, purchase_date: date, user_id: str) -> ScrapPurchase:
    """Create a purchase with its priced line items and optional on-the-spot payment.

    Every line is priced before anything is written; one missing vendor rate
    raises MissingRateError and the caller rolls the transaction back.
    """
    items = [pricing.price_line(db, vendor.id, line.scrap_type_id, line.weight) for line in purchase.lines]

    db_purchase = ScrapPurchase(
        company_id=scope.company_id,
        godown_id=scope.godown_id,
        vendor_id=vendor.id,
        purchase_date=purchase_date,
        total_amount=Decimal("0"),
        payment_status=PaymentStatus.PENDING,
        notes=purchase.notes,
        created_by=user_id,
    )
    db_purchase.items = items
    _recompute_total(db_purchase)
    db.add(db_purchase)
    db.flush()

    if purchase.payment_amount > 0:
        crud_payments.record_payment(
            db,
            scope,
            vendor,
            PaymentCreate(
                vendor_id=vendor.id,
                amount=purchase.payment_amount,
                payment_date=purchase_date,
                payment_mode=purchase.payment_mode,
                notes=purchase.notes,
                purchase_id=db_purchase.id,
                account_id=purchase.account_id,
            ),
            purchase_date,
            user_id,
        )

    logger.info(f"Purchase (ID: {db_purchase.id}) of {db_purchase.total_amount} from vendor {vendor.id} with {len(items)} lines created by user {user_id} for {scope.company_id}/{scope.godown_id}")
    return db_purchase


def get_purchase(db: Session, scope: Scope, purchase_id: int, category: Optional[VendorCategory] = None) -> ScrapPurchase:
    query = db.query(ScrapPurchase).filter(
        ScrapPurchase.id == purchase_id,
        ScrapPurchase.company_id == scope.company_id,
        ScrapPurchase.godown_id == scope.godown_id,
    )
    if category is not None:
        query = query.join(Vendor, Vendor.id == ScrapPurchase.vendor_id).filter(Vendor.category == category)
    db_purchase = query.options(
        selectinload(ScrapPurchase.items),
        selectinload(ScrapPurchase.payments),
    ).first()
    if db_purchase is None:
        raise PurchaseNotFoundError(purchase_id)
    return db_purchase


def add_line_item(db: Session, scope: Scope, db_purchase: ScrapPurchase, line: PurchaseLineCreate, user_id: str) -> ScrapPurchase:
    """Append a priced line and rewrite the purchase total from all of its lines."""
    item = pricing.price_line(db, db_purchase.vendor_id, line.scrap_type_id, line.weight)
    db_purchase.items.append(item)
    _recompute_total(db_purchase)
    db.flush()
    crud_payments.refresh_payment_status(db, db_purchase)

    db_purchase.updated_at = now_ist()
    db_purchase.updated_by = user_id
    db.flush()
    logger.info(f"Line '{item.material}' ({item.weight} kg) added to purchase (ID: {db_purchase.id}); total now {db_purchase.total_amount}")
    return db_purchase


def delete_purchase(db: Session, scope: Scope, db_purchase: ScrapPurchase, user_id: str) -> ScrapPurchase:
    """Soft delete a purchase. Payments already made against it stay on the vendor's ledger."""
    old_values = sqlalchemy_to_dict(db_purchase)
    db_purchase.deleted_at = now_ist()
    db_purchase.deleted_by = user_id
    db.flush()

    create_audit_log(db, AuditLogCreate(
        table_name='scrap_purchases',
        record_id=db_purchase.id,
        changed_by=user_id,
        action='DELETE',
        old_values=old_values,
        new_values=sqlalchemy_to_dict(db_purchase),
    ))
    logger.info(f"Purchase (ID: {db_purchase.id}) soft deleted by user {user_id} for {scope.company_id}/{scope.godown_id}")
    return db_purchase


def list_purchases(
    db: Session,
    scope: Scope,
    category: VendorCategory,
    on_date: Optional[date] = None,
    vendor_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[PurchaseSummary]:
    query = (
        db.query(ScrapPurchase)
        .join(Vendor, Vendor.id == ScrapPurchase.vendor_id)
        .filter(
            ScrapPurchase.company_id == scope.company_id,
            ScrapPurchase.godown_id == scope.godown_id,
            Vendor.category == category,
        )
    )
    if on_date is not None:
        query = query.filter(ScrapPurchase.purchase_date == on_date)
    if vendor_id is not None:
        query = query.filter(ScrapPurchase.vendor_id == vendor_id)

    purchases = query.options(
        selectinload(ScrapPurchase.vendor),
        selectinload(ScrapPurchase.items),
        selectinload(ScrapPurchase.payments),
    ).order_by(ScrapPurchase.purchase_date.desc(), ScrapPurchase.id.desc()).offset(skip).limit(limit).all()

    return [
        PurchaseSummary(
            id=p.id,
            vendor_id=p.vendor_id,
            vendor_name=p.vendor.name,
            purchase_date=p.purchase_date,
            total_amount=to_money(p.total_amount),
            total_weight=sum((item.weight for item in p.items), Decimal("0")),
            total_paid=to_money(sum((payment.amount for payment in p.payments), Decimal("0"))),
            items_count=len(p.items),
            payment_status=p.payment_status,
            items=[PurchaseLineItem.model_validate(item) for item in p.items],
        )
        for p in purchases
    ]
