from pydantic import BaseModel
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

from schemas.payments import VendorPayment
from schemas.purchases import ScrapPurchase


class LedgerAggregate(BaseModel):
    """The four sums behind every balance view, all defaulting to zero."""
    prior_purchase: Decimal = Decimal("0.00")
    prior_paid: Decimal = Decimal("0.00")
    today_purchase: Decimal = Decimal("0.00")
    today_paid: Decimal = Decimal("0.00")


class BalanceFigures(BaseModel):
    previous_balance: Decimal
    today_purchase: Decimal
    today_paid: Decimal
    current_balance: Decimal


class VendorBalance(BalanceFigures):
    vendor_id: int
    vendor_name: str
    balance_date: date


class DailyBalance(BaseModel):
    id: int
    company_id: str
    godown_id: str
    vendor_id: int
    balance_date: date
    previous_balance: Decimal
    purchase_amount: Decimal
    paid_amount: Decimal
    current_balance: Decimal
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaymentResult(BaseModel):
    payment: VendorPayment
    # Only kabadiwala payments carry a refreshed snapshot
    balance: Optional[DailyBalance] = None


class PurchaseResult(BaseModel):
    purchase: ScrapPurchase
    balance: Optional[DailyBalance] = None
