from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from models.purchases import PaymentStatus
from schemas.payments import PaymentMode, VendorPayment


class PurchaseLineCreate(BaseModel):
    scrap_type_id: int
    weight: Decimal = Field(..., gt=0, decimal_places=3)  # kg


class PurchaseLineItem(BaseModel):
    id: int
    scrap_type_id: int
    material: str
    weight: Decimal
    rate: Decimal
    amount: Decimal

    class Config:
        from_attributes = True


class PurchaseCreate(BaseModel):
    vendor_id: int
    purchase_date: Optional[date] = None  # defaults to today
    lines: List[PurchaseLineCreate] = Field(..., min_length=1)
    notes: Optional[str] = None
    # Optional payment made on the spot, attached to this purchase
    payment_amount: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    payment_mode: PaymentMode = PaymentMode.CASH
    account_id: Optional[int] = None


class ScrapPurchase(BaseModel):
    id: int
    company_id: str
    godown_id: str
    vendor_id: int
    purchase_date: date
    total_amount: Decimal
    payment_status: PaymentStatus
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    items: List[PurchaseLineItem] = []
    payments: List[VendorPayment] = []

    class Config:
        from_attributes = True


class PurchaseSummary(BaseModel):
    id: int
    vendor_id: int
    vendor_name: str
    purchase_date: date
    total_amount: Decimal
    total_weight: Decimal
    total_paid: Decimal
    items_count: int
    payment_status: PaymentStatus
    items: List[PurchaseLineItem] = []
