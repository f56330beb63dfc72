from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
import enum


class PaymentMode(str, enum.Enum):
    CASH = "cash"
    BANK = "bank"
    OTHER = "other"


class PaymentCreate(BaseModel):
    vendor_id: int
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    payment_date: Optional[date] = None  # defaults to today
    payment_mode: PaymentMode = PaymentMode.CASH
    notes: Optional[str] = None
    purchase_id: Optional[int] = None
    account_id: Optional[int] = None


class VendorPayment(BaseModel):
    id: int
    vendor_id: int
    purchase_id: Optional[int] = None
    payment_date: date
    amount: Decimal
    payment_mode: str
    notes: Optional[str] = None
    account_id: Optional[int] = None
    created_by: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
