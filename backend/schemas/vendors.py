from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from models.vendors import VendorCategory, VendorStatus


class VendorBase(BaseModel):
    name: str = Field(..., min_length=1)
    category: VendorCategory


class VendorCreate(VendorBase):
    pass


class VendorUpdate(BaseModel):
    # Category is fixed at creation; ledgers of the two categories behave differently
    name: Optional[str] = Field(None, min_length=1)
    status: Optional[VendorStatus] = None

    @field_validator("name", "status")
    @classmethod
    def reject_null(cls, v):
        # omitted means unchanged; both columns are NOT NULL
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class Vendor(VendorBase):
    id: int
    status: VendorStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VendorRateSummary(BaseModel):
    scrap_type_id: int
    scrap_type: str
    vendor_rate: Decimal
    rate_offset: Decimal


class VendorWithRates(BaseModel):
    vendor_id: int
    vendor_name: str
    category: VendorCategory
    status: VendorStatus
    rates: List[VendorRateSummary] = []
