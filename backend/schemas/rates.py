from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal


class ScrapTypeCreate(BaseModel):
    material_type: str = Field(..., min_length=1)
    global_rate: Decimal = Field(..., ge=0)


class ScrapType(BaseModel):
    id: int
    material_type: str
    global_rate: Decimal
    last_updated: Optional[datetime] = None

    class Config:
        from_attributes = True


class GlobalRateUpdate(BaseModel):
    new_global_rate: Decimal = Field(..., ge=0)


class VendorRateSet(BaseModel):
    vendor_id: int
    scrap_type_id: int
    vendor_rate: Decimal = Field(..., ge=0)


class VendorRate(BaseModel):
    id: int
    vendor_id: int
    scrap_type_id: int
    vendor_rate: Decimal
    rate_offset: Decimal

    class Config:
        from_attributes = True


class GlobalRateUpdateResult(BaseModel):
    scrap_type: ScrapType
    affected_vendor_rates: List[VendorRate] = []
