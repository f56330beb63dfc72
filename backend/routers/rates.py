from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from typing import List, Optional
import logging

from crud import pricing
from crud.audit_log import create_audit_log
from crud.errors import LedgerError
from database import get_db
from models.scrap_types import ScrapType as ScrapTypeModel
from models.vendor_rates import VendorRate as VendorRateModel
from models.vendors import Vendor as VendorModel, VendorCategory
from schemas.audit_log import AuditLogCreate
from schemas.rates import (
    GlobalRateUpdate,
    GlobalRateUpdateResult,
    ScrapType,
    ScrapTypeCreate,
    VendorRate,
    VendorRateSet,
)
from schemas.vendors import VendorRateSummary, VendorWithRates
from utils import sqlalchemy_to_dict
from utils.http_errors import to_http_exception
from utils.scope import get_user_identifier

router = APIRouter(prefix="/rates", tags=["Rates"])
logger = logging.getLogger("rates")


@router.post("/materials", response_model=ScrapType, status_code=status.HTTP_201_CREATED)
def create_material(
    material: ScrapTypeCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_identifier),
):
    try:
        scrap_type = pricing.create_scrap_type(db, material.material_type, material.global_rate)
        db.commit()
    except (LedgerError, SQLAlchemyError) as e:
        db.rollback()
        raise to_http_exception(e, "create material")
    db.refresh(scrap_type)
    logger.info(f"Material '{scrap_type.material_type}' created at {scrap_type.global_rate}/kg by {user_id}")
    return scrap_type


@router.get("/materials", response_model=List[ScrapType])
def read_materials(db: Session = Depends(get_db)):
    return db.query(ScrapTypeModel).order_by(ScrapTypeModel.material_type.asc()).all()


@router.delete("/materials/{scrap_type_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_material(
    scrap_type_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_identifier),
):
    """Delete a material and its vendor rates. 409 while purchases use it."""
    try:
        scrap_type = pricing.get_scrap_type(db, scrap_type_id)
        old_values = sqlalchemy_to_dict(scrap_type)
        pricing.delete_scrap_type(db, scrap_type_id)
        create_audit_log(db, AuditLogCreate(
            table_name='scrap_types',
            record_id=scrap_type_id,
            changed_by=user_id,
            action='DELETE',
            old_values=old_values,
        ))
        db.commit()
    except (LedgerError, SQLAlchemyError) as e:
        db.rollback()
        raise to_http_exception(e, f"delete material {scrap_type_id}")
    logger.info(f"Material '{old_values['material_type']}' (ID: {scrap_type_id}) deleted by {user_id}")


@router.post("/materials/{scrap_type_id}/global-rate", response_model=GlobalRateUpdateResult)
def update_global_rate(
    scrap_type_id: int,
    payload: GlobalRateUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_identifier),
):
    """Change a material's global rate; every vendor rate for it moves by the same amount."""
    try:
        old_values = sqlalchemy_to_dict(pricing.get_scrap_type(db, scrap_type_id))
        scrap_type, affected = pricing.update_global_rate(db, scrap_type_id, payload.new_global_rate)
        create_audit_log(db, AuditLogCreate(
            table_name='scrap_types',
            record_id=scrap_type_id,
            changed_by=user_id,
            action='UPDATE',
            old_values=old_values,
            new_values=sqlalchemy_to_dict(scrap_type),
        ))
        db.commit()
    except (LedgerError, SQLAlchemyError) as e:
        db.rollback()
        raise to_http_exception(e, f"update global rate for material {scrap_type_id}")

    logger.info(f"Global rate for material {scrap_type_id} set to {payload.new_global_rate} by {user_id}")
    return GlobalRateUpdateResult(
        scrap_type=ScrapType.model_validate(scrap_type),
        affected_vendor_rates=[VendorRate.model_validate(rate) for rate in affected],
    )


@router.put("/vendor-rates", response_model=VendorRate)
def set_vendor_rate(
    payload: VendorRateSet,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_identifier),
):
    """Insert or overwrite a vendor's rate for one material."""
    try:
        db_rate = pricing.set_vendor_rate(db, payload.vendor_id, payload.scrap_type_id, payload.vendor_rate)
        db.commit()
    except (LedgerError, SQLAlchemyError) as e:
        db.rollback()
        raise to_http_exception(e, "set vendor rate")
    db.refresh(db_rate)
    logger.info(f"Vendor {payload.vendor_id} rate for material {payload.scrap_type_id} set to {db_rate.vendor_rate} (offset {db_rate.rate_offset}) by {user_id}")
    return db_rate


@router.get("/vendors", response_model=List[VendorWithRates])
def read_vendor_rates(
    category: Optional[VendorCategory] = None,
    db: Session = Depends(get_db),
):
    """Every vendor with its per-material rates."""
    query = db.query(VendorModel).options(
        selectinload(VendorModel.rates).selectinload(VendorRateModel.scrap_type)
    )
    if category:
        query = query.filter(VendorModel.category == category)

    result = []
    for vendor in query.order_by(VendorModel.name.asc()).all():
        result.append(VendorWithRates(
            vendor_id=vendor.id,
            vendor_name=vendor.name,
            category=vendor.category,
            status=vendor.status,
            rates=[
                VendorRateSummary(
                    scrap_type_id=rate.scrap_type_id,
                    scrap_type=rate.scrap_type.material_type,
                    vendor_rate=rate.vendor_rate,
                    rate_offset=rate.rate_offset,
                )
                for rate in sorted(vendor.rates, key=lambda r: r.scrap_type.material_type)
            ],
        ))
    return result
