from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from crud.audit_log import create_audit_log
from database import get_db
from models.audit_mixin import now_ist
from models.daily_balances import VendorDailyBalance
from models.purchases import ScrapPurchase
from models.vendor_payments import VendorPayment
from models.vendors import Vendor as VendorModel, VendorCategory, VendorStatus
from schemas.audit_log import AuditLogCreate
from schemas.vendors import Vendor, VendorCreate, VendorUpdate
from utils import sqlalchemy_to_dict
from utils.http_errors import to_http_exception
from utils.scope import get_user_identifier

router = APIRouter(prefix="/vendors", tags=["Vendors"])
logger = logging.getLogger("vendors")


def _get_vendor_or_404(db: Session, vendor_id: int) -> VendorModel:
    db_vendor = db.query(VendorModel).filter(VendorModel.id == vendor_id).first()
    if db_vendor is None:
        raise HTTPException(status_code=404, detail="Vendor not found")
    return db_vendor


def _has_history(db: Session, vendor_id: int) -> bool:
    """True once any purchase, payment or snapshot (soft deleted or not) references the vendor."""
    for model in (ScrapPurchase, VendorPayment, VendorDailyBalance):
        row = (
            db.query(model.id)
            .filter(model.vendor_id == vendor_id)
            .execution_options(include_deleted=True)
            .first()
        )
        if row is not None:
            return True
    return False


@router.post("/", response_model=Vendor, status_code=status.HTTP_201_CREATED)
def create_vendor(
    vendor: VendorCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_identifier),
):
    """Create a new kabadiwala or feriwala vendor."""
    db_vendor = db.query(VendorModel).filter(VendorModel.name == vendor.name).first()
    if db_vendor:
        raise HTTPException(status_code=400, detail="Vendor with this name already exists")

    db_vendor = VendorModel(**vendor.model_dump(), status=VendorStatus.ACTIVE, created_by=user_id)
    try:
        db.add(db_vendor)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise to_http_exception(e, "create vendor")
    db.refresh(db_vendor)
    logger.info(f"Vendor '{db_vendor.name}' ({db_vendor.category.value}) created by {user_id}")
    return db_vendor


@router.get("/", response_model=List[Vendor])
def read_vendors(
    skip: int = 0,
    limit: int = 100,
    category: Optional[VendorCategory] = None,
    status: Optional[VendorStatus] = None,
    db: Session = Depends(get_db),
):
    """Retrieve vendors, optionally filtered by category and status."""
    query = db.query(VendorModel)
    if category:
        query = query.filter(VendorModel.category == category)
    if status:
        query = query.filter(VendorModel.status == status)
    return query.order_by(VendorModel.name.asc()).offset(skip).limit(limit).all()


@router.get("/{vendor_id}", response_model=Vendor)
def read_vendor(vendor_id: int, db: Session = Depends(get_db)):
    return _get_vendor_or_404(db, vendor_id)


@router.patch("/{vendor_id}", response_model=Vendor)
def update_vendor(
    vendor_id: int,
    vendor: VendorUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_identifier),
):
    """Rename a vendor or change its status."""
    db_vendor = _get_vendor_or_404(db, vendor_id)

    if vendor.name is not None and vendor.name != db_vendor.name:
        existing_vendor = db.query(VendorModel).filter(VendorModel.name == vendor.name).first()
        if existing_vendor:
            raise HTTPException(status_code=400, detail="Vendor with this name already exists")

    try:
        old_values = sqlalchemy_to_dict(db_vendor)
        for key, value in vendor.model_dump(exclude_unset=True).items():
            setattr(db_vendor, key, value)
        db_vendor.updated_at = now_ist()
        db_vendor.updated_by = user_id

        create_audit_log(db, AuditLogCreate(
            table_name='vendors',
            record_id=vendor_id,
            changed_by=user_id,
            action='UPDATE',
            old_values=old_values,
            new_values=sqlalchemy_to_dict(db_vendor),
        ))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise to_http_exception(e, f"update vendor {vendor_id}")
    db.refresh(db_vendor)
    logger.info(f"Vendor '{db_vendor.name}' (ID: {vendor_id}) updated by {user_id}")
    return db_vendor


@router.delete("/{vendor_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_vendor(
    vendor_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_identifier),
):
    """Delete a vendor that has no ledger history, together with its rates.

    A vendor with purchases, payments or balance snapshots is set to Inactive
    instead and the request answers 409.
    """
    db_vendor = _get_vendor_or_404(db, vendor_id)

    if _has_history(db, vendor_id):
        old_values = sqlalchemy_to_dict(db_vendor)
        db_vendor.status = VendorStatus.INACTIVE
        db_vendor.updated_at = now_ist()
        db_vendor.updated_by = user_id
        create_audit_log(db, AuditLogCreate(
            table_name='vendors',
            record_id=vendor_id,
            changed_by=user_id,
            action='DEACTIVATE',
            old_values=old_values,
            new_values=sqlalchemy_to_dict(db_vendor),
        ))
        db.commit()
        logger.warning(f"Vendor '{db_vendor.name}' (ID: {vendor_id}) set to INACTIVE due to ledger history by {user_id}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Vendor '{db_vendor.name}' has ledger history. Status changed to Inactive.",
        )

    try:
        old_values = sqlalchemy_to_dict(db_vendor)
        db.delete(db_vendor)
        db.flush()
        create_audit_log(db, AuditLogCreate(
            table_name='vendors',
            record_id=vendor_id,
            changed_by=user_id,
            action='DELETE',
            old_values=old_values,
        ))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise to_http_exception(e, f"delete vendor {vendor_id}")
    logger.info(f"Vendor (ID: {vendor_id}) and its rates deleted by {user_id}")
