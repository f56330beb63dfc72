"""
Material rates and line-item pricing.

Each material (scrap type) has a global base rate. A vendor's rate for a
material is the global rate plus a fixed per-vendor offset; when the global
rate moves, every vendor rate for that material moves with it and the offsets
stay as they were.
"""

import logging
from decimal import Decimal
from typing import List, Tuple

from sqlalchemy.orm import Session, joinedload

from crud.errors import LedgerError, MaterialInUseError, MissingRateError, ScrapTypeNotFoundError
from crud.ledger import get_vendor
from models.audit_mixin import now_ist
from models.purchase_line_items import PurchaseLineItem
from models.scrap_types import ScrapType
from models.vendor_rates import VendorRate
from utils.formatting import to_money, to_weight

logger = logging.getLogger(__name__)


def get_scrap_type(db: Session, scrap_type_id: int) -> ScrapType:
    scrap_type = db.query(ScrapType).filter(ScrapType.id == scrap_type_id).first()
    if scrap_type is None:
        raise ScrapTypeNotFoundError(scrap_type_id)
    return scrap_type


def create_scrap_type(db: Session, material_type: str, global_rate: Decimal) -> ScrapType:
    existing = db.query(ScrapType).filter(ScrapType.material_type == material_type).first()
    if existing:
        raise LedgerError(f"Material '{material_type}' already exists")
    scrap_type = ScrapType(material_type=material_type, global_rate=to_money(global_rate))
    db.add(scrap_type)
    db.flush()
    return scrap_type


def delete_scrap_type(db: Session, scrap_type_id: int) -> ScrapType:
    """Delete a material together with its vendor rates.

    Refused while purchase lines reference the material.
    """
    scrap_type = get_scrap_type(db, scrap_type_id)
    in_use = db.query(PurchaseLineItem.id).filter(PurchaseLineItem.scrap_type_id == scrap_type_id).first()
    if in_use:
        raise MaterialInUseError(scrap_type)
    db.delete(scrap_type)
    db.flush()
    return scrap_type


def update_global_rate(db: Session, scrap_type_id: int, new_global_rate: Decimal) -> Tuple[ScrapType, List[VendorRate]]:
    """Set a material's global rate and shift every vendor rate by the same amount.

    The vendor rates are rewritten by a single bulk UPDATE as
    new_global_rate + rate_offset.
    """
    scrap_type = db.query(ScrapType).filter(ScrapType.id == scrap_type_id).with_for_update().first()
    if scrap_type is None:
        raise ScrapTypeNotFoundError(scrap_type_id)

    new_global_rate = to_money(new_global_rate)
    old_global_rate = scrap_type.global_rate
    scrap_type.global_rate = new_global_rate
    scrap_type.last_updated = now_ist()

    updated = db.query(VendorRate).filter(VendorRate.scrap_type_id == scrap_type_id).update(
        {VendorRate.vendor_rate: new_global_rate + VendorRate.rate_offset},
        synchronize_session=False,
    )
    db.flush()

    affected = (
        db.query(VendorRate)
        .filter(VendorRate.scrap_type_id == scrap_type_id)
        .order_by(VendorRate.vendor_id.asc())
        .populate_existing()
        .all()
    )
    logger.info(f"Global rate for '{scrap_type.material_type}' changed {old_global_rate} -> {new_global_rate}; {updated} vendor rates updated")
    return scrap_type, affected


def set_vendor_rate(db: Session, vendor_id: int, scrap_type_id: int, vendor_rate: Decimal) -> VendorRate:
    """Insert or overwrite a vendor's rate for a material, recording its offset from the global rate."""
    get_vendor(db, vendor_id)
    scrap_type = get_scrap_type(db, scrap_type_id)

    vendor_rate = to_money(vendor_rate)
    rate_offset = to_money(vendor_rate - scrap_type.global_rate)

    db_rate = db.query(VendorRate).filter(
        VendorRate.vendor_id == vendor_id,
        VendorRate.scrap_type_id == scrap_type_id,
    ).first()
    if db_rate is None:
        db_rate = VendorRate(vendor_id=vendor_id, scrap_type_id=scrap_type_id)
        db.add(db_rate)
    db_rate.vendor_rate = vendor_rate
    db_rate.rate_offset = rate_offset
    db.flush()
    return db_rate


def price_line(db: Session, vendor_id: int, scrap_type_id: int, weight: Decimal) -> PurchaseLineItem:
    """Build an unsaved line item priced at the vendor's rate for the material.

    amount = round(weight * vendor_rate, 2), with weight rounded to grams first.

    Raises:
        MissingRateError: the vendor has no rate for this material.
    """
    db_rate = (
        db.query(VendorRate)
        .options(joinedload(VendorRate.scrap_type))
        .filter(VendorRate.vendor_id == vendor_id, VendorRate.scrap_type_id == scrap_type_id)
        .first()
    )
    if db_rate is None:
        raise MissingRateError(vendor_id, scrap_type_id)

    weight = to_weight(weight)
    rate = to_money(db_rate.vendor_rate)
    return PurchaseLineItem(
        scrap_type_id=scrap_type_id,
        material=db_rate.scrap_type.material_type,
        weight=weight,
        rate=rate,
        amount=to_money(weight * rate),
    )
