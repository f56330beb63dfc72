#!/usr/bin/env python3
"""
Recompute every purchase total from its line items, then rebuild every
kabadiwala daily balance snapshot from the purchase and payment rows.

Run after manual data fixes: python scripts/rebuild_daily_balances.py
"""

import sys
import os
import logging
from dotenv import load_dotenv

load_dotenv()

# Add the parent directory to sys.path to allow imports from backend
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload
from database import SessionLocal
from crud import daily_balances
from crud.payments import refresh_payment_status
from models.daily_balances import VendorDailyBalance
from models.purchases import ScrapPurchase
from models.vendor_payments import VendorPayment
from models.vendors import Vendor, VendorCategory
from utils.formatting import to_money
from utils.scope import Scope

logger = logging.getLogger("rebuild_daily_balances")


def fix_purchase_totals(db: Session) -> int:
    """Rewrite total_amount and payment_status of every live purchase. Returns how many changed."""
    changed = 0
    for purchase in db.query(ScrapPurchase).options(selectinload(ScrapPurchase.items)).all():
        total = to_money(sum(to_money(item.amount) for item in purchase.items))
        if to_money(purchase.total_amount) != total:
            logger.info(f"Purchase ID {purchase.id}: total_amount {purchase.total_amount} -> {total}")
            purchase.total_amount = total
            changed += 1
        db.flush()
        refresh_payment_status(db, purchase)
    db.flush()
    return changed


def _activity_keys(db: Session):
    """Distinct (company, godown, vendor, date) keys with kabadiwala activity or a stored snapshot."""
    kabadiwala_ids = select(Vendor.id).where(Vendor.category == VendorCategory.KABADIWALA)
    sources = [
        # Soft-deleted rows still mark a date whose snapshot must be corrected
        db.query(
            ScrapPurchase.company_id, ScrapPurchase.godown_id, ScrapPurchase.vendor_id, ScrapPurchase.purchase_date,
        ).filter(ScrapPurchase.vendor_id.in_(kabadiwala_ids)).execution_options(include_deleted=True),
        db.query(
            VendorPayment.company_id, VendorPayment.godown_id, VendorPayment.vendor_id, VendorPayment.payment_date,
        ).filter(VendorPayment.vendor_id.in_(kabadiwala_ids)).execution_options(include_deleted=True),
        db.query(
            VendorDailyBalance.company_id, VendorDailyBalance.godown_id, VendorDailyBalance.vendor_id, VendorDailyBalance.balance_date,
        ),
    ]
    keys = set()
    for query in sources:
        keys.update(tuple(row) for row in query.distinct().all())
    return sorted(keys)


def rebuild_daily_balances(db: Session) -> int:
    """Recompute purchase totals and every kabadiwala snapshot. Returns the number of snapshots written."""
    changed = fix_purchase_totals(db)
    if changed:
        logger.info(f"Corrected {changed} purchase totals")

    written = 0
    for company_id, godown_id, vendor_id, on_date in _activity_keys(db):
        scope = Scope(company_id=company_id, godown_id=godown_id)
        daily_balances.recompute_and_store(db, scope, vendor_id, on_date)
        written += 1
    logger.info(f"Rebuilt {written} kabadiwala daily balance snapshots")
    return written


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    db = SessionLocal()
    try:
        rebuild_daily_balances(db)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Rebuild failed; nothing was written")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
