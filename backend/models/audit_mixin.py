from sqlalchemy import Column, DateTime, String
from datetime import datetime
import pytz


def now_ist():
    return datetime.now(pytz.timezone('Asia/Kolkata'))


def today_ist():
    return now_ist().date()


class TimestampMixin:
    """Created/updated timestamps plus the user that made the change.

    Timestamps are timezone-aware and recorded in Asia/Kolkata.
    """
    created_at = Column(DateTime(timezone=True), default=now_ist)
    updated_at = Column(DateTime(timezone=True), onupdate=now_ist)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)


class SoftDeleteMixin:
    """Soft-delete columns for ledger rows that must never disappear.

    Purchases and payments feed balance history, so they are stamped rather
    than removed. Rows with deleted_at set are hidden by the session filter in
    database.py and excluded from every balance aggregate.
    """
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(String, nullable=True)


class AuditMixin(TimestampMixin, SoftDeleteMixin):
    pass
