from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import now_ist


class VendorDailyBalance(Base):
    """Materialised kabadiwala balance for one vendor on one day.

    current_balance == previous_balance + purchase_amount - paid_amount; a
    positive balance is money the business owes the vendor. Rows are derived
    data, rewritten by crud.daily_balances and never deleted.
    """
    __tablename__ = "vendor_daily_balances"
    __table_args__ = (
        UniqueConstraint('company_id', 'godown_id', 'vendor_id', 'balance_date', name='_scope_vendor_date_uc'),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(String, nullable=False)
    godown_id = Column(String, nullable=False)
    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False, index=True)
    balance_date = Column(Date, nullable=False)
    previous_balance = Column(Numeric(12, 2), nullable=False, default=0)
    purchase_amount = Column(Numeric(12, 2), nullable=False, default=0)
    paid_amount = Column(Numeric(12, 2), nullable=False, default=0)
    current_balance = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=now_ist)
    updated_at = Column(DateTime(timezone=True), default=now_ist, onupdate=now_ist)

    vendor = relationship("Vendor")
