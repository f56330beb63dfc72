from sqlalchemy import Column, Integer, Numeric, Date, String, ForeignKey, Text, Index
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import AuditMixin


class VendorPayment(Base, AuditMixin):
    __tablename__ = "vendor_payments"
    __table_args__ = (
        Index('ix_vendor_payments_scope_vendor_date', 'company_id', 'godown_id', 'vendor_id', 'payment_date'),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(String, nullable=False)
    godown_id = Column(String, nullable=False)
    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False)
    # Standalone payments are not tied to any purchase
    purchase_id = Column(Integer, ForeignKey("scrap_purchases.id"), nullable=True)
    payment_date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_mode = Column(String, nullable=False, default="cash")  # "cash", "bank", "other"
    notes = Column(Text, nullable=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)

    # Relationships
    vendor = relationship("Vendor", back_populates="payments")
    purchase = relationship("ScrapPurchase")
    account = relationship("Account")
