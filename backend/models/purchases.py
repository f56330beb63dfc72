from sqlalchemy import Column, Integer, String, Text, Numeric, Date, ForeignKey, Enum, Index
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import AuditMixin


class PaymentStatus(enum.Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class ScrapPurchase(Base, AuditMixin):
    __tablename__ = "scrap_purchases"
    __table_args__ = (
        Index('ix_scrap_purchases_scope_vendor_date', 'company_id', 'godown_id', 'vendor_id', 'purchase_date'),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(String, nullable=False)
    godown_id = Column(String, nullable=False)
    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False)
    purchase_date = Column(Date, nullable=False)
    # Sum of line amounts, rewritten whenever lines are added
    total_amount = Column(Numeric(12, 2), default=0, server_default='0', nullable=False)
    payment_status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)
    notes = Column(Text, nullable=True)

    # Relationships
    vendor = relationship("Vendor", back_populates="purchases")
    items = relationship("PurchaseLineItem", back_populates="purchase", cascade="all, delete-orphan", order_by="PurchaseLineItem.id")
    # Live payments only; writes go through VendorPayment.purchase
    payments = relationship(
        "VendorPayment",
        primaryjoin="and_(ScrapPurchase.id == VendorPayment.purchase_id, VendorPayment.deleted_at.is_(None))",
        order_by="VendorPayment.id",
        viewonly=True,
    )
