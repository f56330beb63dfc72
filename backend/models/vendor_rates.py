from sqlalchemy import Column, Integer, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base


class VendorRate(Base):
    """Per-vendor rate for one material: vendor_rate = global_rate + rate_offset."""
    __tablename__ = "vendor_rates"
    __table_args__ = (UniqueConstraint('vendor_id', 'scrap_type_id', name='_vendor_scrap_type_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    vendor_id = Column(Integer, ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False, index=True)
    scrap_type_id = Column(Integer, ForeignKey("scrap_types.id", ondelete="CASCADE"), nullable=False, index=True)
    vendor_rate = Column(Numeric(12, 2), nullable=False)
    rate_offset = Column(Numeric(12, 2), default=0, server_default='0', nullable=False)

    # Relationships
    vendor = relationship("Vendor", back_populates="rates")
    scrap_type = relationship("ScrapType", back_populates="vendor_rates")
