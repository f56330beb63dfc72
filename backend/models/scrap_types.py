from sqlalchemy import Column, Integer, String, Numeric, DateTime
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import now_ist


class ScrapType(Base):
    __tablename__ = "scrap_types"

    id = Column(Integer, primary_key=True, index=True)
    material_type = Column(String, unique=True, nullable=False)
    global_rate = Column(Numeric(12, 2), nullable=False)
    last_updated = Column(DateTime(timezone=True), default=now_ist, onupdate=now_ist)

    # Relationships
    vendor_rates = relationship("VendorRate", back_populates="scrap_type", cascade="all, delete-orphan")
