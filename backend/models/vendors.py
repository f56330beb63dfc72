from sqlalchemy import Column, Integer, String, Enum
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin


class VendorCategory(enum.Enum):
    KABADIWALA = "kabadiwala"
    FERIWALA = "feriwala"


class VendorStatus(enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class Vendor(Base, TimestampMixin):
    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    category = Column(Enum(VendorCategory), nullable=False, index=True)
    status = Column(Enum(VendorStatus), default=VendorStatus.ACTIVE, nullable=False)

    # Relationships
    rates = relationship("VendorRate", back_populates="vendor", cascade="all, delete-orphan")
    purchases = relationship("ScrapPurchase", back_populates="vendor")
    payments = relationship("VendorPayment", back_populates="vendor")
