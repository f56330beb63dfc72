from sqlalchemy import Column, Integer, String, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from database import Base


class PurchaseLineItem(Base):
    __tablename__ = "purchase_line_items"

    id = Column(Integer, primary_key=True, index=True)
    purchase_id = Column(Integer, ForeignKey("scrap_purchases.id"), nullable=False, index=True)
    scrap_type_id = Column(Integer, ForeignKey("scrap_types.id"), nullable=False)
    material = Column(String, nullable=False)  # material tag at the time of purchase
    weight = Column(Numeric(12, 3), nullable=False)  # kg
    rate = Column(Numeric(12, 2), nullable=False)  # vendor rate per kg
    amount = Column(Numeric(12, 2), nullable=False)  # round(weight * rate, 2)

    # Relationships
    purchase = relationship("ScrapPurchase", back_populates="items")
