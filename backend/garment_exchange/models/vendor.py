"""
Catalog tables: vendors and the garments they stock
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from garment_exchange.core.database import Base


class Vendor(Base):
    """
    Garment vendors. A vendor exclusively owns its items.
    """
    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    contact = Column(Text, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Deleting a vendor removes its items
    items = relationship("Item", back_populates="vendor", cascade="all, delete-orphan", passive_deletes=True)


class Item(Base):
    """
    Stocked garments. quantity is the only contended column in the system.
    """
    __tablename__ = "items"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_items_quantity_non_negative"),
        CheckConstraint("price >= 0", name="ck_items_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    vendor_id = Column(Integer, ForeignKey("vendors.id", ondelete="CASCADE"), index=True, nullable=False)

    name = Column(String(255), nullable=False)
    size = Column(String(50), nullable=False, default="")
    color = Column(String(50), nullable=False, default="")

    price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    # Vendor-controlled "do not sell" switch, independent of quantity
    available = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    vendor = relationship("Vendor", back_populates="items")
