"""
Order ledger tables
"""
from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from garment_exchange.core.database import Base


class Order(Base):
    """
    Retailer orders. Written once by order placement, never updated.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    # Free text, there is no retailer entity
    retailer_name = Column(String(255), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.id")


class OrderItem(Base):
    """
    Order lines. item_id is a plain reference without a foreign key so that
    removing or repricing an item never rewrites order history.
    """
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("qty > 0", name="ck_order_items_qty_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), index=True, nullable=False)
    item_id = Column(Integer, index=True, nullable=False)

    qty = Column(Integer, nullable=False)
    # Captured at order time, never recomputed from items.price
    price_at_purchase = Column(Numeric(12, 2), nullable=False)

    order = relationship("Order", back_populates="items")
