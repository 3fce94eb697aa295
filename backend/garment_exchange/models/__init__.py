"""
Database models (SQLAlchemy ORM)
"""
from .vendor import Vendor, Item
from .order import Order, OrderItem

__all__ = [
    "Vendor",
    "Item",
    "Order",
    "OrderItem",
]
