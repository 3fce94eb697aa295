"""
Domain Layer - Business Entities

Pydantic models returned by repositories and services, and the request
schemas accepted by them.
"""
from garment_exchange.domain.catalog import (
    Vendor, VendorCreate, VendorStockSummary, Item, ItemCreate, ItemUpdate
)
from garment_exchange.domain.order import Order, OrderItem, OrderLine, PlaceOrderRequest

__all__ = [
    'Vendor', 'VendorCreate', 'VendorStockSummary',
    'Item', 'ItemCreate', 'ItemUpdate',
    'Order', 'OrderItem', 'OrderLine', 'PlaceOrderRequest',
]
