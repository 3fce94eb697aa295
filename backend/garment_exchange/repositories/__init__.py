"""
Repository Layer - Data Access

Repositories run their queries inside the session they are given and return
domain models. They never commit: transaction boundaries belong to the
services that own the unit of work.
"""
from garment_exchange.repositories.catalog_repository import CatalogRepository
from garment_exchange.repositories.order_repository import OrderRepository

__all__ = [
    'CatalogRepository',
    'OrderRepository',
]
