"""
Service Layer - transaction boundaries and business rules
"""
from garment_exchange.services.order_placement_service import OrderPlacementService
from garment_exchange.services.catalog_service import CatalogService
from garment_exchange.services.query_service import QueryService

__all__ = ['OrderPlacementService', 'CatalogService', 'QueryService']
