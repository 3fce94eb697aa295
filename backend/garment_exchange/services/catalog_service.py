"""
Catalog Service

Vendor-facing writes: vendor registration, adding and updating items.
Each call is its own unit of work; none of them touches orders.
"""
import logging

from sqlalchemy.orm import sessionmaker

from garment_exchange.core.database import unit_of_work
from garment_exchange.domain.catalog import Item, ItemCreate, ItemUpdate, Vendor, VendorCreate
from garment_exchange.repositories import CatalogRepository

logger = logging.getLogger(__name__)


class CatalogService:
    """Service for vendor and item maintenance"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def register_vendor(self, data: VendorCreate) -> Vendor:
        with unit_of_work(self.session_factory) as session:
            vendor = CatalogRepository(session).create_vendor(data)
        logger.info(f"Vendor {vendor.id} registered: {vendor.name}")
        return vendor

    def add_item(self, vendor_id: int, data: ItemCreate) -> Item:
        """
        Add an item to a vendor

        Raises:
            NotFoundError: If the vendor does not exist
        """
        with unit_of_work(self.session_factory) as session:
            item = CatalogRepository(session).add_item(vendor_id, data)
        logger.info(f"Item {item.id} added for vendor {vendor_id}: {item.name} x{item.quantity}")
        return item

    def update_item(self, item_id: int, data: ItemUpdate) -> Item:
        """
        Update the fields set on data

        Raises:
            NotFoundError: If the item does not exist
        """
        with unit_of_work(self.session_factory) as session:
            item = CatalogRepository(session).update_item(item_id, data)
        logger.info(f"Item {item_id} updated: {sorted(data.model_dump(exclude_unset=True))}")
        return item

    def delete_vendor(self, vendor_id: int) -> bool:
        """Remove a vendor together with its items; False if it did not exist"""
        with unit_of_work(self.session_factory) as session:
            deleted = CatalogRepository(session).delete_vendor(vendor_id)
        if deleted:
            logger.info(f"Vendor {vendor_id} deleted with its items")
        return deleted
