"""
Query Service - read-only projections

Every method runs in a read-only session, so results only ever reflect
committed transactions.
"""
from typing import List, Optional, Tuple

from sqlalchemy.orm import sessionmaker

from garment_exchange.core.database import read_session
from garment_exchange.domain.catalog import Item, Vendor, VendorStockSummary
from garment_exchange.domain.order import Order
from garment_exchange.repositories import CatalogRepository, OrderRepository


class QueryService:
    """Read side used by the API"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def vendor_stock_summaries(self) -> List[VendorStockSummary]:
        with read_session(self.session_factory) as session:
            return CatalogRepository(session).find_vendor_summaries()

    def get_vendor(self, vendor_id: int) -> Optional[Vendor]:
        with read_session(self.session_factory) as session:
            return CatalogRepository(session).get_vendor(vendor_id)

    def vendor_items(self, vendor_id: int, include_unavailable: bool = False) -> List[Item]:
        with read_session(self.session_factory) as session:
            return CatalogRepository(session).find_vendor_items(vendor_id, include_unavailable)

    def sellable_items(self, vendor_id: Optional[int] = None) -> List[Item]:
        with read_session(self.session_factory) as session:
            return CatalogRepository(session).find_sellable_items(vendor_id)

    def get_item(self, item_id: int) -> Optional[Item]:
        with read_session(self.session_factory) as session:
            return CatalogRepository(session).get_item(item_id)

    def get_order(self, order_id: int) -> Optional[Order]:
        with read_session(self.session_factory) as session:
            return OrderRepository(session).find_by_id(order_id)

    def order_history(
        self,
        retailer_name: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> Tuple[List[Order], int]:
        with read_session(self.session_factory) as session:
            return OrderRepository(session).find_all(retailer_name=retailer_name, limit=limit, offset=offset)
