"""
Catalog Repository - Data Access Layer for vendors and items

Holds the two primitives order placement is built on (fresh item lookup and
stock decrement) plus the vendor-facing writes and the catalog read queries.
"""
from typing import List, Optional

from sqlalchemy import and_, func, select, update
from sqlalchemy.orm import Session

from garment_exchange import models
from garment_exchange.core.database import is_storable_id
from garment_exchange.core.exceptions import NotFoundError
from garment_exchange.domain.catalog import (
    Item, ItemCreate, ItemUpdate, Vendor, VendorCreate, VendorStockSummary
)


# available AND quantity > 0
SELLABLE = and_(models.Item.available.is_(True), models.Item.quantity > 0)


class CatalogRepository:
    """
    Repository for Vendor and Item data access

    All catalog SQL is centralised here. Must be used inside a session owned
    by the caller; nothing here commits.
    """

    def __init__(self, session: Session):
        self.session = session

    # ------------------------------------------------------------------
    # Stock primitives
    # ------------------------------------------------------------------

    def get_item(self, item_id: int, for_update: bool = False) -> Optional[Item]:
        """
        Read an item straight from the database

        The row is always re-read (populate_existing), so the result reflects
        every write made earlier in the same transaction.

        Args:
            item_id: Item ID
            for_update: Lock the row until the transaction ends (PostgreSQL)

        Returns:
            Item or None if not found
        """
        if not is_storable_id(item_id):
            return None

        stmt = (
            select(models.Item)
            .where(models.Item.id == item_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()

        row = self.session.execute(stmt).scalar_one_or_none()
        if row is None:
            return None
        return Item.model_validate(row)

    def decrement_stock(self, item_id: int, qty: int) -> None:
        """
        Reduce an item's quantity by qty

        Performs no validation; the caller checks stock inside the same
        transaction before calling.
        """
        self.session.execute(
            update(models.Item)
            .where(models.Item.id == item_id)
            .values(quantity=models.Item.quantity - qty)
        )

    # ------------------------------------------------------------------
    # Vendor-facing writes
    # ------------------------------------------------------------------

    def create_vendor(self, data: VendorCreate) -> Vendor:
        vendor = models.Vendor(name=data.name, contact=data.contact)
        self.session.add(vendor)
        self.session.flush()
        self.session.refresh(vendor)
        return Vendor.model_validate(vendor)

    def _vendor_row(self, vendor_id: int) -> Optional[models.Vendor]:
        if not is_storable_id(vendor_id):
            return None
        return self.session.get(models.Vendor, vendor_id)

    def get_vendor(self, vendor_id: int) -> Optional[Vendor]:
        vendor = self._vendor_row(vendor_id)
        return Vendor.model_validate(vendor) if vendor else None

    def delete_vendor(self, vendor_id: int) -> bool:
        """Delete a vendor and, through the cascade, all of its items"""
        vendor = self._vendor_row(vendor_id)
        if vendor is None:
            return False
        self.session.delete(vendor)
        self.session.flush()
        return True

    def add_item(self, vendor_id: int, data: ItemCreate) -> Item:
        """
        Add an item to a vendor's catalog

        Raises:
            NotFoundError: If the vendor does not exist
        """
        if self._vendor_row(vendor_id) is None:
            raise NotFoundError(f"Vendor not found: {vendor_id}")

        item = models.Item(vendor_id=vendor_id, **data.model_dump())
        self.session.add(item)
        self.session.flush()
        self.session.refresh(item)
        return Item.model_validate(item)

    def update_item(self, item_id: int, data: ItemUpdate) -> Item:
        """
        Apply the fields set on data to an item

        Raises:
            NotFoundError: If the item does not exist
        """
        item = self.session.get(models.Item, item_id) if is_storable_id(item_id) else None
        if item is None:
            raise NotFoundError(f"Item not found: {item_id}", item_id=item_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(item, field, value)

        self.session.flush()
        self.session.refresh(item)
        return Item.model_validate(item)

    # ------------------------------------------------------------------
    # Read queries
    # ------------------------------------------------------------------

    def find_vendor_summaries(self) -> List[VendorStockSummary]:
        """Every vendor with its count and total quantity of sellable items"""
        stmt = (
            select(
                models.Vendor.id,
                models.Vendor.name,
                models.Vendor.contact,
                func.count(models.Item.id).filter(SELLABLE).label('ready_item_count'),
                func.coalesce(func.sum(models.Item.quantity).filter(SELLABLE), 0).label('total_quantity'),
            )
            .outerjoin(models.Item, models.Item.vendor_id == models.Vendor.id)
            .group_by(models.Vendor.id, models.Vendor.name, models.Vendor.contact)
            .order_by(models.Vendor.name, models.Vendor.id)
        )
        rows = self.session.execute(stmt).mappings().all()
        return [VendorStockSummary(**row) for row in rows]

    def find_vendor_items(self, vendor_id: int, include_unavailable: bool = False) -> List[Item]:
        """
        Items of one vendor, newest first

        Args:
            vendor_id: Vendor ID
            include_unavailable: Also return items that are not sellable
        """
        if not is_storable_id(vendor_id):
            return []

        stmt = select(models.Item).where(models.Item.vendor_id == vendor_id)
        if not include_unavailable:
            stmt = stmt.where(SELLABLE)
        stmt = stmt.order_by(models.Item.id.desc())

        return [Item.model_validate(row) for row in self.session.execute(stmt).scalars()]

    def find_sellable_items(self, vendor_id: Optional[int] = None) -> List[Item]:
        """Sellable items across vendors, with vendor name, grouped by vendor"""
        if vendor_id is not None and not is_storable_id(vendor_id):
            return []

        stmt = (
            select(models.Item, models.Vendor.name)
            .join(models.Vendor, models.Vendor.id == models.Item.vendor_id)
            .where(SELLABLE)
        )
        if vendor_id is not None:
            stmt = stmt.where(models.Vendor.id == vendor_id)
        stmt = stmt.order_by(models.Vendor.name, models.Item.id)

        return [
            Item.model_validate(item).model_copy(update={'vendor_name': vendor_name})
            for item, vendor_name in self.session.execute(stmt).all()
        ]
