"""
Catalog Domain Models

Vendors and the garments they stock.
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal


class Vendor(BaseModel):
    """Vendor domain model"""

    id: int = Field(..., description="Vendor ID")
    name: str = Field(..., description="Display name")
    contact: str = Field("", description="Contact string (email, phone...)")
    created_at: Optional[datetime] = Field(None, description="Registration timestamp")

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        data = self.model_dump()
        if data.get('created_at'):
            data['created_at'] = data['created_at'].isoformat()
        return data


class VendorCreate(BaseModel):
    """Schema for registering a vendor"""
    name: str = Field(..., min_length=1)
    contact: str = ""

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('name required')
        return v.strip()


class VendorStockSummary(BaseModel):
    """
    Per-vendor stock projection

    Fields:
        ready_item_count: Number of sellable items (available and quantity > 0)
        total_quantity: Units across sellable items
    """

    id: int
    name: str
    contact: str = ""
    ready_item_count: int = Field(0, ge=0)
    total_quantity: int = Field(0, ge=0)

    model_config = ConfigDict(from_attributes=True)


class Item(BaseModel):
    """
    Item domain model - a garment stocked by exactly one vendor

    Fields:
        id: Item ID
        vendor_id: Owning vendor
        name, size, color: Garment description
        price: Current unit price
        quantity: Units on hand, never negative
        available: Vendor-controlled sell switch
        vendor_name: Owning vendor name (from JOIN, optional)
    """

    id: int = Field(..., description="Item ID")
    vendor_id: int = Field(..., description="Owning vendor ID")
    name: str = Field(..., description="Garment name")
    size: str = Field("", description="Size label")
    color: str = Field("", description="Color")
    price: Decimal = Field(..., description="Unit price", ge=0)
    quantity: int = Field(0, description="Units on hand", ge=0)
    available: bool = Field(True, description="Vendor allows selling this item")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    vendor_name: Optional[str] = Field(None, description="Vendor name (from JOIN)")

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_sellable(self) -> bool:
        """Sellable only when available AND in stock"""
        return self.available and self.quantity > 0

    def can_fulfil(self, qty: int) -> bool:
        """Check whether qty units can be sold right now"""
        return self.available and self.quantity >= qty

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()
        data['price'] = float(data['price'])
        data['is_sellable'] = self.is_sellable
        if data.get('created_at'):
            data['created_at'] = data['created_at'].isoformat()
        return data


class ItemCreate(BaseModel):
    """Schema for adding an item to a vendor's catalog"""
    name: str = Field(..., min_length=1)
    size: str = ""
    color: str = ""
    price: Decimal = Field(..., ge=0)
    quantity: int = Field(0, ge=0)
    available: bool = True


class ItemUpdate(BaseModel):
    """Schema for updating an item; only fields that are set get applied"""
    name: Optional[str] = Field(None, min_length=1)
    size: Optional[str] = None
    color: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    quantity: Optional[int] = Field(None, ge=0)
    available: Optional[bool] = None
