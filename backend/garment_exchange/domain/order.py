"""
Order Domain Models

Orders are written once by order placement and never change afterwards.
Line prices are the price at purchase time, not the item's current price.
"""
from pydantic import BaseModel, Field, ConfigDict, StrictInt
from typing import List, Optional
from datetime import datetime
from decimal import Decimal


class OrderLine(BaseModel):
    """One requested line of a placement: which item, how many"""
    item_id: StrictInt
    qty: StrictInt


class PlaceOrderRequest(BaseModel):
    """
    Body of a placement request

    Deliberately permissive: the placement service owns validation so that
    every caller gets the same invalid_request failure.
    """
    retailer_name: Optional[str] = None
    items: List[OrderLine] = Field(default_factory=list)


class OrderItem(BaseModel):
    """Order line domain model"""

    id: int = Field(..., description="Order item ID")
    order_id: int = Field(..., description="Parent order ID")
    item_id: int = Field(..., description="Referenced item ID")
    qty: int = Field(..., description="Quantity purchased", ge=1)
    price_at_purchase: Decimal = Field(..., description="Unit price captured at order time", ge=0)

    model_config = ConfigDict(from_attributes=True)

    @property
    def line_total(self) -> Decimal:
        return self.price_at_purchase * self.qty

    def to_dict(self) -> dict:
        data = self.model_dump()
        data['price_at_purchase'] = float(data['price_at_purchase'])
        data['line_total'] = float(self.line_total)
        return data


class Order(BaseModel):
    """
    Order domain model

    Fields:
        id: Order ID
        retailer_name: Free-text retailer name
        created_at: Creation timestamp
        items: Order lines
    """

    id: int = Field(..., description="Order ID")
    retailer_name: str = Field(..., description="Retailer name")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    items: List[OrderItem] = Field(default_factory=list, description="Order lines")

    model_config = ConfigDict(from_attributes=True)

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        return sum(item.qty for item in self.items)

    @property
    def total(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal('0'))

    def to_dict(self) -> dict:
        """Convert to dictionary with computed fields"""
        data = self.model_dump()
        data['item_count'] = self.item_count
        data['total_quantity'] = self.total_quantity
        data['total'] = float(self.total)
        if data.get('created_at'):
            data['created_at'] = data['created_at'].isoformat()
        data['items'] = [item.to_dict() for item in self.items]
        return data
