"""
Items API Endpoints
Retailer-facing listing of sellable items and vendor-facing item updates
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import sessionmaker

from garment_exchange.core.database import get_read_session_factory, get_session_factory
from garment_exchange.domain.catalog import ItemUpdate
from garment_exchange.services import CatalogService, QueryService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def get_sellable_items(
    vendor: Optional[int] = Query(None, description="Only items of this vendor"),
    read_factory: sessionmaker = Depends(get_read_session_factory)
):
    """
    Get all sellable items across vendors, grouped by vendor name
    """
    try:
        items = QueryService(read_factory).sellable_items(vendor_id=vendor)
        return {
            "status": "success",
            "count": len(items),
            "data": [item.to_dict() for item in items]
        }
    except Exception as e:
        logger.error(f"Error fetching items: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching items: {str(e)}")


@router.get("/{item_id}")
def get_item(item_id: int, read_factory: sessionmaker = Depends(get_read_session_factory)):
    """Get a single item"""
    item = QueryService(read_factory).get_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Item {item_id} not found")
    return {"status": "success", "data": item.to_dict()}


@router.put("/{item_id}")
def update_item(item_id: int, update: ItemUpdate, factory: sessionmaker = Depends(get_session_factory)):
    """
    Update an item

    Only the fields present in the body are changed.
    """
    updated = CatalogService(factory).update_item(item_id, update)
    return {"status": "success", "data": updated.to_dict()}
