"""
Vendors API Endpoints
Vendor registration, vendor stock summaries and per-vendor item management
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import sessionmaker

from garment_exchange.core.database import get_read_session_factory, get_session_factory
from garment_exchange.core.exceptions import OrderPlacementError
from garment_exchange.domain.catalog import ItemCreate, VendorCreate
from garment_exchange.services import CatalogService, QueryService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def get_vendors(read_factory: sessionmaker = Depends(get_read_session_factory)):
    """
    Get all vendors with their count of sellable items and total in-stock quantity
    """
    try:
        summaries = QueryService(read_factory).vendor_stock_summaries()
        return {
            "status": "success",
            "count": len(summaries),
            "data": [summary.model_dump() for summary in summaries]
        }
    except Exception as e:
        logger.error(f"Error fetching vendors: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching vendors: {str(e)}")


@router.post("")
def register_vendor(vendor: VendorCreate, factory: sessionmaker = Depends(get_session_factory)):
    """Register a vendor (name required, contact optional)"""
    created = CatalogService(factory).register_vendor(vendor)
    return {"status": "success", "data": created.to_dict()}


@router.get("/{vendor_id}")
def get_vendor(vendor_id: int, read_factory: sessionmaker = Depends(get_read_session_factory)):
    """Get a single vendor"""
    vendor = QueryService(read_factory).get_vendor(vendor_id)
    if vendor is None:
        raise HTTPException(status_code=404, detail=f"Vendor {vendor_id} not found")
    return {"status": "success", "data": vendor.to_dict()}


@router.get("/{vendor_id}/items")
def get_vendor_items(
    vendor_id: int,
    include_all: bool = Query(False, alias="all", description="Include unavailable and out-of-stock items"),
    read_factory: sessionmaker = Depends(get_read_session_factory)
):
    """
    Get a vendor's items, newest first

    By default only sellable items (available and in stock) are returned.
    """
    try:
        items = QueryService(read_factory).vendor_items(vendor_id, include_unavailable=include_all)
        return {
            "status": "success",
            "count": len(items),
            "data": [item.to_dict() for item in items]
        }
    except Exception as e:
        logger.error(f"Error fetching items for vendor {vendor_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching vendor items: {str(e)}")


@router.post("/{vendor_id}/items")
def add_vendor_item(vendor_id: int, item: ItemCreate, factory: sessionmaker = Depends(get_session_factory)):
    """Vendor adds an item (name and price required)"""
    try:
        created = CatalogService(factory).add_item(vendor_id, item)
    except OrderPlacementError:
        raise
    except Exception as e:
        logger.error(f"Error adding item for vendor {vendor_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error adding item: {str(e)}")

    return {"status": "success", "data": created.to_dict()}
