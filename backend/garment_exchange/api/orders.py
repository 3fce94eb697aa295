"""
Orders API Endpoints
Order placement and order history
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import sessionmaker

from garment_exchange.core.database import MAX_ROW_ID, get_read_session_factory, get_session_factory
from garment_exchange.domain.order import PlaceOrderRequest
from garment_exchange.services import OrderPlacementService, QueryService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
def place_order(request: PlaceOrderRequest, factory: sessionmaker = Depends(get_session_factory)):
    """
    Place an order (body: retailer_name, items: [{item_id, qty}])

    All lines are applied or none is. Failures are reported with their kind
    and the offending item id; the caller decides whether to resubmit.
    """
    order_id = OrderPlacementService(factory).place_order(request.retailer_name, request.items)
    return {"status": "success", "order_id": order_id}


@router.get("")
def get_orders(
    retailer: Optional[str] = Query(None, description="Filter by retailer name"),
    limit: int = Query(50, ge=1, le=1000),
    offset: int = Query(0, ge=0, le=MAX_ROW_ID),
    read_factory: sessionmaker = Depends(get_read_session_factory)
):
    """
    Get order history, newest first, each order with its captured lines
    """
    try:
        orders, total = QueryService(read_factory).order_history(
            retailer_name=retailer,
            limit=limit,
            offset=offset
        )
        return {
            "status": "success",
            "total": total,
            "limit": limit,
            "offset": offset,
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }
    except Exception as e:
        logger.error(f"Error fetching orders: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.get("/{order_id}")
def get_order(order_id: int, read_factory: sessionmaker = Depends(get_read_session_factory)):
    """Get one order with its lines"""
    order = QueryService(read_factory).get_order(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    return {"status": "success", "data": order.to_dict()}
