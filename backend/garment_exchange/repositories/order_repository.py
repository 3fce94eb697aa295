"""
Order Repository - Data Access Layer for the order ledger

Orders and their lines are append-only: there is no update or delete path.
"""
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from garment_exchange import models
from garment_exchange.core.database import is_storable_id
from garment_exchange.domain.order import Order, OrderItem


class OrderRepository:
    """
    Repository for Order data access

    Must be used inside a session owned by the caller; nothing here commits.
    """

    def __init__(self, session: Session):
        self.session = session

    def create_order(self, retailer_name: str) -> int:
        """Insert a new order and return its ID"""
        order = models.Order(retailer_name=retailer_name)
        self.session.add(order)
        self.session.flush()
        return order.id

    def append_line(self, order_id: int, item_id: int, qty: int, price_at_purchase: Decimal) -> int:
        """Insert one order line tied to order_id and return its ID"""
        line = models.OrderItem(
            order_id=order_id,
            item_id=item_id,
            qty=qty,
            price_at_purchase=price_at_purchase,
        )
        self.session.add(line)
        self.session.flush()
        return line.id

    def find_by_id(self, order_id: int) -> Optional[Order]:
        """
        Find order by ID with its lines

        Returns:
            Order or None if not found
        """
        if not is_storable_id(order_id):
            return None

        order = self.session.get(models.Order, order_id)
        if order is None:
            return None

        lines = self._find_lines([order_id])
        return Order(
            id=order.id,
            retailer_name=order.retailer_name,
            created_at=order.created_at,
            items=lines.get(order.id, []),
        )

    def find_all(
        self,
        retailer_name: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> Tuple[List[Order], int]:
        """
        Order history, newest first

        Args:
            retailer_name: Only orders placed by this retailer
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of orders, total count)
        """
        count_stmt = select(func.count(models.Order.id))
        stmt = select(models.Order)
        if retailer_name:
            count_stmt = count_stmt.where(models.Order.retailer_name == retailer_name)
            stmt = stmt.where(models.Order.retailer_name == retailer_name)

        total = self.session.execute(count_stmt).scalar_one()

        stmt = (
            stmt.order_by(models.Order.created_at.desc(), models.Order.id.desc())
            .limit(limit)
            .offset(offset)
        )
        order_rows = self.session.execute(stmt).scalars().all()
        if not order_rows:
            return [], total

        # All lines for the page in one query
        lines = self._find_lines([order.id for order in order_rows])

        orders = [
            Order(
                id=order.id,
                retailer_name=order.retailer_name,
                created_at=order.created_at,
                items=lines.get(order.id, []),
            )
            for order in order_rows
        ]
        return orders, total

    def _find_lines(self, order_ids: List[int]) -> Dict[int, List[OrderItem]]:
        stmt = (
            select(models.OrderItem)
            .where(models.OrderItem.order_id.in_(order_ids))
            .order_by(models.OrderItem.order_id, models.OrderItem.id)
        )
        lines: Dict[int, List[OrderItem]] = defaultdict(list)
        for row in self.session.execute(stmt).scalars():
            lines[row.order_id].append(OrderItem.model_validate(row))
        return lines
