"""
Order Placement Service

Turns a retailer's multi-line request into one Order plus one priced
OrderItem per line, decrementing stock as it goes, all inside a single
serializable unit of work. Either every line is applied or none is.

Duplicate item lines are not merged: lines run in the order given and each
one re-reads the item, so a later line sees the stock left by an earlier
line of the same request.
"""
import logging
from collections.abc import Mapping
from typing import List, Sequence, Tuple, Union

from pydantic import ValidationError
from sqlalchemy.orm import sessionmaker

from garment_exchange.core.database import unit_of_work
from garment_exchange.core.exceptions import (
    InsufficientStockError,
    InvalidRequestError,
    NotFoundError,
    OrderPlacementError,
)
from garment_exchange.domain.order import OrderLine
from garment_exchange.repositories import CatalogRepository, OrderRepository

logger = logging.getLogger(__name__)

LineInput = Union[OrderLine, Tuple[int, int], Mapping]


class OrderPlacementService:
    """
    Service for placing retailer orders against live inventory

    The session factory is passed in by the caller and used for exactly one
    unit of work per placement; the service holds no other state.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def place_order(self, retailer_name: str, lines: Sequence[LineInput]) -> int:
        """
        Place an order atomically

        Args:
            retailer_name: Free-text retailer name
            lines: (item_id, qty) pairs, OrderLine models or {item_id, qty} dicts

        Returns:
            ID of the new order

        Raises:
            InvalidRequestError: Bad input, rejected before any transaction
            NotFoundError: A referenced item does not exist
            InsufficientStockError: Not enough stock, or item unavailable
            ConflictAbortedError: Lost a race with a concurrent placement
        """
        retailer_name, order_lines = self._validate_request(retailer_name, lines)

        try:
            with unit_of_work(self.session_factory) as session:
                catalog = CatalogRepository(session)
                ledger = OrderRepository(session)

                order_id = ledger.create_order(retailer_name)
                for line in order_lines:
                    self._apply_line(catalog, ledger, order_id, line)

        except OrderPlacementError as e:
            logger.warning(f"Order for '{retailer_name}' rejected ({e.kind}): {e.message}")
            raise

        logger.info(f"Order {order_id} placed for '{retailer_name}' ({len(order_lines)} lines)")
        return order_id

    @staticmethod
    def _validate_request(retailer_name, lines) -> Tuple[str, List[OrderLine]]:
        if not isinstance(retailer_name, str) or not retailer_name.strip():
            raise InvalidRequestError("retailer_name required")

        if not lines or isinstance(lines, (str, bytes, Mapping)):
            raise InvalidRequestError("items required")

        order_lines = []
        for position, line in enumerate(lines, start=1):
            try:
                if isinstance(line, OrderLine):
                    order_line = line
                elif isinstance(line, Mapping):
                    order_line = OrderLine.model_validate(line)
                else:
                    item_id, qty = line
                    order_line = OrderLine(item_id=item_id, qty=qty)
            except (ValidationError, TypeError, ValueError) as e:
                raise InvalidRequestError(f"Line {position} must be an (item_id, qty) pair of integers") from e

            if order_line.qty <= 0:
                raise InvalidRequestError(
                    f"Line {position}: quantity must be positive, got {order_line.qty}",
                    item_id=order_line.item_id,
                )
            order_lines.append(order_line)

        return retailer_name.strip(), order_lines

    @staticmethod
    def _apply_line(catalog: CatalogRepository, ledger: OrderRepository, order_id: int, line: OrderLine) -> None:
        item = catalog.get_item(line.item_id, for_update=True)
        if item is None:
            raise NotFoundError(f"Item not found: {line.item_id}", item_id=line.item_id)

        if not item.can_fulfil(line.qty):
            available = item.quantity if item.available else 0
            raise InsufficientStockError(
                f"Insufficient stock for item {item.name} (id {item.id}): "
                f"requested {line.qty}, available {available}",
                item_id=item.id,
                requested=line.qty,
                available=available,
            )

        ledger.append_line(order_id, item.id, line.qty, item.price)
        catalog.decrement_stock(item.id, line.qty)
