"""
Order placement failures

Every failure surfaces to the caller as one of these exceptions, carrying a
machine-readable ``kind`` and, where applicable, the offending item id.
None of them is retried internally.
"""
from typing import Any, Dict, Optional


class OrderPlacementError(Exception):
    """Base class for structured failures raised by the services"""

    kind = "error"

    def __init__(self, message: str, item_id: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.item_id = item_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "error",
            "kind": self.kind,
            "message": self.message,
            "item_id": self.item_id,
        }


class InvalidRequestError(OrderPlacementError):
    """Malformed request, rejected before any transaction is opened"""

    kind = "invalid_request"


class NotFoundError(OrderPlacementError):
    """Referenced item (or vendor) does not exist"""

    kind = "not_found"


class InsufficientStockError(OrderPlacementError):
    """Requested quantity exceeds stock, or the item is marked unavailable"""

    kind = "insufficient_stock"

    def __init__(self, message: str, item_id: int, requested: int, available: int):
        super().__init__(message, item_id=item_id)
        self.requested = requested
        self.available = available

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["requested"] = self.requested
        data["available"] = self.available
        return data


class ConflictAbortedError(OrderPlacementError):
    """The database detected a serialization conflict; nothing was applied"""

    kind = "conflict_aborted"
