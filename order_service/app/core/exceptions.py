"""
Order Service domain exceptions.

Each exception carries the HTTP status and error type used by the
centralized error handler.
"""

from typing import Any, Dict, Optional


class OrderServiceError(Exception):
    """Base class for Order Service errors"""

    status_code: int = 500
    error_type: str = "order_service_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details or {}


class OrderNotFoundError(OrderServiceError):
    status_code = 404
    error_type = "not_found"

    def __init__(self, order_id: int):
        super().__init__(
            f"Order with ID {order_id} not found", details={"orderId": order_id}
        )


class ProductNotFoundError(OrderServiceError):
    """The catalog has no product with this ID"""

    status_code = 404
    error_type = "not_found"

    def __init__(self, product_id: int):
        super().__init__(
            f"Product with ID {product_id} not found",
            details={"productId": product_id},
        )
        self.product_id = product_id


class ProductUnavailableError(OrderServiceError):
    """Product is unknown to the catalog or no longer active"""

    status_code = 404
    error_type = "product_unavailable"

    def __init__(self, product_id: int, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"Product with ID {product_id} is not available",
            details={"productId": product_id, **(details or {})},
        )
        self.product_id = product_id


class InsufficientStockError(OrderServiceError):
    status_code = 400
    error_type = "insufficient_stock"

    def __init__(self, product_id: int, requested_quantity: int):
        super().__init__(
            f"Insufficient stock for product {product_id}",
            details={
                "productId": product_id,
                "requestedQuantity": requested_quantity,
            },
        )
        self.product_id = product_id
        self.requested_quantity = requested_quantity


class StockReservationConflictError(OrderServiceError):
    """Stock ran out between the availability check and the decrement"""

    status_code = 409
    error_type = "concurrency_conflict"

    def __init__(self, product_id: int, order_id: int, quantity: int):
        super().__init__(
            f"Stock for product {product_id} changed while placing order {order_id}",
            details={
                "productId": product_id,
                "orderId": order_id,
                "requestedQuantity": quantity,
            },
        )


class CatalogUnavailableError(OrderServiceError):
    status_code = 503
    error_type = "catalog_unavailable"

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"Product service unavailable: {reason}", details=details or {}
        )


class MessagingError(OrderServiceError):
    status_code = 500
    error_type = "messaging_error"


class InvalidSortFieldError(OrderServiceError):
    status_code = 400
    error_type = "invalid_sort_field"

    def __init__(self, sort_by: str, allowed: list[str]):
        super().__init__(
            f"Cannot sort by '{sort_by}'",
            details={"sortBy": sort_by, "allowed": allowed},
        )
