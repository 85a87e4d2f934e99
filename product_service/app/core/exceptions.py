"""
Product Service domain exceptions.

Each exception carries the HTTP status and error type used by the
centralized error handler.
"""

from typing import Any, Dict, Optional


class ProductServiceError(Exception):
    """Base class for Product Service errors"""

    status_code: int = 500
    error_type: str = "product_service_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details or {}


class ProductNotFoundError(ProductServiceError):
    status_code = 404
    error_type = "not_found"

    def __init__(self, product_id: int):
        super().__init__(
            f"Product with ID {product_id} not found",
            details={"productId": product_id},
        )
        self.product_id = product_id


class DuplicateSkuError(ProductServiceError):
    status_code = 409
    error_type = "duplicate_value"

    def __init__(self, sku: str):
        super().__init__(
            f"Product with SKU '{sku}' already exists", details={"sku": sku}
        )


class InsufficientStockError(ProductServiceError):
    """Raised when a stock decrement would drive stock below zero"""

    status_code = 409
    error_type = "insufficient_stock"

    def __init__(self, product_id: int, requested_quantity: int):
        super().__init__(
            "Insufficient stock",
            details={
                "productId": product_id,
                "requestedQuantity": requested_quantity,
            },
        )


class InvalidSortFieldError(ProductServiceError):
    status_code = 400
    error_type = "invalid_sort_field"

    def __init__(self, sort_by: str, allowed: list[str]):
        super().__init__(
            f"Cannot sort by '{sort_by}'",
            details={"sortBy": sort_by, "allowed": allowed},
        )
