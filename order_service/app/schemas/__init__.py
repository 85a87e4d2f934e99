"""
Order schemas package
"""

from .order import (
    CamelModel,
    OrderCreate,
    OrderResponse,
    ProductSnapshot,
    StockCheckResult,
)

__all__ = [
    "CamelModel",
    "OrderCreate",
    "OrderResponse",
    "ProductSnapshot",
    "StockCheckResult",
]
