"""
Product schemas package
"""

from .product import (
    CamelModel,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    StockCheckResponse,
    StockReductionResponse,
)

__all__ = [
    "CamelModel",
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "StockCheckResponse",
    "StockReductionResponse",
]
