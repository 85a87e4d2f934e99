"""Repository layer for Product Service"""

from .product_repository import SORTABLE_COLUMNS, ProductRepository

__all__ = ["ProductRepository", "SORTABLE_COLUMNS"]
