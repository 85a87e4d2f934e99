from .order_repository import SORTABLE_COLUMNS, OrderRepository

__all__ = ["OrderRepository", "SORTABLE_COLUMNS"]
