"""
Order Service Models

This module contains all database models for the Order Service.
All models inherit from OrderServiceBaseModel which provides common fields.
"""

from .base import OrderServiceBase, OrderServiceBaseModel
from .order import Order

__all__ = [
    # Base classes
    "OrderServiceBase",
    "OrderServiceBaseModel",
    # Order models
    "Order",
]
