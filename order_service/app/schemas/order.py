from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case input, serializes camelCase"""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class OrderCreate(CamelModel):
    customer_id: int
    product_id: int
    quantity: int = Field(..., gt=0)


class OrderResponse(CamelModel):
    id: int
    product_id: int
    product_name: str
    unit_price: Decimal
    quantity: int
    total_price: Decimal
    customer_id: int
    created_at: datetime


# Views of the Product Service API, as seen by this service


class ProductSnapshot(CamelModel):
    """Product data returned by the catalog"""

    id: int
    name: str
    sku: str
    price: Decimal
    stock: int
    active: bool = True


class StockCheckResult(CamelModel):
    product_id: int
    has_stock: bool
    available_stock: int = 0
    requested_quantity: int
