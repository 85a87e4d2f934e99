from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case input, serializes camelCase"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _strip_required(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{field_name} cannot be empty or whitespace only")
    return value.strip()


class ProductBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    sku: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    stock: int = Field(..., ge=0, description="Units on hand (non-negative)")
    active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _strip_required(v, "name")

    @field_validator("sku")
    @classmethod
    def validate_sku(cls, v):
        return _strip_required(v, "sku")


class ProductCreate(ProductBase):
    pass


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    sku: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0)
    active: Optional[bool] = None

    @field_validator("name", "sku")
    @classmethod
    def validate_text(cls, v, info):
        if v is None:
            return v
        return _strip_required(v, info.field_name)


class ProductResponse(ProductBase):
    id: int
    created_at: datetime
    updated_at: datetime


class StockCheckResponse(CamelModel):
    product_id: int
    has_stock: bool
    available_stock: int
    requested_quantity: int


class StockReductionResponse(CamelModel):
    product_id: int
    quantity: int
    message: str
