"""
Order service event schemas.
Provides data structures that travel inside the BaseEvent envelope.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Event type constants
ORDER_CREATED = "ORDER_CREATED"


class OrderEventData(BaseModel):
    """Base order event data structure"""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for BaseEvent compatibility"""
        return self.model_dump(mode="json", by_alias=True)


class OrderSnapshot(OrderEventData):
    """Full order as it was persisted"""

    id: int
    product_id: int
    product_name: str
    unit_price: Decimal
    quantity: int
    total_price: Decimal
    customer_id: int
    created_at: datetime
