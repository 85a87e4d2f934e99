"""
Order events as seen by the Notification Service.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

ORDER_CREATED = "ORDER_CREATED"


class EventModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderSnapshot(EventModel):
    id: int
    product_id: int
    product_name: str
    unit_price: Decimal
    quantity: int
    total_price: Decimal
    customer_id: int
    created_at: datetime


class OrderEvent(EventModel):
    """ORDER_* envelope; ``data`` is only parsed as an order for known types"""

    event_id: Optional[str] = None
    event_type: str
    timestamp: datetime
    source_service: Optional[str] = None
    correlation_id: Optional[str] = None
    data: dict

    def order(self) -> OrderSnapshot:
        return OrderSnapshot.model_validate(self.data)
