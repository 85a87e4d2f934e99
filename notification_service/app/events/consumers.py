import logging
from typing import Any, Dict

from pydantic import ValidationError

from .schemas import ORDER_CREATED, OrderEvent

logger = logging.getLogger(__name__)


class OrderEventListener:
    """Turns order events into customer notifications"""

    async def on_event(self, event: OrderEvent) -> bool:
        """Handle one event; returns False when the type is not recognised"""
        if event.event_type == ORDER_CREATED:
            await self.send_order_notification(event)
            return True

        logger.warning(
            "Unrecognised order event type, ignoring",
            extra={
                "event_type": event.event_type,
                "event_id": event.event_id,
                "correlation_id": event.correlation_id,
            },
        )
        return False

    async def send_order_notification(self, event: OrderEvent) -> None:
        order = event.order()

        # Delivery channel (email, SMS, push) plugs in here
        logger.info(
            "Sending order notification",
            extra={
                "order_id": order.id,
                "customer_id": order.customer_id,
                "product_name": order.product_name,
                "quantity": order.quantity,
                "total_price": str(order.total_price),
                "event_id": event.event_id,
                "correlation_id": event.correlation_id,
            },
        )


class NotificationEventConsumer:
    """Entry point for raw order messages coming off the channel"""

    def __init__(self, listener: OrderEventListener):
        self.listener = listener
        self.processed = 0

    async def consume(self, payload: Dict[str, Any]) -> None:
        try:
            event = OrderEvent.model_validate(payload)
            if event.event_type == ORDER_CREATED:
                event.order()
        except ValidationError as e:
            logger.error(
                "Dropping malformed order event",
                extra={"error_count": e.error_count(), "errors": str(e)},
            )
            return

        if await self.listener.on_event(event):
            self.processed += 1
