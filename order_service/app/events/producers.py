from typing import Optional

from ..models.order import Order
from ..utils.logging import setup_order_logging as setup_logging
from .base import BaseEvent, EventPublisher
from .schemas import ORDER_CREATED, OrderSnapshot

logger = setup_logging("order_service.events.producer")


class OrderEventProducer:
    """
    Order service event producer.

    Wraps whichever ``EventPublisher`` the application was configured with
    and builds the event envelopes for order lifecycle events.
    """

    def __init__(
        self,
        event_publisher: EventPublisher,
        topic: str = "order.events",
        source_service: str = "order-service",
    ):
        self.event_publisher = event_publisher
        self.topic = topic
        self.source_service = source_service

    async def publish_order_created(
        self, order: Order, correlation_id: Optional[str] = None
    ) -> BaseEvent:
        """Publish ORDER_CREATED with the full order snapshot"""
        event = BaseEvent(
            event_type=ORDER_CREATED,
            source_service=self.source_service,
            correlation_id=correlation_id,
            data=OrderSnapshot.model_validate(order).to_dict(),
        )

        try:
            await self.event_publisher.publish(event, topic=self.topic)
        except Exception as e:
            logger.error(
                f"Failed to publish order created event: {e}",
                extra={"order_id": order.id, "event_id": event.event_id},
            )
            raise

        logger.info(
            "Published order created event.",
            extra={
                "order_id": order.id,
                "customer_id": order.customer_id,
                "total_price": str(order.total_price),
                "event_id": event.event_id,
            },
        )
        return event
