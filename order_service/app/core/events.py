"""
Order Service Event Management
Builds and manages the event publisher selected by ``EVENT_BACKEND``.
"""

from typing import Optional

from ..events.base import EventPublisher
from ..events.base.kafka_client import KafkaEventPublisher
from ..events.base.memory import InMemoryEventChannel
from ..utils.logging import setup_order_logging as setup_logging
from .setting import OrderSettings, get_settings

logger = setup_logging("order_service.core.events")


def create_event_publisher(settings: Optional[OrderSettings] = None) -> EventPublisher:
    """Build the configured publisher; it is started by ``init_events``"""
    settings = settings or get_settings()

    if settings.EVENT_BACKEND == "memory":
        return InMemoryEventChannel(
            default_topic=settings.KAFKA_TOPIC_ORDER_EVENTS,
            routing_key=settings.KAFKA_ROUTING_KEY,
        )

    return KafkaEventPublisher(
        bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
        client_id=f"{settings.SERVICE_NAME}-producer",
        default_topic=settings.KAFKA_TOPIC_ORDER_EVENTS,
        routing_key=settings.KAFKA_ROUTING_KEY,
        max_retries=settings.KAFKA_MAX_RETRIES,
        retry_delay=settings.KAFKA_RETRY_DELAY,
        enable_graceful_degradation=settings.EVENT_GRACEFUL_DEGRADATION,
    )


async def init_events(publisher: EventPublisher) -> None:
    """Initialize event publishing infrastructure"""
    await publisher.start()
    logger.info(
        "Event publishing infrastructure initialized",
        extra={"publisher": type(publisher).__name__},
    )


async def close_events(publisher: EventPublisher) -> None:
    """Close event publishing infrastructure"""
    await publisher.stop()
    logger.info(
        "Event publishing infrastructure closed",
        extra={"publisher": type(publisher).__name__},
    )
