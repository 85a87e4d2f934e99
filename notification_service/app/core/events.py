"""
Notification Service Event Management
Wires the order event consumer onto the configured subscriber.
"""

import logging
from typing import Optional

from ..events.base import EventSubscriber
from ..events.base.kafka_client import KafkaEventSubscriber
from ..events.consumers import NotificationEventConsumer
from .settings import NotificationServiceSettings, get_settings

logger = logging.getLogger(__name__)


def create_event_subscriber(
    settings: Optional[NotificationServiceSettings] = None,
) -> EventSubscriber:
    settings = settings or get_settings()
    return KafkaEventSubscriber(
        bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
        group_id=settings.KAFKA_GROUP_ID,
        client_id=f"{settings.SERVICE_NAME}-consumer",
        max_retries=settings.KAFKA_MAX_RETRIES,
        retry_delay=settings.KAFKA_RETRY_DELAY,
        enable_graceful_degradation=settings.EVENT_GRACEFUL_DEGRADATION,
    )


async def init_events(
    subscriber: EventSubscriber, consumer: NotificationEventConsumer, topic: str
) -> None:
    """Start the subscriber and route the order topic to the consumer"""
    await subscriber.start()
    await subscriber.subscribe(topic, consumer.consume)
    logger.info(
        "Order event consumption initialized",
        extra={"topic": topic, "subscriber": type(subscriber).__name__},
    )


async def close_events(subscriber: EventSubscriber) -> None:
    await subscriber.stop()
    logger.info("Order event consumption stopped")
