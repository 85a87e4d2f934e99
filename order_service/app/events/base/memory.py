"""
In-process event channel.

Runs the services without a broker and lets tests observe exactly what was
published. Messages take the same JSON shape they would have on Kafka.
"""

from collections import defaultdict
from typing import Any, Dict, List, Optional, Tuple

from ...utils.logging import setup_order_logging as setup_logging
from . import BaseEvent, EventHandler, EventPublisher, EventSubscriber

logger = setup_logging("order_service.events.memory")


class InMemoryEventChannel(EventPublisher, EventSubscriber):
    """Publishes to a list and delivers inline to subscribed handlers"""

    def __init__(self, default_topic: str = "order.events", routing_key: str = "order.event"):
        self.default_topic = default_topic
        self.routing_key = routing_key
        self.messages: List[Tuple[str, str, Dict[str, Any]]] = []
        self.handlers: Dict[str, List[EventHandler]] = defaultdict(list)

    async def publish(self, event: BaseEvent, topic: Optional[str] = None) -> None:
        topic = topic or self.default_topic
        message = event.to_message()
        self.messages.append((topic, self.routing_key, message))

        logger.info(
            "Published event to in-memory channel",
            extra={
                "event_type": event.event_type,
                "topic": topic,
                "event_id": event.event_id,
                "subscribers": len(self.handlers[topic]),
            },
        )

        for handler in self.handlers[topic]:
            try:
                await handler(message)
            except Exception as e:
                logger.error(
                    "Event handler error",
                    extra={
                        "event_type": event.event_type,
                        "event_id": event.event_id,
                        "error": str(e),
                        "operation": "handler_error",
                    },
                    exc_info=True,
                )

    async def subscribe(self, topic: str, handler: EventHandler) -> None:
        self.handlers[topic].append(handler)

    def published(self, topic: Optional[str] = None) -> List[Dict[str, Any]]:
        """Messages published so far, optionally filtered by topic"""
        return [m for t, _, m in self.messages if topic is None or t == topic]
