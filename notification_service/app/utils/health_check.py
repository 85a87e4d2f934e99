"""
Notification Service Health Check Utilities
===========================================
"""

import time
from typing import Any, Dict

from ..events.base import EventSubscriber
from ..events.consumers import NotificationEventConsumer


class NotificationServiceHealthChecker:
    """Reports subscriber state and consumption progress"""

    def __init__(
        self,
        subscriber: EventSubscriber,
        consumer: NotificationEventConsumer,
        events_enabled: bool = True,
        service_name: str = "notification-service",
        version: str = "1.0.0",
    ) -> None:
        self.subscriber = subscriber
        self.consumer = consumer
        self.events_enabled = events_enabled
        self.service_name = service_name
        self.version = version
        self.start_time = time.time()

    async def run_checks_async(self) -> Dict[str, Any]:
        if self.events_enabled:
            events_ok = self.subscriber.is_healthy()
            events = {
                "status": "healthy" if events_ok else "unhealthy",
                "component": "events",
                "processed": self.consumer.processed,
            }
        else:
            events = {"status": "healthy", "component": "events", "enabled": False}

        return {
            "service": self.service_name,
            "version": self.version,
            "status": events["status"],
            "checks": {"events": events},
            "uptime_seconds": round(time.time() - self.start_time, 2),
            "timestamp": time.time(),
        }
