"""
Notification Service event subscription interfaces.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict

# Handlers receive the decoded JSON message
EventHandler = Callable[[Dict[str, Any]], Awaitable[None]]


class EventSubscriber(ABC):
    """Abstract base class for event subscribers"""

    @abstractmethod
    async def subscribe(self, topic: str, handler: EventHandler) -> None:
        """Deliver every message on ``topic`` to ``handler``"""
        pass

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        pass

    def is_healthy(self) -> bool:
        return True
