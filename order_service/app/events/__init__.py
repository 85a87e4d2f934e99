"""
Events module for the Order Service.

Producers:
    - OrderEventProducer: Publishes ORDER_CREATED events

Channels:
    - KafkaEventPublisher: aiokafka backed publisher
    - InMemoryEventChannel: in-process publish/subscribe
"""

from .producers import OrderEventProducer

__all__ = ["OrderEventProducer"]
