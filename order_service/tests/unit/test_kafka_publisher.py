"""
Unit tests for event publishing over Kafka and backend selection.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from aiokafka.errors import KafkaConnectionError, KafkaError

from order_service.app.core.events import create_event_publisher
from order_service.app.core.exceptions import MessagingError
from order_service.app.core.setting import OrderSettings
from order_service.app.events.base import BaseEvent
from order_service.app.events.base.kafka_client import KafkaEventPublisher
from order_service.app.events.base import kafka_client
from order_service.app.events.base.memory import InMemoryEventChannel
from order_service.app.schemas.order import OrderCreate


@pytest.fixture
def event() -> BaseEvent:
    return BaseEvent(
        event_type="ORDER_CREATED",
        correlation_id="corr-1",
        data={"id": 7, "totalPrice": "199.98"},
    )


class UnreachableAdminClient:
    """Admin client whose bootstrap always fails"""

    def __init__(self, **kwargs):
        self.close = AsyncMock()

    async def start(self):
        raise KafkaConnectionError("admin bootstrap failed")


def connected_publisher(**kwargs) -> KafkaEventPublisher:
    publisher = KafkaEventPublisher(
        bootstrap_servers="localhost:9092", client_id="order-service-test", **kwargs
    )
    publisher.producer = MagicMock()
    publisher.producer.send_and_wait = AsyncMock()
    publisher.is_connected = True
    publisher._known_topics.add("order.events")
    return publisher


class TestBaseEvent:
    def test_message_is_camel_case(self, event):
        message = event.to_message()

        assert set(message) == {
            "eventId",
            "eventType",
            "timestamp",
            "sourceService",
            "correlationId",
            "data",
        }
        assert message["sourceService"] == "order-service"
        assert message["data"]["totalPrice"] == "199.98"

    def test_event_ids_are_unique(self):
        first = BaseEvent(event_type="ORDER_CREATED")
        second = BaseEvent(event_type="ORDER_CREATED")

        assert first.event_id != second.event_id


class TestKafkaEventPublisher:
    @pytest.mark.asyncio
    async def test_publish_without_connection_raises(self, event):
        publisher = KafkaEventPublisher("localhost:9092", "order-service-test")

        with pytest.raises(MessagingError) as exc_info:
            await publisher.publish(event)

        assert exc_info.value.details["eventId"] == event.event_id

    @pytest.mark.asyncio
    async def test_publish_without_connection_degrades(self, event):
        publisher = KafkaEventPublisher(
            "localhost:9092", "order-service-test", enable_graceful_degradation=True
        )

        assert await publisher.publish(event) is None

    @pytest.mark.asyncio
    async def test_publish_uses_topic_and_routing_key(self, event):
        publisher = connected_publisher()

        await publisher.publish(event)

        publisher.producer.send_and_wait.assert_awaited_once_with(
            topic="order.events", value=event.to_message(), key="order.event"
        )

    @pytest.mark.asyncio
    async def test_send_failure_raises_messaging_error(self, event):
        publisher = connected_publisher()
        publisher.producer.send_and_wait.side_effect = KafkaError()

        with pytest.raises(MessagingError) as exc_info:
            await publisher.publish(event)

        assert exc_info.value.details["topic"] == "order.events"

    @pytest.mark.asyncio
    async def test_send_failure_degrades(self, event):
        publisher = connected_publisher(enable_graceful_degradation=True)
        publisher.producer.send_and_wait.side_effect = KafkaError()

        await publisher.publish(event)

        publisher.producer.send_and_wait.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_health_check_when_disconnected(self):
        publisher = KafkaEventPublisher("localhost:9092", "order-service-test")

        assert await publisher.health_check() is False


class TestTopicProvisioningFailure:
    @pytest.fixture(autouse=True)
    def _unreachable_admin(self, monkeypatch):
        monkeypatch.setattr(kafka_client, "AIOKafkaAdminClient", UnreachableAdminClient)

    def _publisher(self, **kwargs) -> KafkaEventPublisher:
        publisher = connected_publisher(**kwargs)
        publisher._known_topics.clear()
        return publisher

    @pytest.mark.asyncio
    async def test_send_still_attempted(self, event):
        publisher = self._publisher()

        await publisher.publish(event)

        publisher.producer.send_and_wait.assert_awaited_once()
        assert "order.events" not in publisher._known_topics

    @pytest.mark.asyncio
    async def test_broker_down_raises_messaging_error(self, event):
        publisher = self._publisher()
        publisher.producer.send_and_wait.side_effect = KafkaConnectionError()

        with pytest.raises(MessagingError):
            await publisher.publish(event)

    @pytest.mark.asyncio
    async def test_broker_down_degrades(self, event):
        publisher = self._publisher(enable_graceful_degradation=True)
        publisher.producer.send_and_wait.side_effect = KafkaConnectionError()

        assert await publisher.publish(event) is None

    @pytest.mark.asyncio
    async def test_order_failure_names_persisted_order(self, order_service, catalog):
        catalog.add(1)
        publisher = self._publisher()
        publisher.producer.send_and_wait.side_effect = KafkaConnectionError()
        order_service.event_producer.event_publisher = publisher

        with pytest.raises(MessagingError) as exc_info:
            await order_service.create_order(
                OrderCreate(customer_id=1, product_id=1, quantity=2)
            )

        assert exc_info.value.details["orderId"] is not None
        assert catalog.products[1].stock == 48

    @pytest.mark.asyncio
    async def test_order_succeeds_when_degraded(self, order_service, catalog):
        catalog.add(1)
        publisher = self._publisher(enable_graceful_degradation=True)
        publisher.producer.send_and_wait.side_effect = KafkaConnectionError()
        order_service.event_producer.event_publisher = publisher

        order = await order_service.create_order(
            OrderCreate(customer_id=1, product_id=1, quantity=2)
        )

        assert order.id is not None


class TestCreateEventPublisher:
    def test_memory_backend(self):
        publisher = create_event_publisher(OrderSettings(EVENT_BACKEND="memory"))

        assert isinstance(publisher, InMemoryEventChannel)
        assert publisher.default_topic == "order.events"

    def test_kafka_backend(self):
        publisher = create_event_publisher(
            OrderSettings(EVENT_BACKEND="kafka", KAFKA_BOOTSTRAP_SERVERS="kafka:29092")
        )

        assert isinstance(publisher, KafkaEventPublisher)
        assert publisher.bootstrap_servers == "kafka:29092"
        assert publisher.routing_key == "order.event"


class TestInMemoryEventChannel:
    @pytest.mark.asyncio
    async def test_delivers_to_subscribers(self, event):
        channel = InMemoryEventChannel()
        received = []

        async def handler(message):
            received.append(message)

        await channel.subscribe("order.events", handler)
        await channel.publish(event)

        assert received == [event.to_message()]
        assert channel.messages[0][:2] == ("order.events", "order.event")

    @pytest.mark.asyncio
    async def test_failing_subscriber_does_not_fail_publish(self, event):
        channel = InMemoryEventChannel()

        async def handler(message):
            raise RuntimeError("boom")

        await channel.subscribe("order.events", handler)
        await channel.publish(event)

        assert len(channel.published("order.events")) == 1
