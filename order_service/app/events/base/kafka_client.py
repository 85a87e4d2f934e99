import asyncio
import json
from typing import Optional, Set

from aiokafka import AIOKafkaProducer  # type: ignore
from aiokafka.admin import AIOKafkaAdminClient, NewTopic  # type: ignore
from aiokafka.errors import KafkaConnectionError, KafkaError  # type: ignore

from ...core.exceptions import MessagingError
from ...utils.logging import setup_order_logging as setup_logging
from . import BaseEvent, EventPublisher

logger = setup_logging("order_service.events.kafka")


class KafkaEventPublisher(EventPublisher):
    """
    Order Service Kafka publisher with connection retry logic.

    Messages are JSON encoded and keyed with the routing key so that all
    order events land on the same partition in publish order.
    """

    def __init__(
        self,
        bootstrap_servers: str,
        client_id: str,
        default_topic: str = "order.events",
        routing_key: str = "order.event",
        max_retries: int = 10,
        retry_delay: float = 2.0,
        enable_graceful_degradation: bool = False,
    ):
        self.bootstrap_servers = bootstrap_servers
        self.client_id = client_id
        self.default_topic = default_topic
        self.routing_key = routing_key
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.enable_graceful_degradation = enable_graceful_degradation
        self.producer: Optional[AIOKafkaProducer] = None
        self.is_connected = False
        self._known_topics: Set[str] = set()
        self._connection_lock = asyncio.Lock()

    async def ensure_topic_exists(self, topic_name: str) -> None:
        """Create the topic on first use; later calls are no-ops."""
        if topic_name in self._known_topics:
            return

        admin_client = AIOKafkaAdminClient(bootstrap_servers=self.bootstrap_servers)
        try:
            await admin_client.start()  # type: ignore
            topics = await admin_client.list_topics()
            if topic_name not in topics:
                await admin_client.create_topics(
                    [NewTopic(name=topic_name, num_partitions=1, replication_factor=1)]
                )
                logger.info(
                    "Created Kafka topic",
                    extra={"topic_name": topic_name, "operation": "create_topic"},
                )
            self._known_topics.add(topic_name)
        except KafkaError as e:
            logger.warning(
                "Error ensuring Kafka topic exists",
                extra={
                    "topic_name": topic_name,
                    "error": str(e),
                    "operation": "ensure_topic_exists",
                },
            )
        finally:
            await admin_client.close()  # type: ignore

    async def start(self, timeout: float = 30.0) -> None:
        """Start Kafka producer with retry logic"""
        async with self._connection_lock:
            if self.producer and self.is_connected:
                return

            self.producer = AIOKafkaProducer(
                bootstrap_servers=self.bootstrap_servers,
                client_id=self.client_id,
                value_serializer=lambda x: json.dumps(x, default=str).encode("utf-8"),  # type: ignore
                key_serializer=lambda x: x.encode("utf-8") if x else None,  # type: ignore
                acks="all",
                retry_backoff_ms=1000,
                request_timeout_ms=30000,
            )

            # Retry connection with exponential backoff
            for attempt in range(self.max_retries):
                try:
                    logger.info(
                        "Attempting Kafka connection",
                        extra={
                            "attempt": attempt + 1,
                            "max_retries": self.max_retries,
                            "operation": "kafka_connect",
                        },
                    )

                    await asyncio.wait_for(self.producer.start(), timeout=timeout)  # type: ignore

                    self.is_connected = True
                    logger.info("Successfully connected to Kafka")
                    return

                except (KafkaConnectionError, asyncio.TimeoutError) as e:
                    delay = self.retry_delay * (2**attempt)
                    logger.warning(
                        f"Kafka connection attempt {attempt + 1} failed: {e}. "
                        f"Retrying in {delay} seconds..."
                    )

                    if attempt < self.max_retries - 1:
                        await asyncio.sleep(delay)

            logger.error(
                f"Failed to connect to Kafka after {self.max_retries} attempts",
                extra={
                    "bootstrap_servers": self.bootstrap_servers,
                    "graceful_degradation": self.enable_graceful_degradation,
                },
            )
            self.is_connected = False

    async def stop(self) -> None:
        """Stop Kafka producer"""
        async with self._connection_lock:
            if self.producer:
                try:
                    await self.producer.stop()  # type: ignore
                    logger.info("Kafka producer stopped")
                except KafkaError as e:
                    logger.warning(
                        "Error stopping Kafka producer",
                        extra={"error": str(e), "operation": "stop_producer"},
                    )
                finally:
                    self.producer = None
                    self.is_connected = False

    async def publish(self, event: BaseEvent, topic: Optional[str] = None) -> None:
        """Publish an event, or log it when degradation is enabled"""
        message = event.to_message()

        if not self.is_connected or not self.producer:
            if self.enable_graceful_degradation:
                logger.warning(
                    f"Kafka not available, logging event instead: {event.event_type}",
                    extra={
                        "event_id": event.event_id,
                        "event_type": event.event_type,
                        "event_data": message,
                    },
                )
                return
            raise MessagingError(
                "Kafka producer not connected",
                details={"eventId": event.event_id, "eventType": event.event_type},
            )

        topic = topic or self.default_topic

        try:
            await self.ensure_topic_exists(topic)
            await self.producer.send_and_wait(  # type: ignore
                topic=topic, value=message, key=self.routing_key
            )
            logger.info(
                "Published event to Kafka topic",
                extra={
                    "event_type": event.event_type,
                    "topic": topic,
                    "event_id": event.event_id,
                    "correlation_id": event.correlation_id,
                    "operation": "publish_event",
                },
            )

        except KafkaError as e:
            if self.enable_graceful_degradation:
                logger.error(
                    f"Failed to publish event {event.event_type}, logging instead: {e}",
                    extra={
                        "event_id": event.event_id,
                        "event_type": event.event_type,
                        "event_data": message,
                    },
                )
                return

            logger.error(
                "Failed to publish event to Kafka",
                extra={
                    "event_type": event.event_type,
                    "error": str(e),
                    "event_id": event.event_id,
                    "correlation_id": event.correlation_id,
                    "operation": "publish_event_failed",
                },
            )
            raise MessagingError(
                f"Failed to publish {event.event_type} event",
                details={"eventId": event.event_id, "topic": topic},
            ) from e

    async def health_check(self) -> bool:
        """Check if Kafka connection is healthy"""
        if not self.producer or not self.is_connected:
            return False

        try:
            metadata = await self.producer.client.fetch_all_metadata()  # type: ignore
            return len(metadata.brokers()) > 0  # type: ignore
        except KafkaError as e:
            logger.warning(
                "Kafka health check failed",
                extra={"error": str(e), "operation": "health_check"},
            )
            return False
