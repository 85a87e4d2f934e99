import asyncio
import json
import logging
from typing import Dict, List, Optional

from aiokafka import AIOKafkaConsumer, TopicPartition  # type: ignore
from aiokafka.errors import KafkaConnectionError, KafkaError  # type: ignore

from . import EventHandler, EventSubscriber

logger = logging.getLogger(__name__)


class KafkaEventSubscriber(EventSubscriber):
    """
    Notification Service Kafka subscriber with connection retry logic.

    Offsets are committed only after every handler for a message returned.
    A failed message is re-read from its offset after ``retry_delay``, so
    nothing behind it is committed until it has been handled.
    """

    def __init__(
        self,
        bootstrap_servers: str,
        group_id: str,
        client_id: str,
        max_retries: int = 5,
        retry_delay: float = 2.0,
        enable_graceful_degradation: bool = True,
    ):
        self.bootstrap_servers = bootstrap_servers
        self.group_id = group_id
        self.client_id = client_id
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.enable_graceful_degradation = enable_graceful_degradation
        self.consumers: Dict[str, AIOKafkaConsumer] = {}
        self.handlers: Dict[str, List[EventHandler]] = {}
        self.tasks: Dict[str, asyncio.Task] = {}
        self.running = False
        self.is_connected = False

    async def start(self, timeout: float = 30.0) -> None:
        """Check broker connectivity with retry logic"""
        for attempt in range(self.max_retries):
            try:
                logger.info(
                    "Attempting Kafka subscriber connection",
                    extra={
                        "attempt": attempt + 1,
                        "max_retries": self.max_retries,
                        "operation": "subscriber_connect",
                    },
                )

                probe = AIOKafkaConsumer(
                    bootstrap_servers=self.bootstrap_servers,
                    client_id=f"{self.client_id}-probe",
                )
                await asyncio.wait_for(probe.start(), timeout=timeout)  # type: ignore
                await probe.stop()  # type: ignore

                self.running = True
                self.is_connected = True
                logger.info("Kafka subscriber connected successfully")
                return

            except (KafkaConnectionError, asyncio.TimeoutError) as e:
                delay = self.retry_delay * (2**attempt)
                logger.warning(
                    f"Kafka subscriber connection attempt {attempt + 1} failed: {e}. "
                    f"Retrying in {delay} seconds..."
                )
                if attempt < self.max_retries - 1:
                    await asyncio.sleep(delay)

        if not self.enable_graceful_degradation:
            raise KafkaConnectionError(
                f"Could not connect to Kafka at {self.bootstrap_servers}"
            )

        logger.error(
            "Failed to connect Kafka subscriber after all retries. "
            "Running in degraded mode (no event consumption)"
        )

    async def stop(self) -> None:
        """Stop all consumers"""
        self.running = False
        self.is_connected = False

        for task in self.tasks.values():
            task.cancel()

        for topic, consumer in self.consumers.items():
            try:
                await consumer.stop()  # type: ignore
                logger.info(
                    "Stopped Kafka consumer for topic",
                    extra={"topic": topic, "operation": "stop_consumer"},
                )
            except KafkaError as e:
                logger.warning(
                    "Error stopping Kafka consumer",
                    extra={
                        "topic": topic,
                        "error": str(e),
                        "operation": "stop_consumer_error",
                    },
                )

        self.consumers.clear()
        self.tasks.clear()
        logger.info("All Kafka consumers stopped")

    def is_healthy(self) -> bool:
        return self.is_connected and all(not t.done() for t in self.tasks.values())

    async def subscribe(self, topic: str, handler: EventHandler) -> None:
        """Subscribe a handler to a topic, starting its consumer on first use"""
        if not self.is_connected:
            logger.warning(f"Cannot subscribe to {topic} - Kafka not connected")
            return

        self.handlers.setdefault(topic, []).append(handler)

        if topic in self.consumers:
            return

        consumer = AIOKafkaConsumer(
            topic,
            bootstrap_servers=self.bootstrap_servers,
            group_id=self.group_id,
            client_id=f"{self.client_id}-{topic}",
            value_deserializer=self._deserialize,
            enable_auto_commit=False,
            auto_offset_reset="earliest",
        )

        try:
            await consumer.start()  # type: ignore
        except KafkaError as e:
            logger.error(
                "Failed to start Kafka consumer",
                extra={
                    "topic": topic,
                    "error": str(e),
                    "graceful_degradation": self.enable_graceful_degradation,
                    "operation": "subscribe",
                },
            )
            self.handlers[topic].remove(handler)
            if not self.enable_graceful_degradation:
                raise
            return

        self.consumers[topic] = consumer
        self.tasks[topic] = asyncio.create_task(self._consume_messages(topic, consumer))

        logger.info(
            "Subscribed to Kafka topic",
            extra={
                "topic": topic,
                "group_id": self.group_id,
                "operation": "subscribe",
            },
        )

    @staticmethod
    def _deserialize(raw: bytes) -> Optional[dict]:
        try:
            value = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning(
                "Dropping undecodable Kafka message",
                extra={"size": len(raw), "operation": "deserialize"},
            )
            return None
        return value if isinstance(value, dict) else None

    async def _consume_messages(self, topic: str, consumer: AIOKafkaConsumer) -> None:
        """Consume messages from a topic; commit once handlers succeeded"""
        try:
            async for message in consumer:  # type: ignore
                if not self.running:
                    break

                if message.value is None:
                    await consumer.commit()  # type: ignore
                    continue

                try:
                    for handler in self.handlers.get(topic, []):
                        await handler(message.value)
                except Exception as e:
                    logger.error(
                        "Event handler error, message will be redelivered",
                        extra={
                            "topic": topic,
                            "partition": message.partition,
                            "offset": message.offset,
                            "error": str(e),
                            "operation": "handler_error",
                        },
                        exc_info=True,
                    )
                    consumer.seek(  # type: ignore
                        TopicPartition(message.topic, message.partition),
                        message.offset,
                    )
                    await asyncio.sleep(self.retry_delay)
                    continue

                await consumer.commit()  # type: ignore

        except asyncio.CancelledError:
            raise
        except KafkaError as e:
            logger.error(
                "Kafka consumer error",
                extra={"topic": topic, "error": str(e), "operation": "consumer_error"},
            )
