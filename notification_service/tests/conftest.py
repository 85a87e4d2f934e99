"""
Pytest configuration and fixtures for Notification Service tests.
"""

import os
from typing import Any, AsyncGenerator, Dict
from unittest.mock import MagicMock

import httpx
import pytest
from fastapi import FastAPI

# Set up test environment
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from notification_service.app.core.settings import NotificationServiceSettings
from notification_service.app.events.base import EventSubscriber
from notification_service.app.events.consumers import (
    NotificationEventConsumer,
    OrderEventListener,
)
from notification_service.app.main import create_app


@pytest.fixture
def test_settings() -> NotificationServiceSettings:
    return NotificationServiceSettings(EVENTS_ENABLED=False, LOG_LEVEL="WARNING")


@pytest.fixture
def event_subscriber() -> MagicMock:
    subscriber = MagicMock(spec=EventSubscriber)
    subscriber.is_healthy.return_value = True
    return subscriber


@pytest.fixture
def test_app(test_settings, event_subscriber) -> FastAPI:
    return create_app(settings=test_settings, event_subscriber=event_subscriber)


@pytest.fixture
async def client(test_app) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://notification-service"
    ) as ac:
        yield ac


@pytest.fixture
def consumer() -> NotificationEventConsumer:
    return NotificationEventConsumer(OrderEventListener())


@pytest.fixture
def order_created_message() -> Dict[str, Any]:
    """ORDER_CREATED message exactly as the Order Service publishes it."""
    return {
        "eventId": "5f0c6a0e9c7b4f0e8d2a3b1c4d5e6f70",
        "eventType": "ORDER_CREATED",
        "timestamp": "2024-05-01T12:00:00Z",
        "sourceService": "order-service",
        "correlationId": "corr-42",
        "data": {
            "id": 10,
            "productId": 1,
            "productName": "Wireless Mouse",
            "unitPrice": "99.99",
            "quantity": 2,
            "totalPrice": "199.98",
            "customerId": 1,
            "createdAt": "2024-05-01T12:00:00",
        },
    }
