"""
Pytest configuration and fixtures for Order Service tests.
"""

import os
from decimal import Decimal
from typing import Any, AsyncGenerator, Dict, List, Optional

import httpx
import pytest
from fastapi import FastAPI

# Set up test environment
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from order_service.app.clients.product_client import ProductCatalog
from order_service.app.core.database import OrderServiceDatabaseManager
from order_service.app.core.exceptions import (
    InsufficientStockError,
    ProductNotFoundError,
)
from order_service.app.core.setting import OrderSettings
from order_service.app.events.base.memory import InMemoryEventChannel
from order_service.app.events.producers import OrderEventProducer
from order_service.app.main import create_app
from order_service.app.repository.order_repository import OrderRepository
from order_service.app.schemas.order import ProductSnapshot
from order_service.app.services.order_service import OrderService


class FakeProductCatalog(ProductCatalog):
    """In-process catalog that behaves like the Product Service API."""

    def __init__(self) -> None:
        self.products: Dict[int, ProductSnapshot] = {}
        self.calls: List[str] = []
        self.reduce_error: Optional[Exception] = None

    def add(
        self,
        product_id: int,
        name: str = "Wireless Mouse",
        price: str = "99.99",
        stock: int = 50,
        active: bool = True,
    ) -> ProductSnapshot:
        product = ProductSnapshot(
            id=product_id,
            name=name,
            sku=f"SKU-{product_id}",
            price=Decimal(price),
            stock=stock,
            active=active,
        )
        self.products[product_id] = product
        return product

    async def get_product(self, product_id, correlation_id=None):
        self.calls.append("get_product")
        if product_id not in self.products:
            raise ProductNotFoundError(product_id)
        return self.products[product_id]

    async def has_stock(self, product_id, quantity, correlation_id=None):
        self.calls.append("has_stock")
        product = self.products.get(product_id)
        return product is not None and product.stock >= quantity

    async def reduce_stock(self, product_id, quantity, correlation_id=None):
        self.calls.append("reduce_stock")
        if self.reduce_error is not None:
            raise self.reduce_error
        product = self.products.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        if product.stock < quantity:
            raise InsufficientStockError(product_id, quantity)
        self.products[product_id] = product.model_copy(
            update={"stock": product.stock - quantity}
        )


@pytest.fixture
def test_settings(tmp_path) -> OrderSettings:
    return OrderSettings(
        ORDER_DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}",
        EVENT_BACKEND="memory",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
async def test_database_manager(
    test_settings,
) -> AsyncGenerator[OrderServiceDatabaseManager, None]:
    """Create test database manager with tables in place."""
    manager = OrderServiceDatabaseManager(test_settings.ORDER_DATABASE_URL)
    await manager.create_tables()

    yield manager

    await manager.close()


@pytest.fixture
async def db_session(test_database_manager):
    """Create a test database session."""
    async with test_database_manager.async_session_maker() as session:
        yield session


@pytest.fixture
def catalog() -> FakeProductCatalog:
    return FakeProductCatalog()


@pytest.fixture
def event_channel() -> InMemoryEventChannel:
    return InMemoryEventChannel()


@pytest.fixture
def order_service(db_session, catalog, event_channel) -> OrderService:
    return OrderService(
        OrderRepository(db_session), catalog, OrderEventProducer(event_channel)
    )


@pytest.fixture
def test_app(test_settings, test_database_manager, catalog, event_channel) -> FastAPI:
    """Order Service application with an in-process catalog and channel."""
    return create_app(
        settings=test_settings,
        database_manager=test_database_manager,
        product_catalog=catalog,
        event_publisher=event_channel,
    )


@pytest.fixture
async def client(test_app) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://order-service"
    ) as ac:
        yield ac


@pytest.fixture
def order_payload() -> Dict[str, Any]:
    return {"customerId": 1, "productId": 1, "quantity": 2}
