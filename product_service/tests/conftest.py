"""
Pytest configuration and fixtures for Product Service tests.
"""

import os
from decimal import Decimal
from typing import Any, AsyncGenerator, Dict

import httpx
import pytest
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession

# Set up test environment
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from product_service.app.core.database import ProductServiceDatabaseManager
from product_service.app.core.setting import ProductSettings
from product_service.app.main import create_app
from product_service.app.schemas.product import ProductCreate


@pytest.fixture
def test_settings(tmp_path) -> ProductSettings:
    """Settings pointing at a throwaway sqlite file."""
    return ProductSettings(
        PRODUCT_DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'products.db'}",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
async def test_database_manager(
    test_settings,
) -> AsyncGenerator[ProductServiceDatabaseManager, None]:
    """Create test database manager with tables in place."""
    manager = ProductServiceDatabaseManager(test_settings.PRODUCT_DATABASE_URL)
    await manager.create_tables()

    yield manager

    await manager.close()


@pytest.fixture
async def db_session(test_database_manager) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with test_database_manager.async_session_maker() as session:
        yield session


@pytest.fixture
def test_app(test_settings, test_database_manager) -> FastAPI:
    """Product Service application bound to the test database."""
    return create_app(settings=test_settings, database_manager=test_database_manager)


@pytest.fixture
async def client(test_app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Async HTTP client talking to the app in-process."""
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://product-service"
    ) as ac:
        yield ac


@pytest.fixture
def sample_product_data() -> Dict[str, Any]:
    """Sample product payload as a client would send it."""
    return {
        "name": "Wireless Mouse",
        "sku": "MOUSE-001",
        "price": "99.99",
        "stock": 50,
        "active": True,
    }


@pytest.fixture
def sample_product_create(sample_product_data) -> ProductCreate:
    return ProductCreate(**sample_product_data)


@pytest.fixture
def make_product_create():
    """Factory for distinct ProductCreate payloads."""

    def _make(sku: str, stock: int = 10, price: str = "10.00", **overrides):
        data = {
            "name": f"Product {sku}",
            "sku": sku,
            "price": Decimal(price),
            "stock": stock,
        }
        data.update(overrides)
        return ProductCreate(**data)

    return _make
