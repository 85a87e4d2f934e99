"""
FastAPI dependency injection for Order Service

Provides database sessions, the order service with its collaborators, and
correlation ID management. Collaborators live on ``app.state`` and are
attached by ``create_app``.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..clients.product_client import ProductCatalog
from ..events.producers import OrderEventProducer
from ..repository.order_repository import OrderRepository
from ..services.order_service import OrderService

# =====================================================
# DATABASE DEPENDENCIES
# =====================================================


async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Provide async database session"""
    async for session in request.app.state.database_manager.get_async_session():
        yield session


# =====================================================
# COLLABORATOR DEPENDENCIES
# =====================================================


def get_product_catalog(request: Request) -> ProductCatalog:
    return request.app.state.product_catalog


def get_order_event_producer(request: Request) -> OrderEventProducer:
    """Provide OrderEventProducer instance"""
    return request.app.state.event_producer


# =====================================================
# SERVICE DEPENDENCIES
# =====================================================


def get_order_service(
    session: AsyncSession = Depends(get_async_session),
    catalog: ProductCatalog = Depends(get_product_catalog),
    event_producer: OrderEventProducer = Depends(get_order_event_producer),
) -> OrderService:
    """Provide OrderService wired to the request session"""
    return OrderService(OrderRepository(session), catalog, event_producer)


# =====================================================
# REQUEST CONTEXT DEPENDENCIES
# =====================================================


def get_correlation_id(request: Request) -> Optional[str]:
    """Extract correlation ID from request headers or state"""
    correlation_id = (
        request.headers.get("X-Correlation-ID")
        or request.headers.get("correlation-id")
        or request.headers.get("x-request-id")
    )

    if not correlation_id:
        correlation_id = getattr(request.state, "correlation_id", None)

    return correlation_id


# =====================================================
# COMMON DEPENDENCY ALIASES
# =====================================================

CorrelationIdDep = Depends(get_correlation_id)
OrderServiceDep = Depends(get_order_service)
