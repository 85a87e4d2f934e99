"""
FastAPI dependency injection for Product Service

Provides database sessions, the product service and correlation ID handling.
Sessions come from the database manager attached to ``app.state``.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import ProductServiceDatabaseManager
from ..services.product_service import ProductService

# =====================================================
# DATABASE DEPENDENCIES
# =====================================================


def get_database_manager(request: Request) -> ProductServiceDatabaseManager:
    return request.app.state.database_manager


async def get_async_session(
    request: Request,
) -> AsyncGenerator[AsyncSession, None]:
    """Provide async database session"""
    async for session in get_database_manager(request).get_async_session():
        yield session


# =====================================================
# SERVICE DEPENDENCIES
# =====================================================


def get_product_service(
    session: AsyncSession = Depends(get_async_session),
) -> ProductService:
    """Provide ProductService instance bound to the request session"""
    return ProductService(session)


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
ProductServiceDep = Depends(get_product_service)
