"""
Order Service FastAPI Application
================================

Places orders against the Product Service catalog and announces them on
the order event channel.
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.health import router as health_router
from .api.v1.orders import router as orders_router
from .clients.product_client import HttpProductClient, ProductCatalog
from .core.database import OrderServiceDatabaseManager, create_database_manager
from .core.events import close_events, create_event_publisher, init_events
from .core.setting import OrderSettings, get_settings
from .events.base import EventPublisher
from .events.producers import OrderEventProducer
from .middleware.error import setup_order_error_handling
from .utils.logging import setup_order_logging as setup_logging
from .utils.service_health import OrderServiceHealthChecker


# Lifespan context manager for startup and shutdown events
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = app.state.logger
    startup_start = time.time()

    try:
        db_start = time.time()
        await app.state.database_manager.create_tables()
        db_duration = int((time.time() - db_start) * 1000)
        logger.info(
            "Database initialization completed", extra={"duration_ms": db_duration}
        )

        event_start = time.time()
        await init_events(app.state.event_publisher)
        event_duration = int((time.time() - event_start) * 1000)
        logger.info("Event publisher started", extra={"duration_ms": event_duration})

        logger.info(
            "Order service started successfully",
            extra={
                "total_startup_duration_ms": int((time.time() - startup_start) * 1000),
                "database_init_ms": db_duration,
                "event_publisher_init_ms": event_duration,
            },
        )

    except Exception as e:
        logger.error(
            "Failed to start order service",
            exc_info=True,
            extra={
                "startup_duration_ms": int((time.time() - startup_start) * 1000),
                "error_type": type(e).__name__,
            },
        )
        raise

    yield

    shutdown_start = time.time()
    logger.info("Starting order service shutdown")

    await close_events(app.state.event_publisher)
    await app.state.product_catalog.close()
    await app.state.database_manager.close()

    logger.info(
        "Order service shutdown completed",
        extra={"shutdown_duration_ms": int((time.time() - shutdown_start) * 1000)},
    )


def create_app(
    settings: Optional[OrderSettings] = None,
    database_manager: Optional[OrderServiceDatabaseManager] = None,
    product_catalog: Optional[ProductCatalog] = None,
    event_publisher: Optional[EventPublisher] = None,
) -> FastAPI:
    """Create the application; collaborators not given are built from settings."""
    settings = settings or get_settings()
    enable_file_logging = settings.ENVIRONMENT.lower() in ["production", "staging"]
    logger = setup_logging(
        "order_service",
        log_level=settings.LOG_LEVEL,
        enable_file_logging=enable_file_logging,
    )

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    database_manager = database_manager or create_database_manager(settings)
    product_catalog = product_catalog or HttpProductClient(
        settings.PRODUCT_SERVICE_URL, timeout=settings.PRODUCT_SERVICE_TIMEOUT
    )
    event_publisher = event_publisher or create_event_publisher(settings)

    health_checker = OrderServiceHealthChecker(
        settings.SERVICE_NAME, settings.APP_VERSION
    )
    health_checker.add_order_specific_checks(database_manager, event_publisher)

    app.state.settings = settings
    app.state.logger = logger
    app.state.database_manager = database_manager
    app.state.product_catalog = product_catalog
    app.state.event_publisher = event_publisher
    app.state.event_producer = OrderEventProducer(
        event_publisher,
        topic=settings.KAFKA_TOPIC_ORDER_EVENTS,
        source_service=settings.SERVICE_NAME,
    )
    app.state.health_checker = health_checker

    logger.info(
        "Order service configured",
        extra={
            "environment": settings.ENVIRONMENT,
            "event_backend": type(event_publisher).__name__,
            "product_service_url": settings.PRODUCT_SERVICE_URL,
        },
    )

    setup_order_error_handling(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_CREDENTIALS,
        allow_methods=settings.CORS_METHODS,
        allow_headers=settings.CORS_HEADERS,
    )

    logger.info(
        "CORS middleware configured",
        extra={
            "allowed_origins": len(settings.CORS_ORIGINS),
            "credentials_allowed": settings.CORS_CREDENTIALS,
        },
    )

    app.include_router(health_router, tags=["Health"])
    app.include_router(orders_router, prefix="/api/v1", tags=["Orders"])

    return app


app = create_app()
