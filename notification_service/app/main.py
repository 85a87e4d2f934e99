"""
Notification Service FastAPI Application
=======================================

Consumes order events and sends customer notifications. The HTTP surface
is limited to the health endpoint.
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.health import router as health_router
from .core.events import close_events, create_event_subscriber, init_events
from .core.settings import NotificationServiceSettings, get_settings
from .events.base import EventSubscriber
from .events.consumers import NotificationEventConsumer, OrderEventListener
from .utils.health_check import NotificationServiceHealthChecker
from .utils.logging import setup_notification_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager for startup and shutdown."""
    settings: NotificationServiceSettings = app.state.settings
    logger = app.state.logger
    startup_start = time.time()

    if settings.EVENTS_ENABLED:
        try:
            await init_events(
                app.state.event_subscriber,
                app.state.event_consumer,
                settings.KAFKA_TOPIC_ORDER_EVENTS,
            )
        except Exception as e:
            logger.error(
                "Failed to start notification service",
                exc_info=True,
                extra={
                    "startup_duration_ms": int((time.time() - startup_start) * 1000),
                    "error_type": type(e).__name__,
                },
            )
            raise
    else:
        logger.info("Event consumption disabled")

    logger.info(
        "Notification service started successfully",
        extra={"total_startup_duration_ms": int((time.time() - startup_start) * 1000)},
    )

    yield

    shutdown_start = time.time()
    if settings.EVENTS_ENABLED:
        await close_events(app.state.event_subscriber)
    logger.info(
        "Notification service shutdown completed",
        extra={"shutdown_duration_ms": int((time.time() - shutdown_start) * 1000)},
    )


def create_app(
    settings: Optional[NotificationServiceSettings] = None,
    event_subscriber: Optional[EventSubscriber] = None,
    listener: Optional[OrderEventListener] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    logger = setup_notification_logging("notification_service", settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    event_subscriber = event_subscriber or create_event_subscriber(settings)
    event_consumer = NotificationEventConsumer(listener or OrderEventListener())

    app.state.settings = settings
    app.state.logger = logger
    app.state.event_subscriber = event_subscriber
    app.state.event_consumer = event_consumer
    app.state.health_checker = NotificationServiceHealthChecker(
        event_subscriber,
        event_consumer,
        events_enabled=settings.EVENTS_ENABLED,
        service_name=settings.SERVICE_NAME,
        version=settings.APP_VERSION,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_CREDENTIALS,
        allow_methods=settings.CORS_METHODS,
        allow_headers=settings.CORS_HEADERS,
    )
    app.include_router(health_router, tags=["Health"])

    return app


app = create_app()
