"""
Product Service FastAPI Application
==================================

Main application entry point for the Product Service microservice.
Owns the product catalog and stock levels and exposes them over REST
to clients and to the Order Service.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.health import router as health_router
from .api.v1.products import router as products_router
from .core.database import ProductServiceDatabaseManager, create_database_manager
from .core.setting import ProductSettings, get_settings
from .middleware.error import setup_product_error_handling
from .utils.logging import setup_product_logging
from .utils.service_health import create_product_service_health_checker


# Lifespan management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager for startup and shutdown."""
    logger = app.state.logger
    database_manager: ProductServiceDatabaseManager = app.state.database_manager
    startup_start = time.time()

    try:
        await database_manager.create_tables()
    except Exception as e:
        logger.error(
            "Failed to start product service",
            exc_info=True,
            extra={
                "startup_duration_ms": int((time.time() - startup_start) * 1000),
                "error_type": type(e).__name__,
            },
        )
        raise

    logger.info(
        "Product service started successfully",
        extra={"total_startup_duration_ms": int((time.time() - startup_start) * 1000)},
    )

    yield

    shutdown_start = time.time()
    logger.info("Starting product service shutdown")
    await database_manager.close()
    logger.info(
        "Product service shutdown completed",
        extra={"shutdown_duration_ms": int((time.time() - shutdown_start) * 1000)},
    )


# Application factory
def create_app(
    settings: Optional[ProductSettings] = None,
    database_manager: Optional[ProductServiceDatabaseManager] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    enable_file_logging = settings.ENVIRONMENT.lower() in ["production", "staging"]
    logger = setup_product_logging(
        "product_service",
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
    app.state.settings = settings
    app.state.logger = logger
    app.state.database_manager = database_manager
    app.state.health_checker = create_product_service_health_checker(
        database_manager, settings.SERVICE_NAME, settings.APP_VERSION
    )

    logger.info(
        "Configuring FastAPI application",
        extra={
            "app_name": settings.APP_NAME,
            "app_version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "debug_mode": settings.DEBUG,
        },
    )

    setup_product_error_handling(app)
    _setup_cors(app, settings)
    _setup_routers(app)

    return app


def _setup_cors(app: FastAPI, settings: ProductSettings) -> None:
    """Configure CORS settings with logging."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_CREDENTIALS,
        allow_methods=settings.CORS_METHODS,
        allow_headers=settings.CORS_HEADERS,
    )

    app.state.logger.info(
        "CORS middleware configured",
        extra={
            "allowed_origins": len(settings.CORS_ORIGINS),
            "credentials_allowed": settings.CORS_CREDENTIALS,
        },
    )


def _setup_routers(app: FastAPI) -> None:
    """Configure all application routers."""
    routers_info: list[dict[str, Any]] = []

    app.include_router(health_router, tags=["Health"])
    routers_info.append({"router": "health", "prefix": "", "tags": ["Health"]})

    app.include_router(products_router, prefix="/api/v1", tags=["Product Management"])
    routers_info.append(
        {"router": "products", "prefix": "/api/v1", "tags": ["Product Management"]}
    )

    app.state.logger.info(
        "API routes configured",
        extra={"total_routers": len(routers_info), "routers": routers_info},
    )


app = create_app()
