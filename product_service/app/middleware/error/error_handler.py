"""
Error handling for Product Service.
Provides centralized exception handling and standardized error responses.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...core.exceptions import ProductServiceError
from ...utils.logging import setup_product_logging

logger = setup_product_logging("product_service.error_handler")


def _correlation_id(request: Request) -> str:
    return (
        request.headers.get("X-Correlation-ID")
        or request.headers.get("correlation-id")
        or request.headers.get("x-request-id")
        or getattr(request.state, "correlation_id", None)
        or "unknown"
    )


class ProductServiceErrorHandler:
    """
    Centralized error handling for Product Service.

    Every error leaves the service as
    ``{"error": {"type", "message", "details", "correlation_id", ...}}``.
    """

    @staticmethod
    def setup_error_handlers(app: FastAPI) -> None:
        @app.exception_handler(ProductServiceError)
        async def product_service_error_handler(
            request: Request, exc: ProductServiceError
        ) -> JSONResponse:
            """Handle domain errors raised by the service layer."""
            return ProductServiceErrorHandler._create_error_response(
                request=request,
                status_code=exc.status_code,
                error_type=exc.error_type,
                message=exc.message,
                details=exc.details,
            )

        @app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(
            request: Request, exc: StarletteHTTPException
        ) -> JSONResponse:
            return ProductServiceErrorHandler._create_error_response(
                request=request,
                status_code=exc.status_code,
                error_type="http_error",
                message=str(exc.detail),
            )

        @app.exception_handler(RequestValidationError)
        async def validation_exception_handler(
            request: Request, exc: RequestValidationError
        ) -> JSONResponse:
            """Handle request body/query validation failures."""
            error_details: List[Dict[str, Any]] = [
                {
                    "field": ".".join(str(loc) for loc in error["loc"]),
                    "message": error["msg"],
                    "type": error["type"],
                }
                for error in exc.errors()
            ]

            return ProductServiceErrorHandler._create_error_response(
                request=request,
                status_code=422,
                error_type="validation_error",
                message="Request validation failed",
                details={"validation_errors": error_details},
            )

        @app.exception_handler(StaleDataError)
        async def stale_data_handler(
            request: Request, exc: StaleDataError
        ) -> JSONResponse:
            """Optimistic lock lost against a concurrent writer."""
            return ProductServiceErrorHandler._create_error_response(
                request=request,
                status_code=409,
                error_type="concurrency_conflict",
                message=(
                    "The resource was modified by another transaction. "
                    "Please refresh and try again."
                ),
            )

        @app.exception_handler(IntegrityError)
        async def integrity_error_handler(
            request: Request, exc: IntegrityError
        ) -> JSONResponse:
            detail = str(exc.orig) if exc.orig is not None else str(exc)
            lowered = detail.lower()
            duplicate = "unique" in lowered or "duplicate" in lowered
            return ProductServiceErrorHandler._create_error_response(
                request=request,
                status_code=409,
                error_type="duplicate_value" if duplicate else "integrity_error",
                message="Duplicate value error"
                if duplicate
                else "Data integrity violation",
                details={"reason": detail},
            )

        @app.exception_handler(Exception)
        async def unhandled_exception_handler(
            request: Request, exc: Exception
        ) -> JSONResponse:
            logger.error(
                "Unhandled exception occurred",
                extra={
                    "correlation_id": _correlation_id(request),
                    "path": request.url.path,
                    "method": request.method,
                    "exception_type": type(exc).__name__,
                    "event_type": "unhandled_exception",
                },
                exc_info=exc,
            )

            return ProductServiceErrorHandler._create_error_response(
                request=request,
                status_code=500,
                error_type="internal_server_error",
                message="An internal server error occurred",
                details={"exception_type": type(exc).__name__},
            )

    @staticmethod
    def _create_error_response(
        request: Request,
        status_code: int,
        error_type: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> JSONResponse:
        """
        Create a standardized error response.

        Args:
            request: The FastAPI request object
            status_code: HTTP status code
            error_type: Kind of error, stable across releases
            message: Human-readable error message
            details: Additional error details

        Returns:
            JSONResponse with standardized error format
        """
        correlation_id = _correlation_id(request)

        error_response: Dict[str, Any] = {
            "error": {
                "type": error_type,
                "message": message,
                "correlation_id": correlation_id,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "path": request.url.path,
                "method": request.method,
            }
        }

        if details:
            error_response["error"]["details"] = details

        if status_code < 500:
            logger.warning(
                f"Client error: {error_type}",
                extra={
                    "correlation_id": correlation_id,
                    "status_code": status_code,
                    "error_type": error_type,
                    "path": request.url.path,
                    "method": request.method,
                },
            )

        return JSONResponse(status_code=status_code, content=error_response)


def setup_product_error_handling(app: FastAPI) -> None:
    """Register the Product Service error handlers on ``app``."""
    ProductServiceErrorHandler.setup_error_handlers(app)
