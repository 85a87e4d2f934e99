"""
Error handling for Order Service.

Every failure leaves the service as
``{"error": {type, message, details?, correlation_id, timestamp, path, method}}``.
"""

import traceback
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...core.exceptions import OrderServiceError
from ...utils.logging import setup_order_logging

logger = setup_order_logging("order_service.error_handler")


class OrderServiceErrorHandler:
    """
    Maps exceptions onto the error envelope.

    Domain errors carry their own status and type; 5xx responses are
    logged at ERROR, everything else at WARNING.
    """

    @staticmethod
    def setup_error_handlers(app: FastAPI) -> None:
        handler = OrderServiceErrorHandler

        @app.exception_handler(OrderServiceError)
        async def order_service_error_handler(
            request: Request, exc: OrderServiceError
        ) -> JSONResponse:
            if exc.status_code >= 500:
                logger.error(
                    f"Order workflow failed: {exc.error_type}",
                    extra={
                        **handler._request_context(request),
                        "error_type": exc.error_type,
                        "details": exc.details,
                    },
                    exc_info=exc.__cause__ or exc,
                )
            return handler._error_response(
                request, exc.status_code, exc.error_type, exc.message, exc.details
            )

        @app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(
            request: Request, exc: StarletteHTTPException
        ) -> JSONResponse:
            return handler._error_response(
                request, exc.status_code, "http_error", str(exc.detail)
            )

        @app.exception_handler(RequestValidationError)
        async def validation_exception_handler(
            request: Request, exc: RequestValidationError
        ) -> JSONResponse:
            return handler._error_response(
                request,
                422,
                "validation_error",
                "Request validation failed",
                {"validation_errors": handler._validation_errors(exc)},
            )

        @app.exception_handler(Exception)
        async def unhandled_exception_handler(
            request: Request, exc: Exception
        ) -> JSONResponse:
            logger.error(
                "Unhandled exception occurred",
                extra={
                    **handler._request_context(request),
                    "exception_type": type(exc).__name__,
                    "exception_message": str(exc),
                    "traceback": traceback.format_exc(),
                },
            )
            return handler._error_response(
                request,
                500,
                "internal_server_error",
                "An internal server error occurred",
                {"exception_type": type(exc).__name__},
            )

    @staticmethod
    def _validation_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
        return [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]

    @staticmethod
    def _correlation_id(request: Request) -> str:
        headers = request.headers
        return (
            headers.get("X-Correlation-ID")
            or headers.get("correlation-id")
            or headers.get("x-request-id")
            or getattr(request.state, "correlation_id", None)
            or "unknown"
        )

    @staticmethod
    def _request_context(request: Request) -> Dict[str, Any]:
        return {
            "correlation_id": OrderServiceErrorHandler._correlation_id(request),
            "path": request.url.path,
            "method": request.method,
        }

    @staticmethod
    def _error_response(
        request: Request,
        status_code: int,
        error_type: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> JSONResponse:
        context = OrderServiceErrorHandler._request_context(request)
        body: Dict[str, Any] = {
            "type": error_type,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **context,
        }
        if details:
            body["details"] = details

        if status_code < 500:
            logger.warning(
                f"Request rejected: {error_type}",
                extra={**context, "status_code": status_code, "error_type": error_type},
            )

        return JSONResponse(status_code=status_code, content={"error": body})


def setup_order_error_handling(app: FastAPI) -> None:
    """Install the Order Service exception handlers on ``app``"""
    OrderServiceErrorHandler.setup_error_handlers(app)
