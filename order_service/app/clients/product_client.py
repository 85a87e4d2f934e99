"""
API Client for the Product Service catalog.

The order workflow talks to the catalog only through ``ProductCatalog``;
``HttpProductClient`` is the REST implementation used in deployment.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from ..core.exceptions import (
    CatalogUnavailableError,
    InsufficientStockError,
    ProductNotFoundError,
)
from ..schemas.order import ProductSnapshot, StockCheckResult
from ..utils.logging import setup_order_logging as setup_logging

logger = setup_logging("order_service.clients.product")


class ProductCatalog(ABC):
    """Remote view of the product catalog"""

    @abstractmethod
    async def get_product(
        self, product_id: int, correlation_id: Optional[str] = None
    ) -> ProductSnapshot:
        """Return the product or raise ProductNotFoundError"""

    @abstractmethod
    async def has_stock(
        self, product_id: int, quantity: int, correlation_id: Optional[str] = None
    ) -> bool:
        """Whether ``quantity`` units are available; False for unknown products"""

    @abstractmethod
    async def reduce_stock(
        self, product_id: int, quantity: int, correlation_id: Optional[str] = None
    ) -> None:
        """Decrement stock or raise InsufficientStockError / ProductNotFoundError"""

    async def close(self) -> None:
        pass


class HttpProductClient(ProductCatalog):
    """Client for the Product Service REST API"""

    def __init__(
        self,
        product_service_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = product_service_url.rstrip("/")
        self.timeout = timeout
        self.client = httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, transport=transport
        )

    @staticmethod
    def _headers(correlation_id: Optional[str]) -> Dict[str, str]:
        return {"X-Correlation-ID": correlation_id} if correlation_id else {}

    async def _request(
        self,
        method: str,
        path: str,
        correlation_id: Optional[str],
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        try:
            return await self.client.request(
                method, path, params=params, headers=self._headers(correlation_id)
            )
        except httpx.HTTPError as e:
            logger.error(
                "Product service request failed",
                extra={
                    "method": method,
                    "path": path,
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "correlation_id": correlation_id,
                },
            )
            raise CatalogUnavailableError(
                type(e).__name__, details={"path": path}
            ) from e

    @staticmethod
    def _unexpected(response: httpx.Response) -> CatalogUnavailableError:
        return CatalogUnavailableError(
            f"unexpected status {response.status_code}",
            details={
                "path": response.request.url.path,
                "statusCode": response.status_code,
            },
        )

    async def get_product(
        self, product_id: int, correlation_id: Optional[str] = None
    ) -> ProductSnapshot:
        response = await self._request(
            "GET", f"/api/v1/products/{product_id}", correlation_id
        )
        if response.status_code == 404:
            raise ProductNotFoundError(product_id)
        if response.status_code != 200:
            raise self._unexpected(response)
        return ProductSnapshot.model_validate(response.json())

    async def has_stock(
        self, product_id: int, quantity: int, correlation_id: Optional[str] = None
    ) -> bool:
        response = await self._request(
            "GET",
            f"/api/v1/products/{product_id}/stock",
            correlation_id,
            params={"quantity": quantity},
        )
        if response.status_code != 200:
            raise self._unexpected(response)
        return StockCheckResult.model_validate(response.json()).has_stock

    async def reduce_stock(
        self, product_id: int, quantity: int, correlation_id: Optional[str] = None
    ) -> None:
        response = await self._request(
            "PUT",
            f"/api/v1/products/{product_id}/reduce-stock",
            correlation_id,
            params={"quantity": quantity},
        )
        if response.status_code == 404:
            raise ProductNotFoundError(product_id)
        if response.status_code == 409:
            raise InsufficientStockError(product_id, quantity)
        if response.status_code != 200:
            raise self._unexpected(response)

    async def close(self) -> None:
        """Close the HTTP client"""
        await self.client.aclose()
