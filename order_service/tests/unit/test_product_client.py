"""
Unit tests for the HTTP catalog client.
"""

import json

import httpx
import pytest

from order_service.app.clients.product_client import HttpProductClient
from order_service.app.core.exceptions import (
    CatalogUnavailableError,
    InsufficientStockError,
    ProductNotFoundError,
)

PRODUCT = {
    "id": 1,
    "name": "Wireless Mouse",
    "sku": "MOUSE-001",
    "price": "99.99",
    "stock": 50,
    "active": True,
    "createdAt": "2024-01-01T00:00:00",
    "updatedAt": "2024-01-01T00:00:00",
}


def make_client(handler) -> HttpProductClient:
    return HttpProductClient(
        "http://product-service/", transport=httpx.MockTransport(handler)
    )


class TestHttpProductClient:
    @pytest.mark.asyncio
    async def test_get_product_forwards_correlation_id(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["correlation_id"] = request.headers.get("X-Correlation-ID")
            return httpx.Response(200, json=PRODUCT)

        client = make_client(handler)
        product = await client.get_product(1, correlation_id="corr-9")
        await client.close()

        assert seen == {"path": "/api/v1/products/1", "correlation_id": "corr-9"}
        assert str(product.price) == "99.99"
        assert product.active is True

    @pytest.mark.asyncio
    async def test_get_product_not_found(self):
        client = make_client(lambda request: httpx.Response(404, json={}))

        with pytest.raises(ProductNotFoundError):
            await client.get_product(5)

    @pytest.mark.asyncio
    async def test_has_stock(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["quantity"] == "3"
            return httpx.Response(
                200,
                json={
                    "productId": 1,
                    "hasStock": False,
                    "availableStock": 0,
                    "requestedQuantity": 3,
                },
            )

        client = make_client(handler)

        assert await client.has_stock(1, 3) is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status_code, expected",
        [
            (404, ProductNotFoundError),
            (409, InsufficientStockError),
            (500, CatalogUnavailableError),
        ],
    )
    async def test_reduce_stock_error_mapping(self, status_code, expected):
        client = make_client(
            lambda request: httpx.Response(status_code, content=json.dumps({}))
        )

        with pytest.raises(expected):
            await client.reduce_stock(1, 2)

    @pytest.mark.asyncio
    async def test_reduce_stock_uses_put(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "PUT"
            assert request.url.path == "/api/v1/products/1/reduce-stock"
            return httpx.Response(
                200, json={"productId": 1, "quantity": 2, "message": "ok"}
            )

        client = make_client(handler)

        assert await client.reduce_stock(1, 2) is None

    @pytest.mark.asyncio
    async def test_transport_error_becomes_catalog_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(CatalogUnavailableError) as exc_info:
            await client.get_product(1)

        assert exc_info.value.status_code == 503
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
