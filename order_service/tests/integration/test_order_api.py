"""
Integration tests for the Order Service API.
"""

from unittest.mock import AsyncMock

import pytest

from order_service.app.core.exceptions import (
    CatalogUnavailableError,
    InsufficientStockError,
    MessagingError,
)


class TestCreateOrderEndpoint:
    @pytest.mark.asyncio
    async def test_create_order(self, client, catalog, event_channel, order_payload):
        catalog.add(1, price="99.99", stock=50)

        response = await client.post(
            "/api/v1/orders",
            json=order_payload,
            headers={"X-Correlation-ID": "order-corr-1"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["productName"] == "Wireless Mouse"
        assert body["unitPrice"] == "99.99"
        assert body["totalPrice"] == "199.98"
        assert body["customerId"] == 1
        assert body["quantity"] == 2
        assert "createdAt" in body

        [message] = event_channel.published("order.events")
        assert message["correlationId"] == "order-corr-1"
        assert message["data"]["id"] == body["id"]

    @pytest.mark.asyncio
    async def test_unknown_product(self, client, event_channel, order_payload):
        response = await client.post("/api/v1/orders", json=order_payload)

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["type"] == "product_unavailable"
        assert error["details"]["productId"] == 1
        assert error["path"] == "/api/v1/orders"
        assert error["method"] == "POST"
        assert event_channel.published() == []

    @pytest.mark.asyncio
    async def test_inactive_product(self, client, catalog, order_payload):
        catalog.add(1, active=False)

        response = await client.post("/api/v1/orders", json=order_payload)

        assert response.status_code == 404
        assert response.json()["error"]["type"] == "product_unavailable"

    @pytest.mark.asyncio
    async def test_insufficient_stock(self, client, catalog, order_payload):
        catalog.add(1, stock=50)
        order_payload["quantity"] = 100

        response = await client.post("/api/v1/orders", json=order_payload)

        assert response.status_code == 400
        assert response.json()["error"]["type"] == "insufficient_stock"
        assert catalog.products[1].stock == 50

        listing = await client.get("/api/v1/orders")
        assert listing.json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"customerId": 1, "productId": 1, "quantity": 0},
            {"customerId": 1, "productId": 1, "quantity": -3},
            {"customerId": 1, "productId": 1},
            {"productId": 1, "quantity": 1},
        ],
    )
    async def test_invalid_payload(self, client, catalog, payload):
        response = await client.post("/api/v1/orders", json=payload)

        assert response.status_code == 422
        assert response.json()["error"]["type"] == "validation_error"
        assert catalog.calls == []

    @pytest.mark.asyncio
    async def test_stock_race_returns_conflict(self, client, catalog, order_payload):
        catalog.add(1)
        catalog.reduce_error = InsufficientStockError(1, 2)

        response = await client.post("/api/v1/orders", json=order_payload)

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["type"] == "concurrency_conflict"

        persisted = await client.get(f"/api/v1/orders/{error['details']['orderId']}")
        assert persisted.status_code == 200

    @pytest.mark.asyncio
    async def test_catalog_down(self, client, catalog, order_payload):
        catalog.get_product = AsyncMock(
            side_effect=CatalogUnavailableError("ConnectError")
        )

        response = await client.post("/api/v1/orders", json=order_payload)

        assert response.status_code == 503
        assert response.json()["error"]["type"] == "catalog_unavailable"

    @pytest.mark.asyncio
    async def test_publish_failure(self, client, catalog, event_channel, order_payload):
        catalog.add(1)
        event_channel.publish = AsyncMock(
            side_effect=MessagingError("Kafka producer not connected")
        )

        response = await client.post("/api/v1/orders", json=order_payload)

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["type"] == "messaging_error"
        assert "orderId" in error["details"]


class TestReadOrderEndpoints:
    @pytest.mark.asyncio
    async def test_get_order(self, client, catalog, order_payload):
        catalog.add(1)
        created = (await client.post("/api/v1/orders", json=order_payload)).json()

        response = await client.get(f"/api/v1/orders/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_get_missing_order(self, client):
        response = await client.get(
            "/api/v1/orders/404", headers={"X-Correlation-ID": "lookup-1"}
        )

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["type"] == "not_found"
        assert error["correlation_id"] == "lookup-1"

    @pytest.mark.asyncio
    async def test_list_orders_pagination(self, client, catalog):
        catalog.add(1, stock=100)
        for quantity in (1, 2, 3):
            await client.post(
                "/api/v1/orders",
                json={"customerId": 1, "productId": 1, "quantity": quantity},
            )

        response = await client.get(
            "/api/v1/orders",
            params={"page": 0, "size": 2, "sortBy": "quantity", "sortDir": "desc"},
        )

        assert response.status_code == 200
        assert [o["quantity"] for o in response.json()] == [3, 2]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [{"size": 101}, {"size": 0}, {"page": -1}])
    async def test_list_orders_page_bounds(self, client, params):
        response = await client.get("/api/v1/orders", params=params)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_reads_are_stable(self, client, catalog, order_payload):
        catalog.add(1)
        created = (await client.post("/api/v1/orders", json=order_payload)).json()

        first = await client.get("/api/v1/orders")
        second = await client.get("/api/v1/orders")
        by_id = [await client.get(f"/api/v1/orders/{created['id']}") for _ in range(2)]

        assert first.json() == second.json()
        assert by_id[0].json() == by_id[1].json()

    @pytest.mark.asyncio
    async def test_list_orders_bad_sort(self, client):
        response = await client.get("/api/v1/orders", params={"sortBy": "secret"})

        assert response.status_code == 400
        assert response.json()["error"]["type"] == "invalid_sort_field"

    @pytest.mark.asyncio
    async def test_customer_orders(self, client, catalog):
        catalog.add(1, stock=100)
        ids = []
        for customer_id in (7, 8, 7):
            response = await client.post(
                "/api/v1/orders",
                json={"customerId": customer_id, "productId": 1, "quantity": 1},
            )
            ids.append(response.json()["id"])

        response = await client.get("/api/v1/orders/customer/7")

        assert response.status_code == 200
        assert [o["id"] for o in response.json()] == [ids[2], ids[0]]

        empty = await client.get("/api/v1/orders/customer/99")
        assert empty.json() == []


class TestHealthEndpoint:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["checks"]["events"]["backend"] == "InMemoryEventChannel"
