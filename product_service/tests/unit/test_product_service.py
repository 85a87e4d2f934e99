from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from product_service.app.core.exceptions import (
    DuplicateSkuError,
    InsufficientStockError,
    ProductNotFoundError,
)
from product_service.app.models.product import Product
from product_service.app.schemas.product import ProductUpdate
from product_service.app.services.product_service import ProductService


class TestProductService:
    """Unit tests for ProductService with the repository mocked out."""

    @pytest.fixture
    def mock_session(self):
        return Mock(spec=AsyncSession)

    @pytest.fixture
    def product_service(self, mock_session):
        return ProductService(mock_session)

    @pytest.fixture
    def sample_product(self):
        product = Mock(spec=Product)
        product.id = 1
        product.name = "Wireless Mouse"
        product.sku = "MOUSE-001"
        product.price = Decimal("99.99")
        product.stock = 50
        product.active = True
        product.created_at = datetime(2024, 1, 1)
        product.updated_at = datetime(2024, 1, 1)
        return product

    @pytest.mark.asyncio
    async def test_create_product_success(
        self, product_service, sample_product, sample_product_create
    ):
        product_service.repository.get_product_by_sku = AsyncMock(return_value=None)
        product_service.repository.create_product = AsyncMock(
            return_value=sample_product
        )

        result = await product_service.create_product(sample_product_create)

        assert result.id == 1
        assert result.price == Decimal("99.99")
        product_service.repository.create_product.assert_awaited_once_with(
            sample_product_create
        )

    @pytest.mark.asyncio
    async def test_create_product_duplicate_sku(
        self, product_service, sample_product, sample_product_create
    ):
        product_service.repository.get_product_by_sku = AsyncMock(
            return_value=sample_product
        )
        product_service.repository.create_product = AsyncMock()

        with pytest.raises(DuplicateSkuError):
            await product_service.create_product(sample_product_create)

        product_service.repository.create_product.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_product_not_found(self, product_service):
        product_service.repository.get_product_by_id = AsyncMock(return_value=None)

        with pytest.raises(ProductNotFoundError) as exc_info:
            await product_service.get_product(42)

        assert exc_info.value.status_code == 404
        assert exc_info.value.details == {"productId": 42}

    @pytest.mark.asyncio
    async def test_get_inactive_product_is_returned(
        self, product_service, sample_product
    ):
        sample_product.active = False
        product_service.repository.get_product_by_id = AsyncMock(
            return_value=sample_product
        )

        result = await product_service.get_product(1)

        assert result.active is False

    @pytest.mark.asyncio
    async def test_update_product_sku_clash(self, product_service, sample_product):
        sample_product.id = 2
        product_service.repository.get_product_by_sku = AsyncMock(
            return_value=sample_product
        )

        with pytest.raises(DuplicateSkuError):
            await product_service.update_product(1, ProductUpdate(sku="MOUSE-001"))

    @pytest.mark.asyncio
    async def test_delete_missing_product(self, product_service):
        product_service.repository.delete_product = AsyncMock(return_value=False)

        with pytest.raises(ProductNotFoundError):
            await product_service.delete_product(7)

    @pytest.mark.asyncio
    async def test_check_stock_available(self, product_service, sample_product):
        product_service.repository.has_stock = AsyncMock(return_value=True)
        product_service.repository.get_product_by_id = AsyncMock(
            return_value=sample_product
        )

        result = await product_service.check_stock(1, 2)

        assert result.has_stock is True
        assert result.available_stock == 50
        assert result.requested_quantity == 2

    @pytest.mark.asyncio
    async def test_check_stock_unknown_product(self, product_service):
        product_service.repository.has_stock = AsyncMock(return_value=False)
        product_service.repository.get_product_by_id = AsyncMock()

        result = await product_service.check_stock(999, 1)

        assert result.has_stock is False
        assert result.available_stock == 0
        product_service.repository.get_product_by_id.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "outcome, expected",
        [(None, ProductNotFoundError), (False, InsufficientStockError)],
    )
    async def test_reduce_stock_failures(self, product_service, outcome, expected):
        product_service.repository.reduce_stock = AsyncMock(return_value=outcome)

        with pytest.raises(expected):
            await product_service.reduce_stock(1, 5)

    @pytest.mark.asyncio
    async def test_reduce_stock_success(self, product_service):
        product_service.repository.reduce_stock = AsyncMock(return_value=True)

        result = await product_service.reduce_stock(1, 5, correlation_id="abc")

        assert result.product_id == 1
        assert result.quantity == 5
        assert result.message == "Stock reduced successfully"
