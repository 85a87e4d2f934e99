"""Product service for catalog and stock business logic"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import (
    DuplicateSkuError,
    InsufficientStockError,
    ProductNotFoundError,
)
from ..models.product import Product
from ..repository.product_repository import ProductRepository
from ..schemas.product import (
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    StockCheckResponse,
    StockReductionResponse,
)
from ..utils.logging import setup_product_logging as setup_logging

logger = setup_logging("product_service.services.product")


class ProductService:
    """Service class for product business logic"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = ProductRepository(db)

    def _convert_to_product_response(self, product: Product) -> ProductResponse:
        """Map a database product onto the API view"""
        return ProductResponse(
            id=product.id,
            name=product.name,
            sku=product.sku,
            price=Decimal(str(product.price)),
            stock=product.stock,
            active=product.active,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )

    async def create_product(
        self, product_data: ProductCreate, correlation_id: Optional[str] = None
    ) -> ProductResponse:
        """Create a new product with a unique SKU"""
        existing_product = await self.repository.get_product_by_sku(product_data.sku)
        if existing_product:
            raise DuplicateSkuError(product_data.sku)

        product = await self.repository.create_product(product_data)

        logger.info(
            "Product created successfully",
            extra={
                "product_id": product.id,
                "sku": product.sku,
                "stock": product.stock,
                "correlation_id": correlation_id,
            },
        )

        return self._convert_to_product_response(product)

    async def get_product(
        self, product_id: int, correlation_id: Optional[str] = None
    ) -> ProductResponse:
        """Get product by ID; inactive products are returned with active=False"""
        product = await self.repository.get_product_by_id(product_id)
        if not product:
            raise ProductNotFoundError(product_id)

        logger.debug(
            "Product retrieved",
            extra={"product_id": product_id, "correlation_id": correlation_id},
        )

        return self._convert_to_product_response(product)

    async def list_products(
        self,
        page: int,
        size: int,
        sort_by: str = "id",
        sort_dir: str = "asc",
    ) -> List[ProductResponse]:
        products = await self.repository.list_products(
            page=page, size=size, sort_by=sort_by, sort_dir=sort_dir
        )
        return [self._convert_to_product_response(p) for p in products]

    async def update_product(
        self,
        product_id: int,
        product_data: ProductUpdate,
        correlation_id: Optional[str] = None,
    ) -> ProductResponse:
        """Partially update a product"""
        if product_data.sku is not None:
            clash = await self.repository.get_product_by_sku(product_data.sku)
            if clash and clash.id != product_id:
                raise DuplicateSkuError(product_data.sku)

        product = await self.repository.update_product(product_id, product_data)
        if not product:
            raise ProductNotFoundError(product_id)

        logger.info(
            "Product updated successfully",
            extra={
                "product_id": product_id,
                "updated_fields": sorted(product_data.model_fields_set),
                "correlation_id": correlation_id,
            },
        )

        return self._convert_to_product_response(product)

    async def delete_product(
        self, product_id: int, correlation_id: Optional[str] = None
    ) -> None:
        """Soft delete: the product stays readable with active=False"""
        deleted = await self.repository.delete_product(product_id)
        if not deleted:
            raise ProductNotFoundError(product_id)

        logger.info(
            "Product deactivated",
            extra={"product_id": product_id, "correlation_id": correlation_id},
        )

    async def check_stock(
        self, product_id: int, quantity: int, correlation_id: Optional[str] = None
    ) -> StockCheckResponse:
        """Answer "can I take ``quantity`` units"; an unknown product is a no"""
        has_stock = await self.repository.has_stock(product_id, quantity)

        available = 0
        if has_stock:
            product = await self.repository.get_product_by_id(product_id)
            available = product.stock if product else 0

        logger.info(
            "Stock checked",
            extra={
                "product_id": product_id,
                "requested_quantity": quantity,
                "has_stock": has_stock,
                "correlation_id": correlation_id,
            },
        )

        return StockCheckResponse(
            product_id=product_id,
            has_stock=has_stock,
            available_stock=available,
            requested_quantity=quantity,
        )

    async def reduce_stock(
        self, product_id: int, quantity: int, correlation_id: Optional[str] = None
    ) -> StockReductionResponse:
        """Atomically take ``quantity`` units out of stock"""
        reduced = await self.repository.reduce_stock(product_id, quantity)

        if reduced is None:
            raise ProductNotFoundError(product_id)

        if not reduced:
            logger.warning(
                "Stock reduction rejected",
                extra={
                    "product_id": product_id,
                    "requested_quantity": quantity,
                    "correlation_id": correlation_id,
                },
            )
            raise InsufficientStockError(product_id, quantity)

        logger.info(
            "Stock reduced",
            extra={
                "product_id": product_id,
                "quantity": quantity,
                "correlation_id": correlation_id,
            },
        )

        return StockReductionResponse(
            product_id=product_id,
            quantity=quantity,
            message="Stock reduced successfully",
        )
