"""Product repository for database operations"""

from typing import Any, Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import InvalidSortFieldError
from ..models.product import Product
from ..schemas.product import ProductCreate, ProductUpdate

# Sort keys accepted from the API, camelCase and snake_case
SORTABLE_COLUMNS: Dict[str, Any] = {
    "id": Product.id,
    "name": Product.name,
    "sku": Product.sku,
    "price": Product.price,
    "stock": Product.stock,
    "active": Product.active,
    "createdAt": Product.created_at,
    "created_at": Product.created_at,
    "updatedAt": Product.updated_at,
    "updated_at": Product.updated_at,
}


class ProductRepository:
    """Repository for product database operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_product(self, product_data: ProductCreate) -> Product:
        """Create a new product"""
        product = Product(
            name=product_data.name,
            sku=product_data.sku,
            price=product_data.price,
            stock=product_data.stock,
            active=product_data.active,
        )

        self.db.add(product)
        await self.db.commit()
        await self.db.refresh(product)
        return product

    async def get_product_by_id(self, product_id: int) -> Optional[Product]:
        """Get product by ID, active or not"""
        query = select(Product).where(Product.id == product_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_product_by_sku(self, sku: str) -> Optional[Product]:
        """Get product by SKU"""
        query = select(Product).where(Product.sku == sku)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_products(
        self,
        page: int = 0,
        size: int = 10,
        sort_by: str = "id",
        sort_dir: str = "asc",
    ) -> List[Product]:
        """Get one page of products in the requested order"""
        column = SORTABLE_COLUMNS.get(sort_by)
        if column is None:
            raise InvalidSortFieldError(sort_by, sorted(SORTABLE_COLUMNS))

        ordering = column.desc() if sort_dir.lower() == "desc" else column.asc()
        query = (
            select(Product)
            .order_by(ordering, Product.id.asc())
            .offset(page * size)
            .limit(size)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update_product(
        self, product_id: int, product_data: ProductUpdate
    ) -> Optional[Product]:
        """Apply the fields that were set on the update request"""
        product = await self.get_product_by_id(product_id)
        if not product:
            return None

        update_data = product_data.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_data.items():
            setattr(product, field, value)

        await self.db.commit()
        await self.db.refresh(product)
        return product

    async def delete_product(self, product_id: int) -> bool:
        """Delete product (soft delete by setting active=False)"""
        product = await self.get_product_by_id(product_id)
        if not product:
            return False

        product.active = False
        await self.db.commit()
        return True

    async def has_stock(self, product_id: int, quantity: int) -> bool:
        """Whether at least ``quantity`` units are on hand; False if absent"""
        query = select(Product.stock).where(Product.id == product_id)
        result = await self.db.execute(query)
        stock = result.scalar_one_or_none()
        return stock is not None and stock >= quantity

    async def reduce_stock(self, product_id: int, quantity: int) -> Optional[bool]:
        """
        Decrement stock by ``quantity`` only if enough units remain.

        The check and the write are one conditional UPDATE, so concurrent
        decrements on the same row serialize in the database.

        Returns True on success, False when stock is insufficient and
        None when the product does not exist.
        """
        stmt = (
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity, version=Product.version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)

        if result.rowcount == 1:
            await self.db.commit()
            return True

        existing = await self.db.execute(
            select(Product.id).where(Product.id == product_id)
        )
        found = existing.scalar_one_or_none() is not None
        await self.db.rollback()
        return False if found else None
