from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import InvalidSortFieldError
from ..models.order import Order

# Sort keys accepted from the API, camelCase and snake_case
SORTABLE_COLUMNS: Dict[str, Any] = {
    "id": Order.id,
    "productId": Order.product_id,
    "product_id": Order.product_id,
    "productName": Order.product_name,
    "product_name": Order.product_name,
    "unitPrice": Order.unit_price,
    "unit_price": Order.unit_price,
    "quantity": Order.quantity,
    "totalPrice": Order.total_price,
    "total_price": Order.total_price,
    "customerId": Order.customer_id,
    "customer_id": Order.customer_id,
    "createdAt": Order.created_at,
    "created_at": Order.created_at,
}


class OrderRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_order(
        self,
        customer_id: int,
        product_id: int,
        product_name: str,
        unit_price: Decimal,
        quantity: int,
        total_price: Decimal,
    ) -> Order:
        """Persist a new order and commit it"""
        order = Order(
            customer_id=customer_id,
            product_id=product_id,
            product_name=product_name,
            unit_price=unit_price,
            quantity=quantity,
            total_price=total_price,
        )

        self.session.add(order)
        await self.session.commit()
        await self.session.refresh(order)
        return order

    async def get_order_by_id(self, order_id: int) -> Optional[Order]:
        query = select(Order).where(Order.id == order_id)
        result = await self.session.execute(query)
        return result.scalars().first()

    async def list_orders(
        self,
        page: int = 0,
        size: int = 10,
        sort_by: str = "id",
        sort_dir: str = "asc",
    ) -> List[Order]:
        """Get one page of all orders"""
        column = SORTABLE_COLUMNS.get(sort_by)
        if column is None:
            raise InvalidSortFieldError(sort_by, sorted(SORTABLE_COLUMNS))

        ordering = column.desc() if sort_dir.lower() == "desc" else column.asc()
        query = (
            select(Order)
            .order_by(ordering, Order.id.asc())
            .offset(page * size)
            .limit(size)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_orders_by_customer(self, customer_id: int) -> List[Order]:
        """All orders of one customer, newest first"""
        query = (
            select(Order)
            .where(Order.customer_id == customer_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())
