"""
Order service: order placement workflow and order queries.
"""

from decimal import Decimal
from typing import List, Optional

from ..clients.product_client import ProductCatalog
from ..core.exceptions import (
    CatalogUnavailableError,
    InsufficientStockError,
    MessagingError,
    OrderNotFoundError,
    ProductNotFoundError,
    ProductUnavailableError,
    StockReservationConflictError,
)
from ..events.producers import OrderEventProducer
from ..models.order import Order
from ..repository.order_repository import OrderRepository
from ..schemas.order import OrderCreate, OrderResponse
from ..utils.logging import setup_order_logging as setup_logging

logger = setup_logging("order_service.services.order")


class OrderService:
    """
    Places and reads orders.

    ``create_order`` runs the steps in a fixed order: look the product up,
    check stock, persist the order, decrement stock, publish ORDER_CREATED.
    Once the order is committed it is never retracted; a later failure is
    raised with the order id in its details.
    """

    def __init__(
        self,
        repository: OrderRepository,
        catalog: ProductCatalog,
        event_producer: OrderEventProducer,
    ):
        self.repository = repository
        self.catalog = catalog
        self.event_producer = event_producer

    def _to_response(self, order: Order) -> OrderResponse:
        return OrderResponse.model_validate(order)

    async def create_order(
        self, order_data: OrderCreate, correlation_id: Optional[str] = None
    ) -> OrderResponse:
        product_id = order_data.product_id
        quantity = order_data.quantity
        log_context = {
            "customer_id": order_data.customer_id,
            "product_id": product_id,
            "quantity": quantity,
            "correlation_id": correlation_id,
        }

        try:
            product = await self.catalog.get_product(product_id, correlation_id)
        except ProductNotFoundError as e:
            raise ProductUnavailableError(product_id) from e

        if not product.active:
            logger.warning("Order rejected: product inactive", extra=log_context)
            raise ProductUnavailableError(product_id, details={"active": False})

        if not await self.catalog.has_stock(product_id, quantity, correlation_id):
            logger.warning("Order rejected: insufficient stock", extra=log_context)
            raise InsufficientStockError(product_id, quantity)

        unit_price = Decimal(str(product.price))
        order = await self.repository.create_order(
            customer_id=order_data.customer_id,
            product_id=product_id,
            product_name=product.name,
            unit_price=unit_price,
            quantity=quantity,
            total_price=unit_price * quantity,
        )
        log_context["order_id"] = order.id

        try:
            await self.catalog.reduce_stock(product_id, quantity, correlation_id)
        except InsufficientStockError as e:
            logger.error(
                "Order persisted but stock reservation lost a race", extra=log_context
            )
            raise StockReservationConflictError(product_id, order.id, quantity) from e
        except ProductNotFoundError as e:
            logger.error(
                "Order persisted but product disappeared before stock reduction",
                extra=log_context,
            )
            raise ProductUnavailableError(
                product_id, details={"orderId": order.id}
            ) from e
        except CatalogUnavailableError as e:
            logger.error(
                "Order persisted but stock reduction failed", extra=log_context
            )
            e.details["orderId"] = order.id
            raise

        try:
            await self.event_producer.publish_order_created(order, correlation_id)
        except MessagingError as e:
            logger.error(
                "Order persisted but ORDER_CREATED was not published",
                extra=log_context,
            )
            e.details["orderId"] = order.id
            raise

        logger.info(
            "Order created successfully",
            extra={**log_context, "total_price": str(order.total_price)},
        )
        return self._to_response(order)

    async def get_order(self, order_id: int) -> OrderResponse:
        order = await self.repository.get_order_by_id(order_id)
        if not order:
            raise OrderNotFoundError(order_id)
        return self._to_response(order)

    async def list_orders(
        self, page: int, size: int, sort_by: str = "id", sort_dir: str = "asc"
    ) -> List[OrderResponse]:
        orders = await self.repository.list_orders(
            page=page, size=size, sort_by=sort_by, sort_dir=sort_dir
        )
        return [self._to_response(o) for o in orders]

    async def list_orders_by_customer(self, customer_id: int) -> List[OrderResponse]:
        orders = await self.repository.list_orders_by_customer(customer_id)
        return [self._to_response(o) for o in orders]
