from typing import List, Optional

from fastapi import APIRouter, Query, status

from ...schemas.order import OrderCreate, OrderResponse
from ...services.order_service import OrderService
from ..deps import CorrelationIdDep, OrderServiceDep

router = APIRouter(prefix="/orders")


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_data: OrderCreate,
    correlation_id: Optional[str] = CorrelationIdDep,
    order_service: OrderService = OrderServiceDep,
):
    """Place an order for one product"""
    return await order_service.create_order(order_data, correlation_id=correlation_id)


@router.get("", response_model=List[OrderResponse])
async def list_orders(
    page: int = Query(0, ge=0, description="Zero-based page index"),
    size: int = Query(10, ge=1, le=100, description="Number of orders to return"),
    sort_by: str = Query("id", alias="sortBy"),
    sort_dir: str = Query("asc", alias="sortDir"),
    order_service: OrderService = OrderServiceDep,
):
    """List all orders with pagination"""
    return await order_service.list_orders(
        page=page, size=size, sort_by=sort_by, sort_dir=sort_dir
    )


@router.get("/customer/{customer_id}", response_model=List[OrderResponse])
async def list_customer_orders(
    customer_id: int,
    order_service: OrderService = OrderServiceDep,
):
    """All orders of a customer, newest first"""
    return await order_service.list_orders_by_customer(customer_id)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    order_service: OrderService = OrderServiceDep,
):
    return await order_service.get_order(order_id)
