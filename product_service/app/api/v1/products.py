"""Product API endpoints"""

from typing import List, Optional

from fastapi import APIRouter, Query, Response, status

from ...services.product_service import ProductService
from ...schemas.product import (
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    StockCheckResponse,
    StockReductionResponse,
)
from ..dependencies import CorrelationIdDep, ProductServiceDep

router = APIRouter(prefix="/products")


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    correlation_id: Optional[str] = CorrelationIdDep,
    service: ProductService = ProductServiceDep,
):
    """Create a new product"""
    return await service.create_product(
        product_data=product_data, correlation_id=correlation_id
    )


@router.get("", response_model=List[ProductResponse])
async def list_products(
    page: int = Query(0, ge=0, description="Zero-based page index"),
    size: int = Query(10, ge=1, le=100, description="Items per page"),
    sort_by: str = Query("id", alias="sortBy"),
    sort_dir: str = Query("asc", alias="sortDir"),
    service: ProductService = ProductServiceDep,
):
    """List products one page at a time"""
    return await service.list_products(
        page=page, size=size, sort_by=sort_by, sort_dir=sort_dir
    )


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    correlation_id: Optional[str] = CorrelationIdDep,
    service: ProductService = ProductServiceDep,
):
    """Get product by ID, including inactive products"""
    return await service.get_product(product_id, correlation_id=correlation_id)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    product_data: ProductUpdate,
    correlation_id: Optional[str] = CorrelationIdDep,
    service: ProductService = ProductServiceDep,
):
    """Update the fields present in the request body"""
    return await service.update_product(
        product_id, product_data, correlation_id=correlation_id
    )


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: int,
    correlation_id: Optional[str] = CorrelationIdDep,
    service: ProductService = ProductServiceDep,
):
    """Deactivate a product"""
    await service.delete_product(product_id, correlation_id=correlation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{product_id}/stock", response_model=StockCheckResponse)
async def check_stock(
    product_id: int,
    quantity: int = Query(..., ge=1),
    correlation_id: Optional[str] = CorrelationIdDep,
    service: ProductService = ProductServiceDep,
):
    """Check whether ``quantity`` units are available"""
    return await service.check_stock(
        product_id, quantity, correlation_id=correlation_id
    )


@router.put("/{product_id}/reduce-stock", response_model=StockReductionResponse)
async def reduce_stock(
    product_id: int,
    quantity: int = Query(..., ge=1),
    correlation_id: Optional[str] = CorrelationIdDep,
    service: ProductService = ProductServiceDep,
):
    """Atomically decrement stock; 409 when not enough units remain"""
    return await service.reduce_stock(
        product_id, quantity, correlation_id=correlation_id
    )
