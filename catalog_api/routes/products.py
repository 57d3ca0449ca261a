"""
Product Catalog API: Product Route Handlers
============================================

Route Inventory:
    POST   /products/                     admin   create
    GET    /products/                     public  list with search/filters
    GET    /products/reports/low-stock    admin   stock below a threshold
    GET    /products/reports/inventory    admin   catalog-wide totals
    GET    /products/{id}                 public  detail
    PUT    /products/{id}                 admin   partial update
    DELETE /products/{id}                 admin   delete

The report routes are declared before /{product_id} so the literal
"reports" segment is never captured as an identifier.
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.database import get_db_session
from catalog_api.dependencies import require_admin
from catalog_api.schemas.common import ErrorResponse, MessageResponse
from catalog_api.schemas.product import (
    InventorySummary,
    ProductCreate,
    ProductQuery,
    ProductResponse,
    ProductUpdate,
)
from catalog_api.services.product_service import product_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])

ADMIN_RESPONSES = {
    400: {"description": "Validation error", "model": ErrorResponse},
    401: {"description": "Unauthorized", "model": ErrorResponse},
    403: {"description": "Forbidden - Admin access required", "model": ErrorResponse},
}
NOT_FOUND = {404: {"description": "Product not found", "model": ErrorResponse}}


@router.post(
    "/",
    status_code=201,
    response_model=ProductResponse,
    responses=ADMIN_RESPONSES,
    dependencies=[Depends(require_admin)],
    summary="Create a product (Admin only)",
)
async def create_product(
    payload: ProductCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ProductResponse:
    product = await product_service.create_product(db, payload)
    return ProductResponse.model_validate(product)


@router.get(
    "/",
    response_model=List[ProductResponse],
    responses={400: {"description": "Query validation failed", "model": ErrorResponse}},
    summary="List products with search and filters",
    description=(
        "All filters are optional and combine with AND. `categories` accepts a "
        "comma-separated list of category names or ids. Dates are ISO 8601. "
        "The X-Total-Count header carries the number of matches."
    ),
)
async def list_products(
    response: Response,
    search: Optional[str] = Query(default=None, min_length=1, max_length=100),
    categories: Optional[str] = Query(default=None, min_length=1, max_length=100),
    min_price: Optional[float] = Query(default=None, alias="minPrice", gt=0),
    max_price: Optional[float] = Query(default=None, alias="maxPrice", gt=0),
    on_sale: Optional[bool] = Query(default=None, alias="onSale"),
    color: Optional[str] = Query(default=None, min_length=1, max_length=50),
    size: Optional[str] = Query(default=None, min_length=1, max_length=50),
    created_after: Optional[datetime] = Query(default=None, alias="createdAfter"),
    created_before: Optional[datetime] = Query(default=None, alias="createdBefore"),
    db: AsyncSession = Depends(get_db_session),
) -> List[ProductResponse]:
    filters = ProductQuery(
        search=search,
        categories=[c.strip() for c in categories.split(",") if c.strip()] if categories else [],
        min_price=min_price,
        max_price=max_price,
        on_sale=on_sale,
        color=color,
        size=size,
        created_after=created_after,
        created_before=created_before,
    )
    products = await product_service.list_products(db, filters)
    response.headers["X-Total-Count"] = str(len(products))
    return [ProductResponse.model_validate(p) for p in products]


@router.get(
    "/reports/low-stock",
    response_model=List[ProductResponse],
    responses=ADMIN_RESPONSES,
    dependencies=[Depends(require_admin)],
    summary="Products running low on stock (Admin only)",
)
async def low_stock_report(
    threshold: int = Query(default=10, ge=1, le=1000, description="Report products with stock below this"),
    db: AsyncSession = Depends(get_db_session),
) -> List[ProductResponse]:
    products = await product_service.low_stock_report(db, threshold)
    return [ProductResponse.model_validate(p) for p in products]


@router.get(
    "/reports/inventory",
    response_model=InventorySummary,
    responses=ADMIN_RESPONSES,
    dependencies=[Depends(require_admin)],
    summary="Inventory totals across the catalog (Admin only)",
)
async def inventory_report(db: AsyncSession = Depends(get_db_session)) -> InventorySummary:
    return await product_service.inventory_summary(db)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses=NOT_FOUND,
    summary="Get a product by ID",
)
async def get_product(
    product_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> ProductResponse:
    product = await product_service.get_product(db, product_id)
    return ProductResponse.model_validate(product)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={**ADMIN_RESPONSES, **NOT_FOUND},
    dependencies=[Depends(require_admin)],
    summary="Update a product (Admin only)",
)
async def update_product(
    product_id: str,
    payload: ProductUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ProductResponse:
    product = await product_service.update_product(db, product_id, payload)
    return ProductResponse.model_validate(product)


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses={**ADMIN_RESPONSES, **NOT_FOUND},
    dependencies=[Depends(require_admin)],
    summary="Delete a product (Admin only)",
)
async def delete_product(
    product_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await product_service.delete_product(db, product_id)
    return MessageResponse(message="Product deleted")
