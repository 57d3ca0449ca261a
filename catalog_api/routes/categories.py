"""
Product Catalog API: Category Route Handlers
=============================================

What:  CRUD for /categories.
Who:   Reads are public; writes require an admin bearer token.

Rate limiting for this prefix is applied by RateLimitMiddleware
(RATE_LIMIT_PATHS, default "/categories"), not per route.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.database import get_db_session
from catalog_api.dependencies import require_admin
from catalog_api.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from catalog_api.schemas.common import ErrorResponse, MessageResponse
from catalog_api.services.category_service import category_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["Categories"])

ADMIN_RESPONSES = {
    400: {"description": "Validation error", "model": ErrorResponse},
    401: {"description": "Unauthorized", "model": ErrorResponse},
    403: {"description": "Forbidden - Admin access required", "model": ErrorResponse},
}
NOT_FOUND = {404: {"description": "Category not found", "model": ErrorResponse}}


@router.post(
    "/",
    status_code=201,
    response_model=CategoryResponse,
    responses=ADMIN_RESPONSES,
    dependencies=[Depends(require_admin)],
    summary="Create a new category (Admin only)",
)
async def create_category(
    payload: CategoryCreate,
    db: AsyncSession = Depends(get_db_session),
) -> CategoryResponse:
    category = await category_service.create_category(db, payload)
    return CategoryResponse.model_validate(category)


@router.get("/", response_model=List[CategoryResponse], summary="List all categories")
async def list_categories(db: AsyncSession = Depends(get_db_session)) -> List[CategoryResponse]:
    categories = await category_service.list_categories(db)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    responses=NOT_FOUND,
    summary="Get a category by ID",
)
async def get_category(
    category_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> CategoryResponse:
    category = await category_service.get_category(db, category_id)
    return CategoryResponse.model_validate(category)


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    responses={**ADMIN_RESPONSES, **NOT_FOUND},
    dependencies=[Depends(require_admin)],
    summary="Update a category (Admin only)",
)
async def update_category(
    category_id: str,
    payload: CategoryUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> CategoryResponse:
    category = await category_service.update_category(db, category_id, payload)
    return CategoryResponse.model_validate(category)


@router.delete(
    "/{category_id}",
    response_model=MessageResponse,
    responses={**ADMIN_RESPONSES, **NOT_FOUND},
    dependencies=[Depends(require_admin)],
    summary="Delete a category (Admin only)",
)
async def delete_category(
    category_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await category_service.delete_category(db, category_id)
    return MessageResponse(message="Category deleted")
