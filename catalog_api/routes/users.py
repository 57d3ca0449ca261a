"""
Product Catalog API: User Route Handlers
=========================================

Route Inventory:
    GET /users/              admin only: every user, passwords excluded
    GET /users/me            any authenticated user: own profile
    PUT /users/me/password   any authenticated user: change own password
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.database import get_db_session
from catalog_api.dependencies import TokenPayload, authenticate, require_admin
from catalog_api.schemas.common import ErrorResponse, MessageResponse
from catalog_api.schemas.user import PasswordChangeRequest, UserResponse
from catalog_api.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

AUTH_RESPONSES = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Admin role required", "model": ErrorResponse},
}


@router.get(
    "/",
    response_model=List[UserResponse],
    responses=AUTH_RESPONSES,
    dependencies=[Depends(require_admin)],
    summary="List all users (Admin only)",
)
async def list_users(db: AsyncSession = Depends(get_db_session)) -> List[UserResponse]:
    users = await user_service.list_users(db)
    return [UserResponse.model_validate(u) for u in users]


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: AUTH_RESPONSES[401]},
    summary="Get the authenticated user's profile",
)
async def get_me(
    identity: TokenPayload = Depends(authenticate),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await user_service.get_user(db, identity.id)
    return UserResponse.model_validate(user)


@router.put(
    "/me/password",
    response_model=MessageResponse,
    responses={401: AUTH_RESPONSES[401], 400: {"description": "Validation error", "model": ErrorResponse}},
    summary="Change the authenticated user's password",
)
async def change_password(
    payload: PasswordChangeRequest,
    identity: TokenPayload = Depends(authenticate),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await user_service.change_password(
        db, identity.id, payload.current_password, payload.new_password
    )
    return MessageResponse(message="Password updated")
