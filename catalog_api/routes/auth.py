"""
Product Catalog API: Auth Route Handlers
=========================================

What:  POST /auth/register and POST /auth/login.
How:   Body validated by UserCreate / LoginRequest, logic in UserService.
       Neither route requires a token.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.database import get_db_session
from catalog_api.schemas.common import ErrorResponse
from catalog_api.schemas.user import LoginRequest, TokenResponse, UserCreate, UserResponse
from catalog_api.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=UserResponse,
    responses={400: {"description": "Validation error or duplicate user", "model": ErrorResponse}},
    summary="Register a new user",
)
async def register(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    """
    Create an account. The response never includes the password (or its hash).

    `role` defaults to `customer`.
    """
    user = await user_service.register(db, payload)
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Log in and receive a bearer token",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    token = await user_service.authenticate(db, payload.email, payload.password)
    return TokenResponse(token=token)
