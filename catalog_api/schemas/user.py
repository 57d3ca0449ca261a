"""
Product Catalog API: User and Auth Schemas
===========================================

What:  Request/response contracts for /auth and /users.

Security:
    No response schema in this module has a password field. Routes declare
    these as response_model, so even a handler returning the ORM object
    cannot leak the hash.
"""

import uuid
from datetime import datetime

from pydantic import EmailStr, Field

from catalog_api.models.user import Role
from catalog_api.schemas.common import CamelModel


class UserCreate(CamelModel):
    """Registration payload (POST /auth/register)."""

    username: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    role: Role = Field(default=Role.CUSTOMER, description="admin | customer")


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class PasswordChangeRequest(CamelModel):
    """PUT /users/me/password. The current password must be re-entered."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class UserResponse(CamelModel):
    id: uuid.UUID
    username: str
    email: str
    role: str
    created_at: datetime


class TokenResponse(CamelModel):
    token: str = Field(description="Signed bearer token; send as 'Authorization: Bearer <token>'")
