"""
Product Catalog API: Authentication and Authorization Dependencies
===================================================================

What:  FastAPI dependencies that gate routes on a bearer token and a role.
How:   Routes list them in `dependencies=[...]` or as parameters; FastAPI
       resolves them before the request body is validated, giving the
       pipeline authenticate → authorize → validate → handler.

Usage:
    @router.post("/", dependencies=[Depends(require_admin)])
    async def create_category(...): ...

    async def me(identity: TokenPayload = Depends(authenticate)): ...
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from catalog_api.exceptions import AuthenticationError, AuthorizationError
from catalog_api.models.user import Role
from catalog_api.security import decode_access_token

# auto_error=False: a missing header must produce our 401 body, not FastAPI's 403
bearer_scheme = HTTPBearer(
    auto_error=False,
    bearerFormat="JWT",
    description="Token returned by POST /auth/login",
)


class TokenPayload(BaseModel):
    """Identity claims attached to an authenticated request."""

    id: str
    role: str


async def authenticate(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenPayload:
    """
    Resolve the caller's identity from `Authorization: Bearer <token>`.

    Raises:
        AuthenticationError: header absent or not Bearer, token invalid or
        expired, or the claims lack id/role
    """
    if credentials is None:
        raise AuthenticationError("Unauthorized: No token provided")

    claims = decode_access_token(credentials.credentials)
    try:
        identity = TokenPayload.model_validate(claims)
    except PydanticValidationError:
        raise AuthenticationError("Unauthorized: Invalid token", context={"reason": "claims"})

    request.state.user = identity
    return identity


def require_role(role: Role):
    """
    Dependency factory: the authenticated role must equal `role` exactly.
    """

    async def role_checker(identity: TokenPayload = Depends(authenticate)) -> TokenPayload:
        if identity.role != role.value:
            raise AuthorizationError(required_role=role.value)
        return identity

    return role_checker


require_admin = require_role(Role.ADMIN)
