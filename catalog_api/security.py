"""
Product Catalog API: Password Hashing and Bearer Tokens
========================================================

What:  Thin wrappers around passlib (bcrypt) and PyJWT (HS256).
Why:   One place owns the hashing scheme, cost factor, signing secret and
       token lifetime; services and dependencies never touch the libraries.

Token payload:
    {"id": "<user uuid>", "role": "admin" | "customer", "iat": ..., "exp": ...}
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from passlib.context import CryptContext

from catalog_api.config import settings
from catalog_api.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    """Hash a plaintext password with a fresh salt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Check a plaintext password against a stored hash.

    A stored value that is not a recognised hash (e.g. a row written by
    hand) counts as a mismatch rather than a server error.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored password is not a recognised hash")
        return False


def create_access_token(user_id: str, role: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.access_token_expire_minutes),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry, returning the decoded claims.

    Raises:
        AuthenticationError: bad signature, expired, or malformed token
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        raise AuthenticationError("Unauthorized: Invalid token", context={"reason": "expired"})
    except jwt.PyJWTError as e:
        logger.info("Rejected invalid token: %s", type(e).__name__)
        raise AuthenticationError("Unauthorized: Invalid token", context={"reason": type(e).__name__})
