"""
Product Catalog API: User Service
==================================

What:  Registration, login, user listing and password changes.
Who:   Called by the /auth and /users route handlers.

Password Invariant:
    The `password` column only ever receives the output of hash_password().
    Both write paths (register, change_password) hash explicitly and then
    persist, as two visible steps:

        user.password = hash_password(plain)   # 1. hash
        await db.flush()                        # 2. persist

Error Handling Strategy:
    Unique violations → ValidationError (400); wrong credentials →
    AuthenticationError (401); any other SQLAlchemy failure → DatabaseError.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.exceptions import (
    AuthenticationError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from catalog_api.models.user import User
from catalog_api.schemas.user import UserCreate
from catalog_api.security import create_access_token, hash_password, verify_password
from catalog_api.services.base import duplicate_field, parse_identifier

logger = logging.getLogger(__name__)


class UserService:
    """Business logic for user accounts. Stateless; see `user_service`."""

    async def register(self, db: AsyncSession, data: UserCreate) -> User:
        """
        Create a user account.

        Raises:
            ValidationError: username or email already taken
            DatabaseError: store failure
        """
        user = User(
            username=data.username,
            email=data.email,
            password=hash_password(data.password),
            role=data.role.value,
        )
        try:
            db.add(user)
            await db.flush()
        except IntegrityError as e:
            field = duplicate_field(e, ("username", "email"))
            logger.info("Registration rejected: duplicate %s", field or "value")
            if field:
                raise ValidationError(
                    message=f"A user with this {field} already exists", field=field
                )
            raise ValidationError(message="A user with this username or email already exists")
        except SQLAlchemyError as e:
            logger.error("Database error registering user: %s", str(e), exc_info=True)
            raise DatabaseError(context={"original_error": str(e)})

        logger.info("Registered user %s (role=%s)", user.id, user.role)
        return user

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> str:
        """
        Check credentials and issue a bearer token.

        Unknown email and wrong password produce the same error so the
        response does not reveal which accounts exist.
        """
        try:
            result = await db.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise DatabaseError(context={"original_error": str(e)})

        if user is None or not verify_password(password, user.password):
            logger.warning("Failed login attempt for %s", email)
            raise AuthenticationError("Invalid credentials")

        logger.info("User %s logged in", user.id)
        return create_access_token(str(user.id), user.role)

    async def list_users(self, db: AsyncSession) -> List[User]:
        try:
            result = await db.execute(select(User).order_by(User.created_at))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise DatabaseError(context={"original_error": str(e)})

    async def get_user(self, db: AsyncSession, user_id: str) -> User:
        uid = parse_identifier(user_id, "User")
        try:
            user = await db.get(User, uid)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(context={"original_error": str(e)})
        if user is None:
            raise NotFoundError(resource="User", resource_id=str(user_id))
        return user

    async def change_password(
        self,
        db: AsyncSession,
        user_id: str,
        current_password: str,
        new_password: str,
    ) -> None:
        """
        Replace a user's password after re-checking the current one.

        Raises:
            NotFoundError: the token refers to a deleted user
            AuthenticationError: current password is wrong
        """
        user = await self.get_user(db, user_id)
        if not verify_password(current_password, user.password):
            logger.warning("Password change rejected for %s: wrong current password", user.id)
            raise AuthenticationError("Invalid credentials")

        user.password = hash_password(new_password)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error changing password for %s: %s", user.id, str(e))
            raise DatabaseError(context={"original_error": str(e)})
        logger.info("Password changed for user %s", user.id)


user_service = UserService()
