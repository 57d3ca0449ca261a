"""
Product Catalog API: Category Service
======================================

What:  CRUD for product categories.
Who:   Called by the /categories route handlers; writes are admin-only
       (enforced by the routes, not here).

Category names are unique. The unique constraint is the source of truth;
a violation on create or rename surfaces as a 400, never a silent success.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.exceptions import DatabaseError, NotFoundError, ValidationError
from catalog_api.models.category import Category
from catalog_api.schemas.category import CategoryCreate, CategoryUpdate
from catalog_api.services.base import parse_identifier

logger = logging.getLogger(__name__)


class CategoryService:

    async def _flush(self, db: AsyncSession, name: str) -> None:
        try:
            await db.flush()
        except IntegrityError:
            logger.info("Category name '%s' rejected: already exists", name)
            raise ValidationError(
                message=f"Category with name '{name}' already exists", field="name"
            )
        except SQLAlchemyError as e:
            logger.error("Database error writing category: %s", str(e), exc_info=True)
            raise DatabaseError(context={"original_error": str(e)})

    async def create_category(self, db: AsyncSession, data: CategoryCreate) -> Category:
        category = Category(name=data.name, description=data.description)
        db.add(category)
        await self._flush(db, data.name)
        logger.info("Created category %s (%s)", category.id, category.name)
        return category

    async def list_categories(self, db: AsyncSession) -> List[Category]:
        try:
            result = await db.execute(select(Category).order_by(Category.name))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing categories: %s", str(e), exc_info=True)
            raise DatabaseError(context={"original_error": str(e)})

    async def get_category(self, db: AsyncSession, category_id: str) -> Category:
        """
        Raises:
            NotFoundError: no category with this id (including malformed ids)
        """
        cid = parse_identifier(category_id, "Category")
        try:
            category = await db.get(Category, cid)
        except SQLAlchemyError as e:
            logger.error("Database error fetching category %s: %s", category_id, str(e))
            raise DatabaseError(context={"original_error": str(e)})
        if category is None:
            raise NotFoundError(resource="Category", resource_id=str(category_id))
        return category

    async def update_category(
        self, db: AsyncSession, category_id: str, data: CategoryUpdate
    ) -> Category:
        """Apply only the fields present in the request body."""
        category = await self.get_category(db, category_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(category, field, value)
        await self._flush(db, category.name)
        logger.info("Updated category %s", category.id)
        return category

    async def delete_category(self, db: AsyncSession, category_id: str) -> None:
        category = await self.get_category(db, category_id)
        try:
            await db.delete(category)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting category %s: %s", category_id, str(e))
            raise DatabaseError(context={"original_error": str(e)})
        logger.info("Deleted category %s", category_id)


category_service = CategoryService()
