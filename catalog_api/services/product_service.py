"""
Product Catalog API: Product Service
=====================================

What:  Product CRUD, filtered listing and inventory reports.
Who:   Called by the /products route handlers.

Filtering (GET /products/):
    search          → case-insensitive substring of the product name
    categories      → category reference is one of the given values
    minPrice/maxPrice → inclusive price range
    onSale          → has a sale price or a non-zero discount (or neither)
    color/size      → at least one variant matches (case-insensitive)
    createdAfter/createdBefore → inclusive creation-date range

    Every filter except color/size becomes a WHERE clause. Variants are a
    JSON document column whose query syntax differs between PostgreSQL and
    SQLite, so variant matching runs on the fetched rows.

Timestamps:
    Stored in UTC. Naive filter datetimes are read as UTC; aware ones are
    converted, so range filters compare like with like on every backend.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.exceptions import DatabaseError, NotFoundError, ValidationError
from catalog_api.models.product import Product
from catalog_api.schemas.product import (
    InventorySummary,
    ProductCreate,
    ProductQuery,
    ProductUpdate,
)
from catalog_api.services.base import parse_identifier

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _on_sale_clause():
    return or_(
        Product.sale_price.is_not(None),
        and_(Product.discount_percentage.is_not(None), Product.discount_percentage > 0),
    )


def _variant_matches(
    variants: List[Dict[str, Any]], color: Optional[str], size: Optional[str]
) -> bool:
    """True if a single variant satisfies both the color and the size filter."""
    for variant in variants or []:
        if color and str(variant.get("color", "")).lower() != color.lower():
            continue
        if size and str(variant.get("size", "")).lower() != size.lower():
            continue
        return True
    return False


class ProductService:
    """
    Business logic for catalog products.

    Error Handling Strategy:
        Missing ids → NotFoundError; contradictory filters → ValidationError;
        SQLAlchemy failures → DatabaseError with the driver message in context.
    """

    async def create_product(self, db: AsyncSession, data: ProductCreate) -> Product:
        product = Product(**data.model_dump())
        try:
            db.add(product)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating product: %s", str(e), exc_info=True)
            raise DatabaseError(context={"original_error": str(e)})
        logger.info("Created product %s (%s)", product.id, product.name)
        return product

    async def get_product(self, db: AsyncSession, product_id: str) -> Product:
        pid = parse_identifier(product_id, "Product")
        try:
            product = await db.get(Product, pid)
        except SQLAlchemyError as e:
            logger.error("Database error fetching product %s: %s", product_id, str(e))
            raise DatabaseError(context={"original_error": str(e)})
        if product is None:
            raise NotFoundError(resource="Product", resource_id=str(product_id))
        return product

    async def list_products(self, db: AsyncSession, filters: ProductQuery) -> List[Product]:
        """
        Return products matching every supplied filter, newest first.

        Raises:
            ValidationError: minPrice greater than maxPrice, or
                createdAfter later than createdBefore
        """
        if (
            filters.min_price is not None
            and filters.max_price is not None
            and filters.min_price > filters.max_price
        ):
            raise ValidationError(
                message="Query validation failed",
                field="minPrice",
                details="minPrice must be less than or equal to maxPrice",
            )

        created_after = _as_utc(filters.created_after) if filters.created_after else None
        created_before = _as_utc(filters.created_before) if filters.created_before else None
        if created_after and created_before and created_after > created_before:
            raise ValidationError(
                message="Query validation failed",
                field="createdAfter",
                details="createdAfter must be earlier than or equal to createdBefore",
            )

        query = select(Product)
        if filters.search:
            query = query.where(Product.name.icontains(filters.search, autoescape=True))
        if filters.categories:
            query = query.where(Product.category.in_(filters.categories))
        if filters.min_price is not None:
            query = query.where(Product.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.where(Product.price <= filters.max_price)
        if filters.on_sale is True:
            query = query.where(_on_sale_clause())
        elif filters.on_sale is False:
            query = query.where(~_on_sale_clause())
        if created_after:
            query = query.where(Product.created_at >= created_after)
        if created_before:
            query = query.where(Product.created_at <= created_before)
        query = query.order_by(Product.created_at.desc())

        try:
            result = await db.execute(query)
            products = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing products: %s", str(e), exc_info=True)
            raise DatabaseError(context={"original_error": str(e)})

        if filters.color or filters.size:
            products = [
                p for p in products if _variant_matches(p.variants, filters.color, filters.size)
            ]
        return products

    async def update_product(
        self, db: AsyncSession, product_id: str, data: ProductUpdate
    ) -> Product:
        product = await self.get_product(db, product_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(product, field, value)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating product %s: %s", product_id, str(e))
            raise DatabaseError(context={"original_error": str(e)})
        logger.info("Updated product %s", product.id)
        return product

    async def delete_product(self, db: AsyncSession, product_id: str) -> None:
        product = await self.get_product(db, product_id)
        try:
            await db.delete(product)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting product %s: %s", product_id, str(e))
            raise DatabaseError(context={"original_error": str(e)})
        logger.info("Deleted product %s", product_id)

    # ── Reports ───────────────────────────────────────────────────────────

    async def low_stock_report(self, db: AsyncSession, threshold: int = 10) -> List[Product]:
        """Products with fewer than `threshold` units in stock, lowest stock first."""
        query = (
            select(Product)
            .where(Product.stock < threshold)
            .order_by(Product.stock.asc(), Product.name.asc())
        )
        try:
            result = await db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error building low-stock report: %s", str(e), exc_info=True)
            raise DatabaseError(context={"original_error": str(e)})

    async def inventory_summary(self, db: AsyncSession) -> InventorySummary:
        """
        Aggregate stock figures across the whole catalog.

        Two queries: one row of totals, one row per category.
        """
        totals_query = select(
            func.count(Product.id),
            func.coalesce(func.sum(Product.stock), 0),
            func.coalesce(func.sum(Product.price * Product.stock), 0.0),
            func.count(Product.id).filter(_on_sale_clause()),
            func.count(Product.id).filter(Product.stock == 0),
        )
        per_category_query = (
            select(Product.category, func.count(Product.id))
            .group_by(Product.category)
            .order_by(Product.category)
        )
        try:
            totals = (await db.execute(totals_query)).one()
            per_category = (await db.execute(per_category_query)).all()
        except SQLAlchemyError as e:
            logger.error("Database error building inventory summary: %s", str(e), exc_info=True)
            raise DatabaseError(context={"original_error": str(e)})

        total_products, total_stock, total_value, on_sale_count, out_of_stock = totals
        return InventorySummary(
            total_products=total_products,
            total_stock=int(total_stock),
            total_inventory_value=round(float(total_value), 2),
            on_sale_count=on_sale_count,
            out_of_stock_count=out_of_stock,
            products_per_category={category: count for category, count in per_category},
        )


product_service = ProductService()
