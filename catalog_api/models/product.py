"""
Product Catalog API: Product SQLAlchemy Model
==============================================

What:  ORM model representing the `products` table.
Who:   Used by ProductService for CRUD, search/filter and inventory reports.

Table Design Rationale:
    - category: free-form reference (category name or id as a string).
      Deliberately no foreign key: the catalog accepts products for
      categories that are created later.
    - variants: JSON list of {"size", "color", "quantity"} objects. Stored
      as a document so variants never need their own table or joins.
    - created_at DESC index: the product listing is newest first and the
      createdAfter/createdBefore filters are range scans on this column.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import JSON, DateTime, Float, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from catalog_api.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    """
    A sellable catalog item.

    Lifecycle:
        1. Created by an admin (POST /products/)
        2. Updated by an admin; updated_at is refreshed on every write
        3. Deleted by an admin (hard delete)
    """

    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    price: Mapped[float] = mapped_column(Float, nullable=False)

    sale_price: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)

    discount_percentage: Mapped[float | None] = mapped_column(
        Float, nullable=True, default=None
    )

    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    image: Mapped[str | None] = mapped_column(String(2048), nullable=True, default=None)

    variants: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    __table_args__ = (
        Index("idx_products_created_at", created_at.desc()),
    )

    @property
    def on_sale(self) -> bool:
        """A product is on sale when it has a sale price or a non-zero discount."""
        return self.sale_price is not None or bool(self.discount_percentage)

    def __repr__(self) -> str:
        return (
            f"<Product(id={self.id}, name='{self.name}', "
            f"category='{self.category}', stock={self.stock})>"
        )
