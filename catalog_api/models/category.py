"""
Product Catalog API: Category SQLAlchemy Model
===============================================

What:  ORM model representing the `categories` table.
Who:   Used by CategoryService; created, updated and deleted by admins only.

Products reference categories loosely (by name or id string), so there is
no foreign key from `products` to this table.
"""

import uuid

from sqlalchemy import String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from catalog_api.database import Base


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"
