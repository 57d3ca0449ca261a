"""
Product Catalog API: User SQLAlchemy Model
===========================================

What:  ORM model representing the `users` table.
Who:   Used by UserService for registration, login and password changes.

Table Design Rationale:
    - username / email: unique constraints; the database is the sole
      arbiter of uniqueness under concurrent registrations
    - password: bcrypt hash only. Nothing in this model hashes implicitly;
      UserService calls hash_password() before every write of this column
    - role: 'admin' | 'customer', guarded by a CHECK constraint
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from catalog_api.database import Base


class Role(str, enum.Enum):
    """Coarse permission tier attached to every user."""

    ADMIN = "admin"
    CUSTOMER = "customer"


class User(Base):
    """A registered account that can obtain bearer tokens."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    # Salted bcrypt hash ($2b$...), never plaintext
    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=Role.CUSTOMER.value,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'customer')", name="ck_users_role"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
