"""
Product Catalog API: Product Schemas
=====================================

What:  Request/response contracts for /products, its filters and reports.

Validation Rules:
    - price / salePrice: rounded to 2 decimals, then strictly positive
    - discountPercentage: 0-100, rounded to 2 decimals
    - stock / variant quantity: non-negative integers
    - image: absolute URI
    - category: category name or identifier (1-100 chars); not checked
      against the categories table
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import AnyUrl, BaseModel, Field, field_serializer, field_validator

from catalog_api.schemas.common import CamelModel


class Variant(CamelModel):
    size: str = Field(..., min_length=1, max_length=50)
    color: str = Field(..., min_length=1, max_length=50)
    quantity: int = Field(..., ge=0)


def _round_money(v: Any) -> Any:
    """
    Round numeric input to cents before the field bounds are checked, so
    `gt=0` applies to the stored value (0.001 is rejected, not stored as 0).
    Anything non-numeric is left for the field's own type validation.
    """
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        try:
            v = float(v)
        except ValueError:
            return v
    if isinstance(v, (int, float)):
        return round(v, 2)
    return v


class ProductCreate(CamelModel):
    """POST /products/ payload."""

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    category: str = Field(..., min_length=1, max_length=100)
    price: float = Field(..., gt=0)
    sale_price: Optional[float] = Field(default=None, gt=0)
    discount_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    stock: int = Field(default=0, ge=0)
    image: Optional[AnyUrl] = None
    variants: List[Variant] = Field(default_factory=list)

    @field_validator("price", "sale_price", "discount_percentage", mode="before")
    @classmethod
    def round_prices(cls, v: Any) -> Any:
        return _round_money(v)

    @field_serializer("image")
    def serialize_image(self, v: Optional[AnyUrl]) -> Optional[str]:
        return str(v) if v is not None else None


class ProductUpdate(CamelModel):
    """
    PUT /products/{id} payload. Every field is optional, but a field that
    is present must be valid; explicit nulls are rejected for columns that
    cannot be empty.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    price: Optional[float] = Field(default=None, gt=0)
    sale_price: Optional[float] = Field(default=None, gt=0)
    discount_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    stock: Optional[int] = Field(default=None, ge=0)
    image: Optional[AnyUrl] = None
    variants: Optional[List[Variant]] = None

    @field_validator("price", "sale_price", "discount_percentage", mode="before")
    @classmethod
    def round_prices(cls, v: Any) -> Any:
        return _round_money(v)

    @field_validator("name", "category", "price", "stock", "variants")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    @field_serializer("image")
    def serialize_image(self, v: Optional[AnyUrl]) -> Optional[str]:
        return str(v) if v is not None else None


class ProductResponse(CamelModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    category: str
    price: float
    sale_price: Optional[float] = None
    discount_percentage: Optional[float] = None
    stock: int
    image: Optional[str] = None
    variants: List[Variant] = Field(default_factory=list)
    on_sale: bool
    created_at: datetime
    updated_at: datetime


class ProductQuery(BaseModel):
    """
    Parsed GET /products/ filters.

    Built by the route from already-validated query parameters, so it
    carries no constraints of its own. Cross-field checks (minPrice vs
    maxPrice) live in ProductService.
    """

    search: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    on_sale: Optional[bool] = None
    color: Optional[str] = None
    size: Optional[str] = None
    created_after: Optional[datetime] = None
    created_before: Optional[datetime] = None


class InventorySummary(CamelModel):
    """Body of GET /products/reports/inventory."""

    total_products: int
    total_stock: int
    total_inventory_value: float = Field(description="Sum of price x stock over all products")
    on_sale_count: int
    out_of_stock_count: int
    products_per_category: Dict[str, int]
