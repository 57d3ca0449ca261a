"""
Product Catalog API: Category Schemas
======================================
"""

import uuid
from typing import Optional

from pydantic import Field, field_validator

from catalog_api.schemas.common import CamelModel


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100, description="Unique category name")
    description: Optional[str] = Field(default=None, max_length=500)


class CategoryUpdate(CamelModel):
    """Partial update: only the fields present in the body are written."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> str:
        # Omitted fields never reach this validator; an explicit null does
        if v is None:
            raise ValueError("name may not be null")
        return v


class CategoryResponse(CamelModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
