"""
Product Catalog API: Shared Pydantic Schemas
=============================================

What:  Base model and response shapes reused by every resource.
Why:   The JSON contract uses camelCase (salePrice, createdAt) while the
       Python side uses snake_case. CamelModel does the translation once.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for request/response schemas.

    - alias_generator: fields are read and written in camelCase
    - populate_by_name: services may still build instances with snake_case
    - from_attributes: response schemas validate straight from ORM objects
    - unknown request fields are ignored (stripped), Pydantic's default
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    """Confirmation body for deletes and password changes."""

    message: str = Field(description="Human-readable confirmation")


class ErrorResponse(BaseModel):
    """
    Error body returned by every exception handler.

    Example:
        {"error": "Validation failed", "details": "username: Field required, email: Field required"}
    """

    error: str = Field(description="Human-readable error message")
    details: Optional[str] = Field(
        default=None,
        description="Every validation problem, joined with ', '",
    )


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
