"""
Product Catalog API: Service Helpers
=====================================

Small helpers shared by the resource services: identifier parsing and
unique-constraint error translation.
"""

import uuid
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError

from catalog_api.exceptions import NotFoundError


def parse_identifier(value: str, resource: str) -> uuid.UUID:
    """
    Convert a path identifier to a UUID.

    A malformed identifier cannot match any row, so it is reported the
    same way as a missing one.
    """
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFoundError(resource=resource, resource_id=str(value))


def duplicate_field(exc: IntegrityError, candidates: Iterable[str]) -> Optional[str]:
    """
    Name the column behind a unique-constraint violation, if recognisable.

    PostgreSQL reports 'duplicate key value violates unique constraint
    "users_email_key"'; SQLite reports 'UNIQUE constraint failed: users.email'.
    Both mention the column name.
    """
    text = str(exc.orig if exc.orig is not None else exc).lower()
    if "unique" not in text and "duplicate" not in text:
        return None
    for field in candidates:
        if field in text:
            return field
    return None
