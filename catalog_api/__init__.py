"""
Product Catalog API: Application Package
=========================================

What: Marks the `catalog_api` directory as a Python package.
Who:  Imported by uvicorn (`catalog_api.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │      Routes + Dependencies (HTTP)   │  ← auth, role checks, status codes
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← hashing, filtering, reports
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
