"""
Product Catalog API: Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   The environment is pointed at a throwaway SQLite file before any
       catalog_api import, so the module-level engine and settings pick it up.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── database:        Empty schema, created and dropped around the test
    ├── test_client:     HTTPX AsyncClient on a fresh application instance
    ├── admin_token / customer_token: Bearer tokens for registered users
    ├── admin_headers / customer_headers: Authorization headers for them
    ├── make_token: factory for extra accounts
    └── sample_product_data: Valid POST /products/ body
"""

import os

# Must run BEFORE any catalog_api import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_catalog.db"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from catalog_api.database import Base, engine
from catalog_api.main import create_app

# Register every table on Base.metadata
from catalog_api.models import category, product, user  # noqa: F401


# ══════════════════════════════════════════════════════════════════════════
# Helpers
# ══════════════════════════════════════════════════════════════════════════

def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def register_and_login(
    client: AsyncClient,
    username: str,
    email: str,
    password: str = "secret123",
    role: str = "customer",
) -> str:
    """Register a user through the API and return a bearer token for it."""
    response = await client.post(
        "/auth/register",
        json={"username": username, "email": email, "password": password, "role": role},
    )
    assert response.status_code == 201, response.text
    response = await client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_category(mock_db_session):
            mock_db_session.get.return_value = None
            with pytest.raises(NotFoundError):
                await category_service.get_category(mock_db_session, str(uuid4()))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def database():
    """
    An empty schema on the test SQLite file.

    The engine is disposed afterwards so no pooled connection outlives the
    test's event loop.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(database):
    """
    Provides an async HTTP test client for endpoint testing.

    A new application per test gives every test its own rate-limit state.
    ASGITransport does not run the lifespan; the `database` fixture stands
    in for the startup work.
    """
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_token(test_client):
    """
    Factory for extra accounts: `token = await make_token("bob", "bob@x.com", role="admin")`.
    """

    async def _make(username, email, password="secret123", role="customer"):
        return await register_and_login(test_client, username, email, password, role)

    return _make


@pytest_asyncio.fixture
async def admin_token(test_client):
    return await register_and_login(test_client, "admin", "admin@example.com", role="admin")


@pytest_asyncio.fixture
async def customer_token(test_client):
    return await register_and_login(test_client, "customer", "customer@example.com")


@pytest.fixture
def sample_product_data():
    """A valid POST /products/ body in the API's camelCase."""
    return {
        "name": "Classic Tee",
        "description": "Plain cotton t-shirt",
        "category": "Apparel",
        "price": 19.99,
        "stock": 25,
        "image": "https://cdn.example.com/tee.png",
        "variants": [
            {"size": "M", "color": "Red", "quantity": 10},
            {"size": "L", "color": "Blue", "quantity": 15},
        ],
    }


@pytest.fixture
def admin_headers(admin_token):
    return auth_header(admin_token)


@pytest.fixture
def customer_headers(customer_token):
    return auth_header(customer_token)
