"""
Product Catalog API: Auth Endpoint Tests
=========================================

What we test:
    ✅ Registration returns 201 with the user and never the password
    ✅ The stored password is a bcrypt hash of the submitted plaintext
    ✅ Missing or invalid fields produce one 400 listing every problem
    ✅ Duplicate username or email is a 400, not a silent success
    ✅ Login issues a token; wrong credentials are 401 without leaking which part
"""

import pytest
from sqlalchemy import select

from catalog_api.database import async_session_factory
from catalog_api.models.user import User
from catalog_api.security import verify_password


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_returns_user_without_password(self, test_client):
        response = await test_client.post(
            "/auth/register",
            json={"username": "al", "email": "a@x.com", "password": "secret1"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["username"] == "al"
        assert body["email"] == "a@x.com"
        assert body["role"] == "customer"
        assert "password" not in body
        assert "id" in body and "createdAt" in body

    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, test_client):
        await test_client.post(
            "/auth/register",
            json={"username": "al", "email": "a@x.com", "password": "secret1"},
        )
        async with async_session_factory() as session:
            user = (await session.execute(select(User).where(User.email == "a@x.com"))).scalar_one()
        assert user.password != "secret1"
        assert verify_password("secret1", user.password)
        assert not verify_password("secret2", user.password)

    @pytest.mark.asyncio
    async def test_admin_role_can_be_requested(self, test_client):
        response = await test_client.post(
            "/auth/register",
            json={"username": "boss", "email": "boss@x.com", "password": "secret1", "role": "admin"},
        )
        assert response.status_code == 201
        assert response.json()["role"] == "admin"

    @pytest.mark.asyncio
    async def test_missing_fields_are_all_reported(self, test_client):
        response = await test_client.post("/auth/register", json={})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        for field in ("username", "email", "password"):
            assert field in body["details"]

    @pytest.mark.asyncio
    async def test_invalid_fields_are_all_reported(self, test_client):
        response = await test_client.post(
            "/auth/register",
            json={"username": "al", "email": "not-an-email", "password": "123", "role": "owner"},
        )
        assert response.status_code == 400
        details = response.json()["details"]
        assert "email:" in details
        assert "password:" in details
        assert "role:" in details
        assert details.count(", ") >= 2

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, test_client):
        payload = {"username": "al", "email": "a@x.com", "password": "secret1"}
        assert (await test_client.post("/auth/register", json=payload)).status_code == 201

        payload["username"] = "al2"
        response = await test_client.post("/auth/register", json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == "A user with this email already exists"

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected(self, test_client):
        payload = {"username": "al", "email": "a@x.com", "password": "secret1"}
        assert (await test_client.post("/auth/register", json=payload)).status_code == 201

        payload["email"] = "other@x.com"
        response = await test_client.post("/auth/register", json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == "A user with this username already exists"


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_returns_token(self, test_client):
        await test_client.post(
            "/auth/register",
            json={"username": "al", "email": "a@x.com", "password": "secret1"},
        )
        response = await test_client.post(
            "/auth/login", json={"email": "a@x.com", "password": "secret1"}
        )
        assert response.status_code == 200
        token = response.json()["token"]
        assert isinstance(token, str) and token.count(".") == 2

    @pytest.mark.asyncio
    async def test_wrong_password_is_401(self, test_client):
        await test_client.post(
            "/auth/register",
            json={"username": "al", "email": "a@x.com", "password": "secret1"},
        )
        response = await test_client.post(
            "/auth/login", json={"email": "a@x.com", "password": "wrong-password"}
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    @pytest.mark.asyncio
    async def test_unknown_email_is_401(self, test_client):
        response = await test_client.post(
            "/auth/login", json={"email": "nobody@x.com", "password": "secret1"}
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    @pytest.mark.asyncio
    async def test_missing_login_fields_is_400(self, test_client):
        response = await test_client.post("/auth/login", json={})
        assert response.status_code == 400
        details = response.json()["details"]
        assert "email" in details and "password" in details
