"""Signup, login and current-user endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from tests.conftest import TEST_PASSWORD, make_user
from wordgame.auth.service import authenticate_user, register_user
from wordgame.errors import Conflict, InvalidInput

SIGNUP = {
    "email": "Meena@Example.com",
    "password": "Tamil2024",
    "fullName": "Meena",
}


@pytest.mark.asyncio
class TestSignup:
    """POST /api/auth/signup"""

    async def test_creates_student_at_level_one(self, client: AsyncClient):
        response = await client.post("/api/auth/signup", json=SIGNUP)
        assert response.status_code == 201
        data = response.json()
        assert data["token"]
        assert data["token_type"] == "bearer"
        user = data["user"]
        assert user["email"] == "meena@example.com"
        assert user["fullName"] == "Meena"
        assert user["role"] == "student"
        assert user["points"] == 0
        assert user["level"] == 1
        assert "password_hash" not in user

    async def test_teacher_signup(self, client: AsyncClient):
        response = await client.post("/api/auth/signup", json={**SIGNUP, "role": "teacher"})
        assert response.status_code == 201
        assert response.json()["user"]["role"] == "teacher"

    async def test_admin_cannot_self_register(self, client: AsyncClient):
        response = await client.post("/api/auth/signup", json={**SIGNUP, "role": "admin"})
        assert response.status_code == 400

    async def test_duplicate_email_conflicts(self, client: AsyncClient):
        await client.post("/api/auth/signup", json=SIGNUP)
        response = await client.post("/api/auth/signup", json={**SIGNUP, "email": "meena@example.com"})
        assert response.status_code == 409
        assert response.json()["detail"] == "User already exists"

    async def test_weak_password(self, client: AsyncClient):
        response = await client.post("/api/auth/signup", json={**SIGNUP, "password": "short"})
        assert response.status_code == 400

    async def test_missing_name(self, client: AsyncClient):
        body = {k: v for k, v in SIGNUP.items() if k != "fullName"}
        response = await client.post("/api/auth/signup", json=body)
        assert response.status_code == 422


@pytest.mark.asyncio
class TestLogin:
    """POST /api/auth/login and GET /api/auth/me"""

    async def test_login_then_me(self, client: AsyncClient):
        await client.post("/api/auth/signup", json=SIGNUP)

        response = await client.post(
            "/api/auth/login", json={"email": "meena@example.com", "password": "Tamil2024"},
        )
        assert response.status_code == 200
        token = response.json()["token"]

        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["fullName"] == "Meena"

    async def test_wrong_password(self, client: AsyncClient):
        await client.post("/api/auth/signup", json=SIGNUP)
        response = await client.post(
            "/api/auth/login", json={"email": "meena@example.com", "password": "Tamil2025"},
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    async def test_unknown_email(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/login", json={"email": "nobody@example.com", "password": "Tamil2024"},
        )
        assert response.status_code == 401

    async def test_me_requires_token(self, client: AsyncClient):
        response = await client.get("/api/auth/me")
        assert response.status_code == 401

    async def test_me_rejects_garbage_token(self, client: AsyncClient):
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer nonsense"})
        assert response.status_code == 401


class TestAuthService:

    @pytest.mark.asyncio
    async def test_register_and_authenticate(self, db_session: AsyncSession):
        user = await register_user(db_session, "Selvi@Example.com ", "Kolam2024", "Selvi")
        await db_session.commit()

        assert user.email == "selvi@example.com"
        assert await authenticate_user(db_session, "SELVI@example.com", "Kolam2024") is not None
        assert await authenticate_user(db_session, "selvi@example.com", "wrong123") is None

    @pytest.mark.asyncio
    async def test_duplicate_email(self, db_session: AsyncSession):
        await make_user(db_session, "selvi@example.com")
        with pytest.raises(Conflict):
            await register_user(db_session, "selvi@example.com", TEST_PASSWORD, "Selvi")

    @pytest.mark.asyncio
    async def test_blank_name(self, db_session: AsyncSession):
        with pytest.raises(InvalidInput):
            await register_user(db_session, "selvi@example.com", TEST_PASSWORD, "   ")
