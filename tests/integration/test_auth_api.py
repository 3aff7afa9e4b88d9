"""Authentication tests: bearer tokens, first-login provisioning, expiry."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from httpx import AsyncClient

from playvault.config import get_settings


def _expired_token(user_id: str) -> str:
    settings = get_settings()
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    payload = {"sub": user_id, "iat": past, "exp": past + timedelta(minutes=5), "iss": settings.jwt_issuer}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


class TestAuthUser:
    @pytest.mark.asyncio
    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/auth/user")
        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized", "code": "unauthorized"}

    @pytest.mark.asyncio
    async def test_bad_signature(self, client: AsyncClient):
        token = jwt.encode({"sub": "x", "exp": 9999999999, "iss": "playvault-identity"}, "a-different-secret-that-is-long-enough-too")
        response = await client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["code"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_expired_token_is_distinct(self, client: AsyncClient):
        response = await client.get(
            "/api/auth/user", headers={"Authorization": f"Bearer {_expired_token('player-1')}"}
        )
        assert response.status_code == 401
        assert response.json()["code"] == "session_expired"

    @pytest.mark.asyncio
    async def test_first_request_creates_user(self, authed_client: AsyncClient):
        response = await authed_client.get("/api/auth/user")
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "player-1"
        assert data["email"] == "player1@example.com"
        assert data["firstName"] == "Ada"
        assert data["xp"] == 0
        assert data["level"] == 1
        assert data["streak"] == 0
        assert data["nextLevelXp"] == 2000
        assert data["referralCode"] is None

    @pytest.mark.asyncio
    async def test_later_login_refreshes_profile(self, client: AsyncClient, headers_for):
        await client.get("/api/auth/user", headers=headers_for("player-2", first_name="Old"))
        response = await client.get("/api/auth/user", headers=headers_for("player-2", first_name="New"))
        assert response.json()["firstName"] == "New"
