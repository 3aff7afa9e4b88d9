"""Integration tests for XP, streak, activity, leaderboard, daily task and milestone endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

PUBLIC_FIELDS = {"id", "firstName", "lastName", "xp", "level", "profileImageUrl"}


class TestAddXP:
    @pytest.mark.asyncio
    async def test_add_xp(self, authed_client: AsyncClient):
        response = await authed_client.post(
            "/api/xp/add",
            json={"xpGained": 150, "type": "survey", "description": "Completed survey", "metadata": {"surveyId": "s1"}},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["xpGained"] == 150
        assert data["user"]["xp"] == 150
        assert data["user"]["level"] == 1

    @pytest.mark.asyncio
    async def test_level_up_at_threshold(self, authed_client: AsyncClient):
        await authed_client.post("/api/xp/add", json={"xpGained": 1999, "type": "game", "description": "a"})
        response = await authed_client.post("/api/xp/add", json={"xpGained": 1, "type": "game", "description": "b"})
        user = response.json()["user"]
        assert user["xp"] == 2000
        assert user["level"] == 2
        assert user["nextLevelXp"] == 4000

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -10])
    async def test_non_positive_amount_is_400(self, authed_client: AsyncClient, amount: int):
        response = await authed_client.post("/api/xp/add", json={"xpGained": amount, "type": "survey"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid XP amount"

        me = await authed_client.get("/api/auth/user")
        assert me.json()["xp"] == 0

    @pytest.mark.asyncio
    async def test_amount_past_column_range_is_400(self, authed_client: AsyncClient):
        response = await authed_client.post("/api/xp/add", json={"xpGained": 2**64, "type": "survey"})
        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

        me = await authed_client.get("/api/auth/user")
        assert me.json()["xp"] == 0

    @pytest.mark.asyncio
    async def test_malformed_body_is_400(self, authed_client: AsyncClient):
        response = await authed_client.post("/api/xp/add", json={"xpGained": "lots"})
        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    @pytest.mark.asyncio
    async def test_requires_auth(self, client: AsyncClient):
        response = await client.post("/api/xp/add", json={"xpGained": 10, "type": "survey"})
        assert response.status_code == 401


class TestActivities:
    @pytest.mark.asyncio
    async def test_newest_first_with_limit(self, authed_client: AsyncClient):
        for amount in (10, 20, 30):
            await authed_client.post("/api/xp/add", json={"xpGained": amount, "type": "survey", "description": "s"})

        response = await authed_client.get("/api/activities", params={"limit": 2})
        assert response.status_code == 200
        data = response.json()
        assert [a["xpGained"] for a in data] == [30, 20]
        assert data[0]["type"] == "survey"
        assert data[0]["metadata"] == {}

    @pytest.mark.asyncio
    async def test_limit_out_of_range(self, authed_client: AsyncClient):
        response = await authed_client.get("/api/activities", params={"limit": 0})
        assert response.status_code == 400


class TestStreak:
    @pytest.mark.asyncio
    async def test_first_update_increments_then_noop(self, authed_client: AsyncClient):
        first = await authed_client.post("/api/streak/update")
        assert first.status_code == 200
        assert first.json()["incremented"] is True
        assert first.json()["user"]["streak"] == 1

        second = await authed_client.post("/api/streak/update")
        assert second.json()["incremented"] is False
        assert second.json()["user"]["streak"] == 1


class TestLeaderboard:
    @pytest.mark.asyncio
    async def test_public_fields_only(self, client: AsyncClient, make_user):
        await make_user(xp=500, email="secret@example.com", referral_code="abcd1234wxyz", first_name="Top")
        await make_user(xp=100, email="other@example.com", referred_by="someone")

        response = await client.get("/api/leaderboard")
        assert response.status_code == 200
        data = response.json()
        assert [u["xp"] for u in data] == [500, 100]
        for entry in data:
            assert set(entry) == PUBLIC_FIELDS

    @pytest.mark.asyncio
    async def test_limit(self, client: AsyncClient, make_user):
        for xp in (1, 2, 3):
            await make_user(xp=xp)

        response = await client.get("/api/leaderboard", params={"limit": 1})
        assert [u["xp"] for u in response.json()] == [3]


class TestDailyTasks:
    @pytest.mark.asyncio
    async def test_list_creates_todays_tasks(self, authed_client: AsyncClient):
        response = await authed_client.get("/api/daily-tasks")
        assert response.status_code == 200
        data = response.json()
        assert [t["taskType"] for t in data] == ["survey", "game", "referral_share"]

        again = await authed_client.get("/api/daily-tasks")
        assert {t["id"] for t in again.json()} == {t["id"] for t in data}

    @pytest.mark.asyncio
    async def test_complete_once(self, authed_client: AsyncClient):
        await authed_client.get("/api/daily-tasks")

        first = await authed_client.post("/api/daily-tasks/complete", json={"taskType": "game"})
        assert first.status_code == 200
        assert first.json()["task"]["completed"] is True

        second = await authed_client.post("/api/daily-tasks/complete", json={"taskType": "game"})
        assert second.status_code == 200
        assert second.json()["task"] is None

        me = await authed_client.get("/api/auth/user")
        assert me.json()["xp"] == 100

    @pytest.mark.asyncio
    async def test_invalid_task_type(self, authed_client: AsyncClient):
        response = await authed_client.post("/api/daily-tasks/complete", json={"taskType": "dance"})
        assert response.status_code == 400


class TestMilestones:
    @pytest.mark.asyncio
    async def test_milestones_track_grants(self, authed_client: AsyncClient):
        await authed_client.post("/api/xp/add", json={"xpGained": 10, "type": "game", "description": "g"})

        response = await authed_client.get("/api/milestones")
        assert response.status_code == 200
        by_type = {m["type"]: m for m in response.json()}
        assert set(by_type) == {"surveys", "games", "referrals"}
        assert by_type["games"]["current"] == 1
        assert by_type["games"]["target"] == 5
        assert by_type["surveys"]["current"] == 0
