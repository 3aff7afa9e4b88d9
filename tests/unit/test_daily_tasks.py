"""Daily task tests: one batch per UTC day, completion at most once."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from playvault.db.models import Activity, User
from playvault.errors import ValidationError
from playvault.gamification.daily_tasks import (
    DAILY_TASK_REWARDS,
    complete_daily_task,
    get_or_create_daily_tasks,
    today_key,
)

DAY = "2026-03-10"


class TestTodayKey:
    def test_utc_date(self):
        assert today_key(datetime(2026, 3, 10, 23, 59, tzinfo=timezone.utc)) == "2026-03-10"

    def test_converts_other_offsets_to_utc(self):
        """01:30 at UTC+3 is still the previous UTC day."""
        plus_three = timezone(timedelta(hours=3))
        assert today_key(datetime(2026, 3, 11, 1, 30, tzinfo=plus_three)) == "2026-03-10"


class TestGetOrCreateDailyTasks:
    @pytest.mark.asyncio
    async def test_creates_three_tasks(self, db_session: AsyncSession, make_user):
        user = await make_user()

        tasks = await get_or_create_daily_tasks(db_session, user.id, DAY)

        assert [t.task_type for t in tasks] == ["survey", "game", "referral_share"]
        assert [t.xp_reward for t in tasks] == [50, 100, 25]
        assert all(not t.completed and t.date == DAY for t in tasks)

    @pytest.mark.asyncio
    async def test_second_call_returns_same_rows(self, db_session: AsyncSession, make_user):
        user = await make_user()

        first = await get_or_create_daily_tasks(db_session, user.id, DAY)
        second = await get_or_create_daily_tasks(db_session, user.id, DAY)

        assert {t.id for t in first} == {t.id for t in second}

    @pytest.mark.asyncio
    async def test_new_day_new_batch(self, db_session: AsyncSession, make_user):
        user = await make_user()

        first = await get_or_create_daily_tasks(db_session, user.id, DAY)
        second = await get_or_create_daily_tasks(db_session, user.id, "2026-03-11")

        assert {t.id for t in first}.isdisjoint({t.id for t in second})


class TestCompleteDailyTask:
    @pytest.mark.asyncio
    async def test_completion_grants_reward(self, db_session: AsyncSession, make_user):
        user = await make_user()
        await get_or_create_daily_tasks(db_session, user.id, DAY)

        task = await complete_daily_task(db_session, user.id, "game", DAY)

        assert task is not None
        assert task.completed is True
        xp = (await db_session.execute(select(User.xp).where(User.id == user.id))).scalar_one()
        assert xp == DAILY_TASK_REWARDS["game"]

        activity = (await db_session.execute(select(Activity).where(Activity.user_id == user.id))).scalar_one()
        assert activity.type == "daily_task"
        assert activity.description == "Completed daily task: game"
        assert activity.activity_metadata == {"taskType": "game"}

    @pytest.mark.asyncio
    async def test_second_completion_is_noop(self, db_session: AsyncSession, make_user):
        user = await make_user()
        await get_or_create_daily_tasks(db_session, user.id, DAY)

        await complete_daily_task(db_session, user.id, "survey", DAY)
        again = await complete_daily_task(db_session, user.id, "survey", DAY)

        assert again is None
        xp = (await db_session.execute(select(User.xp).where(User.id == user.id))).scalar_one()
        assert xp == 50

    @pytest.mark.asyncio
    async def test_missing_tasks_is_noop(self, db_session: AsyncSession, make_user):
        user = await make_user()

        assert await complete_daily_task(db_session, user.id, "survey", DAY) is None

    @pytest.mark.asyncio
    async def test_unknown_task_type(self, db_session: AsyncSession, make_user):
        user = await make_user()

        with pytest.raises(ValidationError):
            await complete_daily_task(db_session, user.id, "dance", DAY)
