"""Milestone tests: monotone completion, completed_at stamped once."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from playvault.gamification.milestone_service import (
    DEFAULT_MILESTONES,
    advance_milestone,
    get_user_milestones,
)

T0 = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


async def _milestone(db: AsyncSession, user_id: str, milestone_type: str):
    milestones = await get_user_milestones(db, user_id)
    return next(m for m in milestones if m.type == milestone_type)


class TestMilestones:
    @pytest.mark.asyncio
    async def test_new_user_has_default_milestones(self, db_session: AsyncSession, make_user):
        user = await make_user()

        milestones = await get_user_milestones(db_session, user.id)

        assert {m.type: (m.target, m.xp_reward) for m in milestones} == DEFAULT_MILESTONES
        assert all(m.current == 0 and not m.completed for m in milestones)

    @pytest.mark.asyncio
    async def test_reaching_target_completes(self, db_session: AsyncSession, make_user):
        user = await make_user()

        for _ in range(4):
            await advance_milestone(db_session, user.id, "games", now=T0)
        m = await _milestone(db_session, user.id, "games")
        assert m.current == 4
        assert m.completed is False
        assert m.completed_at is None

        await advance_milestone(db_session, user.id, "games", now=T0)
        m = await _milestone(db_session, user.id, "games")
        assert m.current == 5
        assert m.completed is True
        assert m.completed_at is not None

    @pytest.mark.asyncio
    async def test_completed_at_unchanged_after_completion(self, db_session: AsyncSession, make_user):
        user = await make_user()

        await advance_milestone(db_session, user.id, "referrals", delta=3, now=T0)
        first = (await _milestone(db_session, user.id, "referrals")).completed_at

        await advance_milestone(db_session, user.id, "referrals", now=T0 + timedelta(days=1))
        m = await _milestone(db_session, user.id, "referrals")

        assert m.current == 4
        assert m.completed is True
        assert m.completed_at == first

    @pytest.mark.asyncio
    async def test_missing_milestone_returns_false(self, db_session: AsyncSession, make_user):
        user = await make_user()

        assert await advance_milestone(db_session, user.id, "quizzes") is False
