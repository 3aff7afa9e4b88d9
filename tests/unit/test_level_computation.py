"""Level computation tests: thresholds at level * 2000, one level per grant."""

from __future__ import annotations

import pytest
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from playvault.db.models import User
from playvault.gamification.level_thresholds import (
    LEVEL_XP_STEP,
    level_after_grant,
    level_after_grant_expr,
    level_progress,
    level_threshold,
)

# (level, xp before, grant)
GRANT_CASES = [
    (1, 0, 1),
    (1, 1999, 1),
    (1, 0, 5000),
    (2, 5000, 1),
    (2, 3998, 1),
    (3, 0, 20000),
]


class TestLevelThreshold:
    def test_step_is_2000(self):
        assert LEVEL_XP_STEP == 2000

    def test_threshold_scales_with_level(self):
        assert level_threshold(1) == 2000
        assert level_threshold(2) == 4000
        assert level_threshold(10) == 20000


class TestLevelAfterGrant:
    def test_below_threshold_stays(self):
        assert level_after_grant(1, 1999) == 1

    def test_exact_threshold_levels_up(self):
        """1999 + 1 lands exactly on 2000: level 2."""
        assert level_after_grant(1, 2000) == 2

    def test_large_grant_advances_one_level_only(self):
        """0 + 5000 crosses two thresholds but only one level is applied."""
        assert level_after_grant(1, 5000) == 2

    def test_next_grant_rechecks_against_new_level(self):
        assert level_after_grant(2, 5001) == 3

    def test_level_two_needs_4000(self):
        assert level_after_grant(2, 3999) == 2
        assert level_after_grant(2, 4000) == 3


class TestLevelAfterGrantExpr:
    """The SQL expression used by grants agrees with the Python rule."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("level", "xp", "amount"), GRANT_CASES)
    async def test_sql_matches_python(self, db_session: AsyncSession, make_user, level, xp, amount):
        user = await make_user(xp=xp, level=level)

        await db_session.execute(
            update(User)
            .where(User.id == user.id)
            .values(xp=User.xp + amount, level=level_after_grant_expr(amount))
        )
        row = (await db_session.execute(select(User.xp, User.level).where(User.id == user.id))).one()

        assert row.xp == xp + amount
        assert row.level == level_after_grant(level, xp + amount)


class TestLevelProgress:
    def test_progress_fields(self):
        progress = level_progress(1500, 1)
        assert progress == {"level": 1, "next_level_xp": 2000, "xp_to_next_level": 500}

    def test_never_negative(self):
        """A user past the threshold who has not been re-checked yet."""
        assert level_progress(5000, 2)["xp_to_next_level"] == 0
