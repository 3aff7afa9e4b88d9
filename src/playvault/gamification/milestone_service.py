"""Milestone provisioning and progress tracking."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import and_, case, select, true, update
from sqlalchemy.ext.asyncio import AsyncSession

from playvault.db.models import Milestone

logger = logging.getLogger(__name__)

# type -> (target, xp_reward). xp_reward is display-only; milestones do not grant XP.
DEFAULT_MILESTONES: dict[str, tuple[int, int]] = {
    "surveys": (10, 500),
    "games": (5, 750),
    "referrals": (3, 1000),
}


async def provision_milestones(db: AsyncSession, user_id: str) -> list[Milestone]:
    """Create the default milestone rows for a new user."""
    rows = [
        Milestone(user_id=user_id, type=milestone_type, target=target, xp_reward=xp_reward)
        for milestone_type, (target, xp_reward) in DEFAULT_MILESTONES.items()
    ]
    db.add_all(rows)
    await db.flush()
    return rows


async def advance_milestone(
    db: AsyncSession,
    user_id: str,
    milestone_type: str,
    delta: int = 1,
    now: datetime | None = None,
) -> bool:
    """Add ``delta`` to a milestone's progress in one statement.

    ``completed`` flips to true the first time ``current`` reaches ``target``;
    ``completed_at`` is stamped only on that transition. Returns False when
    the user has no milestone of this type.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    reached = Milestone.current + delta >= Milestone.target
    stmt = (
        update(Milestone)
        .where(Milestone.user_id == user_id, Milestone.type == milestone_type)
        .values(
            current=Milestone.current + delta,
            completed=case((reached, true()), else_=Milestone.completed),
            completed_at=case(
                (and_(reached, Milestone.completed.is_(False)), now),
                else_=Milestone.completed_at,
            ),
        )
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    if result.rowcount == 0:
        logger.debug("No %s milestone for user %s", milestone_type, user_id)
        return False
    return True


async def get_user_milestones(db: AsyncSession, user_id: str) -> list[Milestone]:
    result = await db.execute(
        select(Milestone)
        .where(Milestone.user_id == user_id)
        .order_by(Milestone.created_at.asc(), Milestone.type.asc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())
