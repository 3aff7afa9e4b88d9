"""XP grant service with level-up detection and the activity audit trail."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from playvault.db.models import Activity, User
from playvault.errors import NotFoundError, ValidationError
from playvault.gamification.level_thresholds import level_after_grant_expr
from playvault.gamification.milestone_service import advance_milestone
from playvault.users.service import get_user_by_id, reload_user

logger = logging.getLogger(__name__)

# Upper bound of the INTEGER xp column; larger grants cannot be stored.
MAX_XP_GRANT = 2**31 - 1

ACTIVITY_CATEGORIES = frozenset({"survey", "game", "referral", "daily_task"})

# Activity category -> milestone type it counts toward.
MILESTONE_FOR_CATEGORY: dict[str, str] = {
    "survey": "surveys",
    "game": "games",
    "referral": "referrals",
}


def validate_grant(amount: Any, category: Any) -> None:
    """Reject a grant before anything is written."""
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError("Invalid XP amount")
    if amount > MAX_XP_GRANT:
        raise ValidationError(f"XP amount exceeds the maximum of {MAX_XP_GRANT}")
    if category not in ACTIVITY_CATEGORIES:
        raise ValidationError(f"Invalid activity type: {category!r}")


async def grant_xp(
    db: AsyncSession,
    user_id: str,
    amount: int,
    category: str,
    description: str,
    metadata: dict[str, Any] | None = None,
) -> User:
    """Grant XP to a user and return the updated row.

    Within the caller's transaction:
    1. Increment users.xp and apply the single-step level rule in one UPDATE
    2. Append an activities row for the grant
    3. Advance the milestone matching the category, if any

    Raises ValidationError for a non-positive amount or unknown category and
    NotFoundError for an unknown user, both before any mutation.
    """
    validate_grant(amount, category)

    user = await get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    old_level = user.level

    now = datetime.now(timezone.utc)
    await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(
            xp=User.xp + amount,
            level=level_after_grant_expr(amount),
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )

    db.add(Activity(
        user_id=user_id,
        type=category,
        description=description,
        xp_gained=amount,
        activity_metadata=metadata or {},
        created_at=now,
    ))

    milestone_type = MILESTONE_FOR_CATEGORY.get(category)
    if milestone_type is not None:
        await advance_milestone(db, user_id, milestone_type, 1, now=now)

    await db.flush()

    user = await reload_user(db, user_id)
    logger.info("Granted %d XP to %s (%s), balance %d", amount, user_id, category, user.xp)
    if user.level > old_level:
        logger.info("User %s levelled up %d -> %d", user_id, old_level, user.level)
    return user


async def get_user_activities(db: AsyncSession, user_id: str, limit: int) -> list[Activity]:
    """Most recent activities first."""
    result = await db.execute(
        select(Activity)
        .where(Activity.user_id == user_id)
        .order_by(Activity.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())
