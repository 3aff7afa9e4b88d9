"""Login streak tracking.

The client calls this once per session start. A login at least 24 hours
after the previous counted one increments the streak; anything sooner is a
no-op. There is no decay: a five-day gap still just adds one.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import or_, update
from sqlalchemy.ext.asyncio import AsyncSession

from playvault.db.models import User
from playvault.errors import NotFoundError
from playvault.users.service import get_user_by_id, reload_user

logger = logging.getLogger(__name__)

STREAK_INTERVAL = timedelta(hours=24)


async def update_streak(db: AsyncSession, user_id: str, now: datetime | None = None) -> tuple[User, bool]:
    """Apply the streak rule. Returns (user, incremented).

    The elapsed-time check lives in the UPDATE's WHERE clause, so two
    session starts racing each other increment at most once.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    if await get_user_by_id(db, user_id) is None:
        raise NotFoundError("User not found")

    result = await db.execute(
        update(User)
        .where(
            User.id == user_id,
            or_(User.last_login.is_(None), User.last_login <= now - STREAK_INTERVAL),
        )
        .values(streak=User.streak + 1, last_login=now, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    incremented = result.rowcount == 1

    user = await reload_user(db, user_id)
    if incremented:
        logger.info("Streak for %s is now %d", user_id, user.streak)
    return user, incremented
