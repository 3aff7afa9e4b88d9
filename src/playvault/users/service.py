"""User lookup, first-login provisioning and leaderboard queries."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from playvault.db.models import User
from playvault.gamification.milestone_service import provision_milestones

logger = structlog.get_logger()

# Identity claims copied onto the user row on every login.
PROFILE_CLAIMS: dict[str, str] = {
    "email": "email",
    "first_name": "first_name",
    "last_name": "last_name",
    "profile_image_url": "profile_image_url",
}


async def get_user_by_id(db: AsyncSession, user_id: str) -> User | None:
    """Fetch a user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def reload_user(db: AsyncSession, user_id: str) -> User | None:
    """Re-read a user after an in-place UPDATE, overwriting stale identity-map state."""
    result = await db.execute(
        select(User).where(User.id == user_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def _profile_from_claims(claims: dict[str, Any]) -> dict[str, Any]:
    return {column: claims[claim] for claim, column in PROFILE_CLAIMS.items() if claims.get(claim) is not None}


async def upsert_user_from_claims(db: AsyncSession, claims: dict[str, Any]) -> tuple[User, bool]:
    """
    Get or create the user named by a verified identity token.

    Profile fields present in the claims overwrite the stored ones. A new user
    gets its milestone rows provisioned in the same transaction.

    Returns:
        Tuple of (user, created).
    """
    user_id = str(claims["sub"])
    profile = _profile_from_claims(claims)

    user = await get_user_by_id(db, user_id)
    if user is not None:
        changed = {k: v for k, v in profile.items() if getattr(user, k) != v}
        if changed:
            for key, value in changed.items():
                setattr(user, key, value)
            user.updated_at = datetime.now(timezone.utc)
            await db.flush()
        return user, False

    try:
        async with db.begin_nested():
            user = User(id=user_id, **profile)
            db.add(user)
            await db.flush()
            await provision_milestones(db, user_id)
    except IntegrityError:
        # Another request created the same user first.
        user = await get_user_by_id(db, user_id)
        if user is None:
            raise
        return user, False

    logger.info("user_created", user_id=user_id)
    return user, True


async def get_users_by_xp(db: AsyncSession, limit: int) -> list[User]:
    """Top users by XP, highest first."""
    result = await db.execute(
        select(User).order_by(User.xp.desc(), User.created_at.asc()).limit(limit)
    )
    return list(result.scalars().all())
