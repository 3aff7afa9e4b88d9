"""Reward catalog reads and the redemption workflow."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from playvault.db.models import Redemption, Reward, User
from playvault.errors import InsufficientBalanceError, NotFoundError
from playvault.users.service import get_user_by_id

logger = structlog.get_logger()

STATUS_PROCESSING = "processing"


async def get_active_rewards(db: AsyncSession) -> list[Reward]:
    """Active catalog, cheapest first."""
    result = await db.execute(
        select(Reward).where(Reward.is_active.is_(True)).order_by(Reward.xp_cost.asc(), Reward.name.asc())
    )
    return list(result.scalars().all())


async def get_active_reward(db: AsyncSession, reward_id: str) -> Reward | None:
    result = await db.execute(
        select(Reward).where(Reward.id == reward_id, Reward.is_active.is_(True))
    )
    return result.scalar_one_or_none()


async def redeem_reward(
    db: AsyncSession,
    user_id: str,
    reward_id: str,
    delivery_info: dict[str, Any] | None = None,
) -> Redemption:
    """Spend XP on a reward.

    The balance check and the deduction are one conditional UPDATE
    (``xp = xp - cost WHERE xp >= cost``): of two concurrent redemptions that
    together exceed the balance, exactly one matches a row. Level is left as is.

    Raises:
        NotFoundError: unknown user, or reward missing/inactive.
        InsufficientBalanceError: balance below the reward's cost. Nothing is deducted.
    """
    user = await get_user_by_id(db, user_id)
    reward = await get_active_reward(db, reward_id)
    if user is None or reward is None:
        raise NotFoundError("User or reward not found")

    now = datetime.now(timezone.utc)
    result = await db.execute(
        update(User)
        .where(User.id == user_id, User.xp >= reward.xp_cost)
        .values(xp=User.xp - reward.xp_cost, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        balance = (await db.execute(select(User.xp).where(User.id == user_id))).scalar_one()
        raise InsufficientBalanceError(current_balance=balance, required_amount=reward.xp_cost)

    redemption = Redemption(
        user_id=user_id,
        reward=reward,
        status=STATUS_PROCESSING,
        xp_spent=reward.xp_cost,
        delivery_info=delivery_info or {},
        created_at=now,
        updated_at=now,
    )
    db.add(redemption)
    await db.flush()

    logger.info(
        "reward_redeemed",
        user_id=user_id,
        reward_id=reward.id,
        redemption_id=redemption.id,
        xp_spent=reward.xp_cost,
    )
    return redemption


async def get_user_redemptions(db: AsyncSession, user_id: str) -> list[Redemption]:
    """Redemption history, newest first, with the reward joined in."""
    result = await db.execute(
        select(Redemption)
        .where(Redemption.user_id == user_id)
        .order_by(Redemption.created_at.desc())
    )
    return list(result.scalars().unique().all())
