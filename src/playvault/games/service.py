"""Game offer catalog reads."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from playvault.db.models import GameOffer


async def get_active_game_offers(db: AsyncSession) -> list[GameOffer]:
    """Active offers, highest reward first."""
    result = await db.execute(
        select(GameOffer)
        .where(GameOffer.is_active.is_(True))
        .order_by(GameOffer.xp_reward.desc(), GameOffer.name.asc())
    )
    return list(result.scalars().all())
