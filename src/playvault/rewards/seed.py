"""Default reward catalog and game offers, seeded on startup."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from playvault.db.models import GameOffer, Reward

logger = logging.getLogger(__name__)

REWARD_SEED_DATA: list[dict] = [
    {
        "name": "$5 PayPal Cash",
        "description": "Sent to your PayPal email within 48 hours",
        "xp_cost": 5000,
        "type": "paypal",
    },
    {
        "name": "$10 PayPal Cash",
        "description": "Sent to your PayPal email within 48 hours",
        "xp_cost": 10000,
        "type": "paypal",
    },
    {
        "name": "$5 Amazon Gift Card",
        "description": "Digital code delivered by email",
        "xp_cost": 5500,
        "type": "amazon",
    },
    {
        "name": "$10 Google Play Gift Card",
        "description": "Digital code delivered by email",
        "xp_cost": 11000,
        "type": "google_play",
    },
    {
        "name": "$25 Steam Gift Card",
        "description": "Digital code delivered by email",
        "xp_cost": 27000,
        "type": "steam",
    },
]

GAME_OFFER_SEED_DATA: list[dict] = [
    {
        "name": "Kingdom Rush Legends",
        "description": "Install and reach level 5",
        "xp_reward": 1500,
        "affiliate_url": "https://offers.playvault.app/go/kingdom-rush-legends",
    },
    {
        "name": "Merge Garden",
        "description": "Install and complete the tutorial",
        "xp_reward": 800,
        "affiliate_url": "https://offers.playvault.app/go/merge-garden",
    },
    {
        "name": "Word Voyage",
        "description": "Install and solve 20 puzzles",
        "xp_reward": 600,
        "affiliate_url": "https://offers.playvault.app/go/word-voyage",
    },
]


async def seed_catalog(db: AsyncSession) -> int:
    """Insert catalog entries missing by name. Existing rows are left alone.

    Returns the number of rows inserted.
    """
    inserted = 0

    reward_names = set((await db.execute(select(Reward.name))).scalars().all())
    for data in REWARD_SEED_DATA:
        if data["name"] not in reward_names:
            db.add(Reward(**data))
            inserted += 1

    game_names = set((await db.execute(select(GameOffer.name))).scalars().all())
    for data in GAME_OFFER_SEED_DATA:
        if data["name"] not in game_names:
            db.add(GameOffer(**data))
            inserted += 1

    await db.commit()
    logger.info("Seeded %d catalog entries", inserted)
    return inserted
