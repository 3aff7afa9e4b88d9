"""Reward catalog and redemption endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from playvault.auth.dependencies import get_current_user
from playvault.database import get_session
from playvault.db.models import Redemption, Reward, User
from playvault.rewards.schemas import (
    RedeemRequest,
    RedeemResponse,
    RedemptionHistoryEntry,
    RedemptionResponse,
    RewardResponse,
    RewardSummary,
)
from playvault.rewards.service import get_active_rewards, get_user_redemptions, redeem_reward

router = APIRouter(prefix="/api", tags=["Rewards"])


def _reward_response(r: Reward) -> RewardResponse:
    return RewardResponse(
        id=r.id,
        name=r.name,
        description=r.description,
        xp_cost=r.xp_cost,
        type=r.type,
        image_url=r.image_url,
        is_active=r.is_active,
        created_at=r.created_at,
    )


def _redemption_fields(r: Redemption) -> dict:
    return {
        "id": r.id,
        "user_id": r.user_id,
        "reward_id": r.reward_id,
        "status": r.status,
        "xp_spent": r.xp_spent,
        "delivery_info": r.delivery_info or {},
        "created_at": r.created_at,
        "updated_at": r.updated_at,
    }


@router.get("/rewards", response_model=list[RewardResponse])
async def list_rewards(db: AsyncSession = Depends(get_session)) -> list[RewardResponse]:
    """Active reward catalog, cheapest first."""
    rewards = await get_active_rewards(db)
    return [_reward_response(r) for r in rewards]


@router.post("/rewards/redeem", response_model=RedeemResponse)
async def post_redeem(
    body: RedeemRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> RedeemResponse:
    """Spend XP on a reward."""
    redemption = await redeem_reward(db, user.id, body.reward_id, body.delivery_info)
    await db.commit()
    return RedeemResponse(
        redemption=RedemptionResponse(**_redemption_fields(redemption)),
        message="Reward redeemed successfully",
    )


@router.get("/redemptions", response_model=list[RedemptionHistoryEntry])
async def list_redemptions(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[RedemptionHistoryEntry]:
    """The current user's redemption history with a reward summary."""
    redemptions = await get_user_redemptions(db, user.id)
    items = []
    for r in redemptions:
        summary = None
        if r.reward is not None:
            summary = RewardSummary(name=r.reward.name, type=r.reward.type, image_url=r.reward.image_url)
        items.append(RedemptionHistoryEntry(**_redemption_fields(r), reward=summary))
    return items
