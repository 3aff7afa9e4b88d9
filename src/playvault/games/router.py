"""Game offer endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from playvault.database import get_session
from playvault.games.schemas import GameOfferResponse
from playvault.games.service import get_active_game_offers

router = APIRouter(prefix="/api", tags=["Games"])


@router.get("/games", response_model=list[GameOfferResponse])
async def list_games(db: AsyncSession = Depends(get_session)) -> list[GameOfferResponse]:
    offers = await get_active_game_offers(db)
    return [
        GameOfferResponse(
            id=g.id,
            name=g.name,
            description=g.description,
            xp_reward=g.xp_reward,
            image_url=g.image_url,
            affiliate_url=g.affiliate_url,
            is_active=g.is_active,
            created_at=g.created_at,
        )
        for g in offers
    ]
