"""Pydantic response models for game offers."""

from __future__ import annotations

from datetime import datetime

from playvault.schemas import CamelModel


class GameOfferResponse(CamelModel):
    id: str
    name: str
    description: str | None = None
    xp_reward: int
    image_url: str | None = None
    affiliate_url: str
    is_active: bool
    created_at: datetime | None = None
