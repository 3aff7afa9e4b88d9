"""Pydantic models for the reward catalog and redemptions."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from playvault.schemas import CamelModel


class RewardResponse(CamelModel):
    id: str
    name: str
    description: str | None = None
    xp_cost: int
    type: str
    image_url: str | None = None
    is_active: bool
    created_at: datetime | None = None


class RedeemRequest(CamelModel):
    reward_id: str
    delivery_info: dict[str, Any] | None = None


RedemptionStatus = Literal["processing", "delivered", "failed"]


class RedemptionResponse(CamelModel):
    id: str
    user_id: str
    reward_id: str
    status: RedemptionStatus
    xp_spent: int
    delivery_info: dict[str, Any] = {}
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RedeemResponse(CamelModel):
    redemption: RedemptionResponse
    message: str


class RewardSummary(CamelModel):
    name: str
    type: str
    image_url: str | None = None


class RedemptionHistoryEntry(RedemptionResponse):
    reward: RewardSummary | None = None
