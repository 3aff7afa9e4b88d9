"""Pydantic models for referral endpoints."""

from __future__ import annotations

from datetime import datetime

from playvault.schemas import CamelModel


class ReferralCodeResponse(CamelModel):
    referral_code: str


class ClaimReferralRequest(CamelModel):
    referral_code: str


class ReferredUserResponse(CamelModel):
    id: str
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    xp: int
    level: int
    created_at: datetime | None = None
