"""Pydantic response models for user endpoints."""

from __future__ import annotations

from datetime import datetime

from playvault.schemas import CamelModel


class UserResponse(CamelModel):
    """The authenticated user's own record."""

    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    xp: int
    level: int
    streak: int
    last_login: datetime | None = None
    referral_code: str | None = None
    referred_by: str | None = None
    next_level_xp: int
    xp_to_next_level: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PublicUserResponse(CamelModel):
    """Leaderboard entry. Carries no contact or referral data."""

    id: str
    first_name: str | None = None
    last_name: str | None = None
    xp: int
    level: int
    profile_image_url: str | None = None
