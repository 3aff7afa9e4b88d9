"""Current-user endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from playvault.auth.dependencies import get_current_user
from playvault.db.models import User
from playvault.gamification.level_thresholds import level_progress
from playvault.users.schemas import UserResponse

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def user_response(user: User) -> UserResponse:
    """Build a UserResponse from a User model."""
    progress = level_progress(user.xp, user.level)
    return UserResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        profile_image_url=user.profile_image_url,
        xp=user.xp,
        level=user.level,
        streak=user.streak,
        last_login=user.last_login,
        referral_code=user.referral_code,
        referred_by=user.referred_by,
        next_level_xp=progress["next_level_xp"],
        xp_to_next_level=progress["xp_to_next_level"],
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


@router.get("/user", response_model=UserResponse)
async def get_auth_user(user: User = Depends(get_current_user)) -> UserResponse:
    """Get the authenticated user's record."""
    return user_response(user)
