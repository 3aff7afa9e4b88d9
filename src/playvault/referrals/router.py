"""Referral endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from playvault.auth.dependencies import get_current_user
from playvault.auth.router import user_response
from playvault.database import get_session
from playvault.db.models import User
from playvault.referrals.schemas import ClaimReferralRequest, ReferralCodeResponse, ReferredUserResponse
from playvault.referrals.service import claim_referral, get_or_create_referral_code, get_user_referrals
from playvault.users.schemas import UserResponse

router = APIRouter(prefix="/api", tags=["Referrals"])


@router.get("/referrals", response_model=list[ReferredUserResponse])
async def list_referrals(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[ReferredUserResponse]:
    """Users who signed up with the current user's code."""
    referred = await get_user_referrals(db, user.id)
    return [
        ReferredUserResponse(
            id=u.id,
            first_name=u.first_name,
            last_name=u.last_name,
            profile_image_url=u.profile_image_url,
            xp=u.xp,
            level=u.level,
            created_at=u.created_at,
        )
        for u in referred
    ]


@router.get("/referral-code", response_model=ReferralCodeResponse)
async def get_referral_code(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> ReferralCodeResponse:
    """Get the current user's referral code, assigning one on first request."""
    code = await get_or_create_referral_code(db, user.id)
    await db.commit()
    return ReferralCodeResponse(referral_code=code)


@router.post("/referrals/claim", response_model=UserResponse)
async def post_claim_referral(
    body: ClaimReferralRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Attribute the current user to the owner of a referral code."""
    updated = await claim_referral(db, user.id, body.referral_code)
    await db.commit()
    return user_response(updated)
