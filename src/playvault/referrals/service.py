"""Referral codes and referral attribution.

A code is the first 8 characters of the user id followed by a 4-character
random suffix (a-z, 0-9) from a cryptographic source. Codes are unique at
the database level; a collision just draws a new suffix.
"""

from __future__ import annotations

import secrets
import string

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from playvault.db.models import User
from playvault.errors import NotFoundError, ValidationError
from playvault.users.service import get_user_by_id, reload_user

logger = structlog.get_logger()

SUFFIX_CHARSET = string.ascii_lowercase + string.digits
SUFFIX_LENGTH = 4
PREFIX_LENGTH = 8
MAX_ATTEMPTS = 10


def generate_referral_code(user_id: str) -> str:
    """Derive a candidate code for a user."""
    suffix = "".join(secrets.choice(SUFFIX_CHARSET) for _ in range(SUFFIX_LENGTH))
    return f"{user_id[:PREFIX_LENGTH]}{suffix}"


async def get_or_create_referral_code(db: AsyncSession, user_id: str) -> str:
    """Return the user's referral code, assigning one on first call.

    Assignment only touches a row whose code is still NULL, so concurrent
    first calls converge on whichever code landed first.
    """
    user = await get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    if user.referral_code:
        return user.referral_code

    for _ in range(MAX_ATTEMPTS):
        code = generate_referral_code(user_id)
        try:
            async with db.begin_nested():
                await db.execute(
                    update(User)
                    .where(User.id == user_id, User.referral_code.is_(None))
                    .values(referral_code=code)
                    .execution_options(synchronize_session=False)
                )
        except IntegrityError:
            logger.warning("referral_code_collision", user_id=user_id, code=code)
            continue

        user = await reload_user(db, user_id)
        logger.info("referral_code_created", user_id=user_id, code=user.referral_code)
        return user.referral_code

    msg = f"Failed to generate unique referral code after {MAX_ATTEMPTS} attempts"
    raise RuntimeError(msg)


async def get_user_by_referral_code(db: AsyncSession, code: str) -> User | None:
    result = await db.execute(select(User).where(User.referral_code == code.strip()))
    return result.scalar_one_or_none()


async def get_user_referrals(db: AsyncSession, user_id: str) -> list[User]:
    """Users who signed up with this user's code, newest first."""
    result = await db.execute(
        select(User).where(User.referred_by == user_id).order_by(User.created_at.desc())
    )
    return list(result.scalars().all())


async def claim_referral(db: AsyncSession, user_id: str, code: str) -> User:
    """Record who referred ``user_id``. Allowed once, never to oneself."""
    referrer = await get_user_by_referral_code(db, code)
    if referrer is None:
        raise NotFoundError("Referral code not found")
    if referrer.id == user_id:
        raise ValidationError("You cannot use your own referral code")

    result = await db.execute(
        update(User)
        .where(User.id == user_id, User.referred_by.is_(None))
        .values(referred_by=referrer.id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        if await get_user_by_id(db, user_id) is None:
            raise NotFoundError("User not found")
        raise ValidationError("A referral has already been recorded for this account")

    logger.info("referral_claimed", user_id=user_id, referred_by=referrer.id)
    return await reload_user(db, user_id)
