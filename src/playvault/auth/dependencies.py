"""FastAPI authentication dependencies."""

from __future__ import annotations

import jwt
import structlog
from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from playvault.auth.jwt import verify_token
from playvault.database import get_session
from playvault.db.models import User
from playvault.errors import AuthExpiredError, AuthRequiredError
from playvault.users.service import upsert_user_from_claims

logger = structlog.get_logger()

_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    db: AsyncSession = Depends(get_session),
) -> User:
    """
    Verify the identity token and return the matching user.

    The first authenticated request for a subject creates its user row.
    An expired token raises AuthExpiredError so the client can re-run login
    instead of showing a generic error.
    """
    if credentials is None:
        raise AuthRequiredError("Unauthorized")

    try:
        claims = verify_token(credentials.credentials)
    except jwt.ExpiredSignatureError as e:
        raise AuthExpiredError() from e
    except jwt.InvalidTokenError as e:
        logger.info("auth_rejected", reason=str(e))
        raise AuthRequiredError("Unauthorized") from e

    user, _created = await upsert_user_from_claims(db, claims)
    await db.commit()
    return user
