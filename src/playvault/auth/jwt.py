"""
Identity token verification.

Tokens are issued by the external identity provider. ``sub`` is the stable
user identifier; optional profile claims (``email``, ``first_name``,
``last_name``, ``profile_image_url``) are copied onto the user row.

HS* algorithms verify with the shared ``jwt_secret``; asymmetric algorithms
read the provider's public key from ``jwt_public_key_path``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import jwt

from playvault.config import get_settings

_verification_key: str | None = None


def _is_symmetric(algorithm: str) -> bool:
    return algorithm.upper().startswith("HS")


def _load_verification_key() -> str:
    """Load the verification key (cached after first call)."""
    global _verification_key  # noqa: PLW0603
    if _verification_key is None:
        settings = get_settings()
        if _is_symmetric(settings.jwt_algorithm):
            _verification_key = settings.jwt_secret
        else:
            _verification_key = Path(settings.jwt_public_key_path).read_text()
    return _verification_key


def reset_keys() -> None:
    """Reset the cached key (useful for testing)."""
    global _verification_key  # noqa: PLW0603
    _verification_key = None


def create_access_token(user_id: str, claims: dict[str, Any] | None = None) -> str:
    """
    Mint an access token signed with the shared secret.

    Only meaningful with an HS* algorithm; used by local tooling and tests in
    place of the identity provider.
    """
    settings = get_settings()
    if not _is_symmetric(settings.jwt_algorithm):
        msg = f"Cannot mint tokens locally with {settings.jwt_algorithm}"
        raise RuntimeError(msg)
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        **(claims or {}),
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_access_token_expire_minutes),
        "iss": settings.jwt_issuer,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict[str, Any]:
    """
    Verify and decode an identity token.

    Raises:
        jwt.ExpiredSignatureError: The token is past its ``exp``.
        jwt.InvalidTokenError: Any other signature, issuer or claim problem.
    """
    settings = get_settings()
    payload: dict[str, Any] = jwt.decode(
        token,
        _load_verification_key(),
        algorithms=[settings.jwt_algorithm],
        issuer=settings.jwt_issuer,
        options={"require": ["sub", "exp"]},
    )
    return payload
