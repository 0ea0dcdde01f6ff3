"""Verification of access tokens issued by the hosted auth provider."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from community_maps.core.errors import ResolutionError
from community_maps.core.settings import settings


@dataclass(frozen=True)
class ProviderIdentity:
    """Identity claims vouched for by the auth provider."""

    id: str
    email: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


def decode_access_token(token: str) -> ProviderIdentity:
    """Verify a provider access token and return its identity claims.

    Raises:
        ResolutionError: If the token is malformed, expired, or carries no subject.
    """
    options = {"verify_aud": settings.auth_jwt_audience is not None}
    try:
        payload = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            audience=settings.auth_jwt_audience,
            options=options,
        )
    except JWTError as err:
        raise ResolutionError() from err

    subject = payload.get("sub")
    if not subject:
        raise ResolutionError()

    metadata = payload.get("user_metadata") or {}
    if not isinstance(metadata, dict):
        metadata = {}
    return ProviderIdentity(id=str(subject), email=payload.get("email"), metadata=metadata)


def create_access_token(
    subject: str,
    *,
    email: str | None = None,
    metadata: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Mint a token in the provider's format (used by local tooling and tests)."""
    expire = datetime.now(UTC) + (expires_delta or timedelta(hours=1))
    claims: dict[str, Any] = {
        "sub": subject,
        "email": email,
        "user_metadata": metadata or {},
        "exp": expire,
    }
    if settings.auth_jwt_audience is not None:
        claims["aud"] = settings.auth_jwt_audience
    return jwt.encode(claims, settings.auth_jwt_secret, algorithm=settings.auth_jwt_algorithm)
