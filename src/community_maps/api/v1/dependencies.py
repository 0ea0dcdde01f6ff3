"""Shared API dependencies for authentication and common functionality."""

import logging
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from community_maps.core.errors import ResolutionError, Unauthorized
from community_maps.core.security import decode_access_token
from community_maps.db.session import get_db
from community_maps.models import User
from community_maps.services.google_maps import GoogleMapsListFetcher
from community_maps.services.identity import ResolvedIdentity, resolve_identity
from community_maps.services.places import PlaceSearchClient, get_place_search_client
from community_maps.services.storage import LocalObjectStorage, get_object_storage

logger = logging.getLogger(__name__)

# Missing credentials are reported as our own 401, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def get_resolved_identity(credentials: CredentialsDep, db: SessionDep) -> ResolvedIdentity:
    """Verify the bearer token and map it onto a local user row.

    Raises:
        Unauthorized: If no token is supplied.
        ResolutionError: If the token is invalid or the user cannot be resolved.
    """
    if credentials is None:
        raise Unauthorized()
    identity = decode_access_token(credentials.credentials)
    return resolve_identity(db, identity)


def get_current_user(
    resolved: Annotated[ResolvedIdentity, Depends(get_resolved_identity)],
) -> User:
    """Return the signed-in user."""
    return resolved.user


def get_optional_user(credentials: CredentialsDep, db: SessionDep) -> User | None:
    """Return the signed-in user, or None for anonymous callers.

    An invalid token is treated the same as no token on public endpoints.
    """
    if credentials is None:
        return None
    try:
        identity = decode_access_token(credentials.credentials)
    except ResolutionError:
        logger.debug("Ignoring invalid bearer token on public endpoint")
        return None
    return resolve_identity(db, identity).user


def get_list_fetcher() -> GoogleMapsListFetcher:
    """Return the shared-list fetcher."""
    return GoogleMapsListFetcher()


ResolvedIdentityDep = Annotated[ResolvedIdentity, Depends(get_resolved_identity)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
PlaceSearchDep = Annotated[PlaceSearchClient, Depends(get_place_search_client)]
ObjectStorageDep = Annotated[LocalObjectStorage, Depends(get_object_storage)]
ListFetcherDep = Annotated[GoogleMapsListFetcher, Depends(get_list_fetcher)]
