"""Resolution of provider identities into durable user profiles."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from community_maps.core.errors import ResolutionError, StorageError, ValidationError
from community_maps.core.security import ProviderIdentity
from community_maps.db.dialect import insert_for
from community_maps.db.time import utcnow
from community_maps.models import User

logger = logging.getLogger(__name__)

DEFAULT_FIRST_NAME = "User"


@dataclass(frozen=True)
class ResolvedIdentity:
    """A user profile plus whether this request created it."""

    user: User
    is_new_user: bool


def split_full_name(identity: ProviderIdentity) -> tuple[str, str]:
    """Derive first and last name from provider metadata.

    Falls back to the local part of the email, then to ``"User"``.
    """
    metadata = identity.metadata or {}
    full_name = metadata.get("full_name") or metadata.get("name")
    if not full_name and identity.email:
        full_name = identity.email.split("@", 1)[0]
    full_name = (full_name or DEFAULT_FIRST_NAME).strip()

    parts = re.split(r"\s+", full_name, maxsplit=1)
    first_name = parts[0] or DEFAULT_FIRST_NAME
    last_name = parts[1] if len(parts) > 1 else ""
    return first_name, last_name


def resolve_identity(db: Session, identity: ProviderIdentity) -> ResolvedIdentity:
    """Return the profile for ``identity``, creating it on first sight.

    The write is a single ``INSERT ... ON CONFLICT (id) DO UPDATE`` so two
    concurrent first sign-ins for the same id cannot produce two rows. On
    conflict only the email and ``updated_at`` are refreshed; names edited
    by the user are kept. The row is new exactly when the returned
    ``created_at`` equals ``updated_at``, since a conflict moves only the latter.

    Raises:
        ResolutionError: If the lookup or upsert fails.
    """
    try:
        first_name, last_name = split_full_name(identity)
        now = utcnow()

        stmt = insert_for(db, User).values(
            id=identity.id,
            email=identity.email,
            first_name=first_name,
            last_name=last_name,
            picture_url=identity.metadata.get("avatar_url") or identity.metadata.get("picture"),
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[User.id],
            set_={
                "email": stmt.excluded.email,
                "updated_at": stmt.excluded.updated_at,
            },
        ).returning(User.created_at, User.updated_at)
        row = db.execute(stmt).one()
        db.commit()

        user = db.get(User, identity.id, populate_existing=True)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to resolve identity %s: %s", identity.id, exc, exc_info=True)
        raise ResolutionError("Could not resolve user profile") from exc

    if user is None:  # pragma: no cover - upsert guarantees a row
        raise ResolutionError("Could not resolve user profile")

    is_new_user = row.created_at == row.updated_at
    if is_new_user:
        logger.info("Created profile for new user %s", identity.id)
    return ResolvedIdentity(user=user, is_new_user=is_new_user)


def update_profile(
    db: Session,
    user: User,
    *,
    first_name: str | None = None,
    last_name: str | None = None,
    city: str | None = None,
    picture_url: str | None = None,
) -> User:
    """Apply a partial profile edit for the signed-in user."""
    changes = {
        "first_name": first_name,
        "last_name": last_name,
        "city": city,
        "picture_url": picture_url,
    }
    changes = {key: value for key, value in changes.items() if value}
    if not changes:
        raise ValidationError("Please provide at least one field to update")

    for key, value in changes.items():
        setattr(user, key, value.strip() if isinstance(value, str) else value)
    user.updated_at = utcnow()

    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError("Failed to update profile") from exc
    return user
