"""Map repository: creation, editing, lookup and listing of maps."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from community_maps.core.errors import (
    Forbidden,
    NotFound,
    StorageError,
    ValidationError,
)
from community_maps.core.settings import settings
from community_maps.db.time import utcnow
from community_maps.models import Location, Map, User
from community_maps.models.location import LOCATION_STATUS_APPROVED
from community_maps.services import votes
from community_maps.services.moderation import moderation_service
from community_maps.services.slugs import (
    generate_unique_slug,
    is_reserved_slug,
    validate_slug,
)

logger = logging.getLogger(__name__)


@dataclass
class MapPage:
    """One page of maps plus the total number of maps."""

    items: list[Map]
    total: int
    page: int
    limit: int
    vote_counts: dict[str, int] = field(default_factory=dict)
    location_counts: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class OwnedMap:
    """A map listed for its owner with the number of submissions to review."""

    map: Map
    pending_count: int


def _require_fields(**fields: str | None) -> list[str]:
    """Return the stripped values in order, or raise naming the missing ones."""
    missing = [name for name, value in fields.items() if not value or not value.strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    return [value.strip() for value in fields.values() if value]


def list_slugs(db: Session, *, exclude_map_id: str | None = None) -> set[str]:
    """Return every slug currently in use, optionally ignoring one map."""
    query = select(Map.slug)
    if exclude_map_id is not None:
        query = query.where(Map.id != exclude_map_id)
    try:
        return set(db.scalars(query).all())
    except SQLAlchemyError as exc:
        raise StorageError("Failed to list slugs") from exc


def check_slug_availability(db: Session, slug: str) -> bool:
    """Return True iff no map currently holds ``slug``."""
    try:
        taken = db.scalar(select(Map.id).where(Map.slug == slug).limit(1))
    except SQLAlchemyError as exc:
        raise StorageError("Error checking slug availability") from exc
    return taken is None


def get_map(db: Session, map_id: str) -> Map:
    """Return the map with ``map_id`` or raise NotFound."""
    try:
        map_ = db.get(Map, map_id)
    except SQLAlchemyError as exc:
        raise StorageError("Failed to fetch map") from exc
    if map_ is None:
        raise NotFound("Map not found")
    return map_


def get_map_by_slug(db: Session, slug: str) -> Map:
    """Return the map published under ``slug`` or raise NotFound."""
    try:
        map_ = db.scalar(select(Map).where(Map.slug == slug))
    except SQLAlchemyError as exc:
        raise StorageError("Failed to fetch map") from exc
    if map_ is None:
        raise NotFound("Map not found")
    return map_


def _resolve_new_slug(db: Session, title: str, custom_slug: str | None) -> str:
    if custom_slug:
        slug = validate_slug(custom_slug.strip().lower())
        if is_reserved_slug(slug):
            raise ValidationError("This URL is reserved. Please choose a different one.")
        if not check_slug_availability(db, slug):
            raise ValidationError("This URL is already taken. Please choose a different one.")
        return slug

    slug = generate_unique_slug(title, list_slugs(db))
    if is_reserved_slug(slug):
        raise ValidationError(
            "This title generates a reserved URL. Please choose a different title."
        )
    return slug


def create_map(
    db: Session,
    owner: User,
    title: str | None,
    short_description: str | None,
    body: str | None,
    display_picture: str | None = None,
    *,
    slug: str | None = None,
    city: str | None = None,
) -> Map:
    """Persist a new map owned by ``owner`` and upvote it on their behalf."""
    title, short_description, body = _require_fields(
        title=title, short_description=short_description, body=body
    )

    new_slug = _resolve_new_slug(db, title, slug)
    now = utcnow()
    map_ = Map(
        title=title,
        slug=new_slug,
        short_description=short_description,
        body=body,
        display_picture=display_picture,
        city=city or settings.default_city,
        owner_id=owner.id,
        created_at=now,
        updated_at=now,
    )
    try:
        db.add(map_)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ValidationError(
            "This URL is already taken. Please try again or use a different custom URL."
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError("Failed to create map") from exc
    db.refresh(map_)
    logger.info("Map %s created by %s with slug %s", map_.id, owner.id, map_.slug)

    try:
        votes.upvote(db, map_.id, owner.id)
    except StorageError as exc:
        logger.warning("Failed to auto-upvote map %s: %s", map_.id, exc)
    return map_


def update_map(
    db: Session,
    map_id: str,
    actor: User,
    title: str | None,
    short_description: str | None,
    body: str | None,
) -> Map:
    """Overwrite a map's text fields; only the owner may do this.

    The slug is regenerated from the new title and de-duplicated against
    every other map, so a title edit can never produce a slug collision.
    A title whose slug names an application route is refused.
    """
    map_ = get_map(db, map_id)
    if map_.owner_id != actor.id:
        raise Forbidden("You don't have permission to edit this map")
    title, short_description, body = _require_fields(
        title=title, short_description=short_description, body=body
    )

    new_slug = generate_unique_slug(title, list_slugs(db, exclude_map_id=map_.id))
    if is_reserved_slug(new_slug):
        raise ValidationError(
            "This title generates a reserved URL. Please choose a different title."
        )

    map_.title = title
    map_.short_description = short_description
    map_.body = body
    map_.slug = new_slug
    map_.updated_at = utcnow()
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError("Failed to update map") from exc
    db.refresh(map_)
    return map_


def location_counts(db: Session, map_ids: Sequence[str]) -> dict[str, int]:
    """Return the number of approved locations per map id."""
    counts = {map_id: 0 for map_id in map_ids}
    if not counts:
        return counts
    try:
        rows = db.execute(
            select(Location.map_id, func.count())
            .where(
                Location.map_id.in_(list(counts)),
                Location.status == LOCATION_STATUS_APPROVED,
            )
            .group_by(Location.map_id)
        ).all()
    except SQLAlchemyError as exc:
        raise StorageError("Failed to count locations") from exc
    for map_id, total in rows:
        counts[map_id] = int(total)
    return counts


def list_maps(db: Session, page: int = 1, limit: int | None = None) -> MapPage:
    """Return one page of maps, most recently created first."""
    if limit is None:
        limit = settings.maps_page_size
    if page < 1:
        raise ValidationError("page must be at least 1")
    if not 1 <= limit <= settings.maps_max_page_size:
        raise ValidationError(f"limit must be between 1 and {settings.maps_max_page_size}")

    try:
        total = db.scalar(select(func.count()).select_from(Map)) or 0
        items = list(
            db.scalars(
                select(Map)
                .order_by(Map.created_at.desc(), Map.id.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            ).unique()
        )
        ids = [map_.id for map_ in items]
        return MapPage(
            items=items,
            total=int(total),
            page=page,
            limit=limit,
            vote_counts=votes.vote_counts(db, ids),
            location_counts=location_counts(db, ids),
        )
    except SQLAlchemyError as exc:
        raise StorageError("Failed to list maps") from exc


def list_owned_maps(db: Session, owner: User) -> list[OwnedMap]:
    """Return the owner's maps, newest first, each with its pending count.

    Pending counts for the whole batch come from one grouped query.
    """
    try:
        items = list(
            db.scalars(
                select(Map)
                .where(Map.owner_id == owner.id)
                .order_by(Map.created_at.desc(), Map.id.desc())
            ).unique()
        )
    except SQLAlchemyError as exc:
        raise StorageError("Failed to fetch your maps") from exc
    pending = moderation_service.pending_counts(db, [map_.id for map_ in items])
    return [OwnedMap(map=map_, pending_count=pending[map_.id]) for map_ in items]
