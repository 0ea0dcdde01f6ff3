"""Location upvotes: a toggle per (location, user), plus location details."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from community_maps.core.errors import NotFound, StorageError
from community_maps.db.dialect import insert_for
from community_maps.db.time import utcnow
from community_maps.models import Location, LocationVote, Map
from community_maps.models.location import LOCATION_STATUS_APPROVED

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocationDetails:
    """A location with its upvote total and the viewer's own vote."""

    location: Location
    upvotes: int
    has_upvoted: bool


def get_visible_location(db: Session, location_id: str, viewer_id: str | None) -> Location:
    """Return a location the viewer may see or raise NotFound.

    Approved locations are public. Pending and rejected ones are visible
    only to their submitter and to the owner of the map they belong to.
    """
    try:
        location = db.get(Location, location_id)
        if location is None:
            raise NotFound("Location not found")
        if location.status == LOCATION_STATUS_APPROVED:
            return location
        if viewer_id is not None and viewer_id == location.creator_id:
            return location
        owner_id = db.scalar(select(Map.owner_id).where(Map.id == location.map_id))
    except SQLAlchemyError as exc:
        raise StorageError("Failed to fetch location") from exc
    if viewer_id is None or owner_id != viewer_id:
        raise NotFound("Location not found")
    return location


def toggle_upvote(db: Session, location_id: str, user_id: str) -> bool:
    """Flip the caller's upvote on a location and return the new state.

    An existing vote is removed; otherwise one is recorded. Inserts go
    through ``ON CONFLICT DO NOTHING`` so a concurrent duplicate is absorbed.
    """
    get_visible_location(db, location_id, user_id)
    try:
        removed = db.execute(
            delete(LocationVote).where(
                LocationVote.location_id == location_id,
                LocationVote.user_id == user_id,
            )
        ).rowcount
        if not removed:
            db.execute(
                insert_for(db, LocationVote)
                .values(location_id=location_id, user_id=user_id, created_at=utcnow())
                .on_conflict_do_nothing(
                    index_elements=[LocationVote.location_id, LocationVote.user_id]
                )
            )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError("Failed to toggle upvote") from exc

    is_upvoted = not removed
    logger.info(
        "Location %s %s by user %s",
        location_id,
        "upvoted" if is_upvoted else "un-upvoted",
        user_id,
    )
    return is_upvoted


def has_upvoted(db: Session, location_id: str, user_id: str | None) -> bool:
    """Return True when ``user_id`` currently upvotes the location."""
    if user_id is None:
        return False
    try:
        found = db.scalar(
            select(LocationVote.location_id).where(
                LocationVote.location_id == location_id,
                LocationVote.user_id == user_id,
            )
        )
    except SQLAlchemyError as exc:
        raise StorageError("Failed to fetch upvote status") from exc
    return found is not None


def vote_counts(db: Session, location_ids: Sequence[str]) -> dict[str, int]:
    """Return the number of upvotes per location id."""
    counts = {location_id: 0 for location_id in location_ids}
    if not counts:
        return counts
    try:
        rows = db.execute(
            select(LocationVote.location_id, func.count())
            .where(LocationVote.location_id.in_(list(counts)))
            .group_by(LocationVote.location_id)
        ).all()
    except SQLAlchemyError as exc:
        raise StorageError("Failed to count location upvotes") from exc
    for location_id, total in rows:
        counts[location_id] = int(total)
    return counts


def get_location_details(
    db: Session,
    location_id: str,
    viewer_id: str | None = None,
) -> LocationDetails:
    """Return a visible location with its upvote count and the viewer's vote."""
    location = get_visible_location(db, location_id, viewer_id)
    return LocationDetails(
        location=location,
        upvotes=vote_counts(db, [location.id])[location.id],
        has_upvoted=has_upvoted(db, location.id, viewer_id),
    )
