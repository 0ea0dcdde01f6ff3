"""Moderation services for submitted locations."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from community_maps.core.errors import Forbidden, NotFound, StorageError
from community_maps.models import Location, Map, User
from community_maps.models.location import (
    LOCATION_STATUS_APPROVED,
    LOCATION_STATUS_PENDING,
    LOCATION_STATUS_REJECTED,
)
from community_maps.utils.distance import distance_km, format_distance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingSubmission:
    """A pending location with the submitter's public profile."""

    location: Location
    submitter_first_name: str | None
    submitter_last_name: str | None
    submitter_picture_url: str | None


@dataclass(frozen=True)
class NearbyLocation:
    """An approved location annotated with its distance from a reference point."""

    location: Location
    distance_km: float | None = None

    @property
    def distance_label(self) -> str | None:
        """Return the distance formatted for display."""
        if self.distance_km is None:
            return None
        return format_distance(self.distance_km)


class ModerationService:
    """Owner-controlled approve/reject workflow for map submissions.

    Decisions are revisable: the owner may approve a rejected location or
    reject an approved one. Repeating a decision leaves the row unchanged.
    """

    @staticmethod
    def _get_owned_map(db: Session, map_id: str, actor: User) -> Map:
        try:
            map_ = db.get(Map, map_id)
        except SQLAlchemyError as exc:
            raise StorageError("Failed to fetch map") from exc
        if map_ is None:
            raise NotFound("Map not found")
        if map_.owner_id != actor.id:
            raise Forbidden("Only the map owner can moderate this map")
        return map_

    def _get_owned_location(self, db: Session, location_id: str, actor: User) -> Location:
        try:
            location = db.get(Location, location_id)
        except SQLAlchemyError as exc:
            raise StorageError("Failed to fetch location") from exc
        if location is None:
            raise NotFound("Location not found")
        self._get_owned_map(db, location.map_id, actor)
        return location

    def _transition(self, db: Session, location_id: str, actor: User, status: str) -> Location:
        location = self._get_owned_location(db, location_id, actor)
        if location.status == status and location.is_approved == (status == LOCATION_STATUS_APPROVED):
            return location

        previous = location.status
        location.set_status(status)
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise StorageError(f"Failed to mark location as {status}") from exc
        db.refresh(location)
        logger.info("Location %s moved from %s to %s by %s", location_id, previous, status, actor.id)
        return location

    def approve(self, db: Session, location_id: str, actor: User) -> Location:
        """Approve a location; only the owning map's owner may do this."""
        return self._transition(db, location_id, actor, LOCATION_STATUS_APPROVED)

    def reject(self, db: Session, location_id: str, actor: User) -> Location:
        """Reject a location and clear ``is_approved``."""
        return self._transition(db, location_id, actor, LOCATION_STATUS_REJECTED)

    def delete(self, db: Session, location_id: str, actor: User) -> None:
        """Hard-delete a location; only the map owner may do this."""
        location = self._get_owned_location(db, location_id, actor)
        try:
            db.delete(location)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise StorageError("Failed to delete location") from exc
        logger.info("Location %s deleted by %s", location_id, actor.id)

    def list_pending(self, db: Session, map_id: str, actor: User) -> list[PendingSubmission]:
        """Return pending submissions with submitter names; owner only."""
        self._get_owned_map(db, map_id, actor)
        try:
            rows = db.execute(
                select(Location, User.first_name, User.last_name, User.picture_url)
                .join(User, User.id == Location.creator_id)
                .where(Location.map_id == map_id, Location.status == LOCATION_STATUS_PENDING)
                .order_by(Location.created_at, Location.id)
            ).all()
        except SQLAlchemyError as exc:
            raise StorageError("Failed to fetch pending locations") from exc
        return [
            PendingSubmission(
                location=location,
                submitter_first_name=first_name,
                submitter_last_name=last_name,
                submitter_picture_url=picture_url,
            )
            for location, first_name, last_name, picture_url in rows
        ]

    @staticmethod
    def pending_count(db: Session, map_id: str) -> int:
        """Return how many submissions on ``map_id`` await a decision."""
        try:
            count = db.scalar(
                select(func.count())
                .select_from(Location)
                .where(Location.map_id == map_id, Location.status == LOCATION_STATUS_PENDING)
            )
        except SQLAlchemyError as exc:
            raise StorageError("Failed to count pending locations") from exc
        return count or 0

    @staticmethod
    def pending_counts(db: Session, map_ids: Sequence[str]) -> dict[str, int]:
        """Return pending-submission counts for many maps in one grouped query."""
        counts = {map_id: 0 for map_id in map_ids}
        if not counts:
            return counts
        try:
            rows = db.execute(
                select(Location.map_id, func.count())
                .where(
                    Location.map_id.in_(list(counts)),
                    Location.status == LOCATION_STATUS_PENDING,
                )
                .group_by(Location.map_id)
            ).all()
        except SQLAlchemyError as exc:
            raise StorageError("Failed to count pending locations") from exc
        for map_id, total in rows:
            counts[map_id] = int(total)
        return counts

    @staticmethod
    def list_approved(
        db: Session,
        map_id: str,
        near: tuple[float, float] | None = None,
    ) -> list[NearbyLocation]:
        """Return a map's approved locations, nearest first when ``near`` is given."""
        try:
            if db.get(Map, map_id) is None:
                raise NotFound("Map not found")
            locations = db.scalars(
                select(Location)
                .where(Location.map_id == map_id, Location.status == LOCATION_STATUS_APPROVED)
                .order_by(Location.created_at.desc(), Location.id)
            ).all()
        except SQLAlchemyError as exc:
            raise StorageError("Failed to fetch locations") from exc
        if near is None:
            return [NearbyLocation(location=location) for location in locations]

        lat, lng = near
        nearby = [
            NearbyLocation(
                location=location,
                distance_km=distance_km(lat, lng, location.latitude, location.longitude),
            )
            for location in locations
        ]
        return sorted(nearby, key=lambda item: item.distance_km or 0.0)


moderation_service = ModerationService()
