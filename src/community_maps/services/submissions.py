"""Location submission pipeline.

Every submission, whatever the source of its coordinates, ends up as a
``pending`` location awaiting the map owner's decision.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from community_maps.core.errors import (
    Forbidden,
    NotFound,
    StorageError,
    ValidationError,
)
from community_maps.db.time import utcnow
from community_maps.models import Location, Map, User
from community_maps.models.location import LOCATION_STATUS_PENDING
from community_maps.services import google_maps
from community_maps.services.google_maps import ParsedPlace
from community_maps.services.places import PlaceSearchClient, get_place_search_client

logger = logging.getLogger(__name__)

# Two pins with the same name closer than this are the same place.
DUPLICATE_TOLERANCE_DEG = 0.00001


@dataclass(frozen=True)
class Coordinates:
    """A validated, normalised point with its display name and source link."""

    name: str
    latitude: float
    longitude: float
    source_url: str


@dataclass
class ImportResult:
    """Outcome of a bulk list import."""

    imported: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)


def _parse_coordinate(value: object, label: str) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as err:
        raise ValidationError(f"Invalid {label}") from err
    if not math.isfinite(number):
        raise ValidationError(f"Invalid {label}")
    return number


def validate_coordinates(latitude: object, longitude: object) -> tuple[float, float]:
    """Return ``(lat, lng)`` as floats or raise ValidationError."""
    lat = _parse_coordinate(latitude, "latitude")
    lng = _parse_coordinate(longitude, "longitude")
    if not google_maps.coordinates_in_range(lat, lng):
        raise ValidationError("Invalid latitude or longitude values")
    return lat, lng


def coordinates_from_url(url: str, name: str | None = None) -> Coordinates:
    """Normalise a direct Google Maps link."""
    extracted = google_maps.extract_coordinates(url)
    lat, lng = validate_coordinates(extracted.latitude, extracted.longitude)
    display_name = (name or "").strip() or extracted.name
    if not display_name:
        raise ValidationError("A name is required for this location")
    return Coordinates(name=display_name, latitude=lat, longitude=lng, source_url=url.strip())


async def coordinates_from_query(
    query: str,
    place_search: PlaceSearchClient,
    name: str | None = None,
) -> Coordinates:
    """Normalise the first place-search hit for ``query``."""
    candidate = await place_search.find_place(query)
    if candidate is None or not candidate.has_geometry:
        raise ValidationError(f"No place found for {query!r}")
    lat, lng = validate_coordinates(candidate.latitude, candidate.longitude)
    display_name = (name or "").strip() or candidate.name
    return Coordinates(
        name=display_name,
        latitude=lat,
        longitude=lng,
        source_url=candidate.google_maps_url,
    )


def _is_duplicate(db: Session, map_id: str, coords: Coordinates) -> bool:
    try:
        same_url = db.scalar(
            select(Location.id)
            .where(Location.map_id == map_id, Location.source_url == coords.source_url)
            .limit(1)
        )
        if same_url is not None:
            return True

        same_name = db.scalars(
            select(Location).where(Location.map_id == map_id, Location.name == coords.name)
        ).all()
    except SQLAlchemyError as exc:
        raise StorageError("Failed to check for duplicate locations") from exc
    return any(
        abs(existing.latitude - coords.latitude) < DUPLICATE_TOLERANCE_DEG
        and abs(existing.longitude - coords.longitude) < DUPLICATE_TOLERANCE_DEG
        for existing in same_name
    )


def _persist(db: Session, map_: Map, submitter: User, coords: Coordinates, note: str | None) -> Location:
    if _is_duplicate(db, map_.id, coords):
        raise ValidationError(
            f"This exact location ({coords.name}) has already been added to this map."
        )

    now = utcnow()
    location = Location(
        map_id=map_.id,
        creator_id=submitter.id,
        name=coords.name,
        latitude=coords.latitude,
        longitude=coords.longitude,
        source_url=coords.source_url,
        note=(note or "").strip() or None,
        created_at=now,
        updated_at=now,
    )
    location.set_status(LOCATION_STATUS_PENDING)
    try:
        db.add(location)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError("Failed to create location") from exc
    db.refresh(location)
    logger.info("Location %s submitted to map %s by %s", location.id, map_.id, submitter.id)
    return location


async def submit_location(
    db: Session,
    map_id: str,
    submitter: User,
    *,
    url: str | None = None,
    query: str | None = None,
    name: str | None = None,
    note: str | None = None,
    place_search: PlaceSearchClient | None = None,
) -> Location:
    """Validate a proposed location and record it as pending.

    Exactly one of ``url`` (a Google Maps link with embedded coordinates)
    or ``query`` (free text resolved through place search) must be given.
    """
    try:
        map_ = db.get(Map, map_id)
    except SQLAlchemyError as exc:
        raise StorageError("Failed to fetch map") from exc
    if map_ is None:
        raise NotFound("Map not found")

    has_url = bool(url and url.strip())
    has_query = bool(query and query.strip())
    if has_url == has_query:
        raise ValidationError("Provide either a Google Maps URL or a place search query")

    if has_url:
        coords = coordinates_from_url(url or "", name)
    else:
        coords = await coordinates_from_query(
            (query or "").strip(),
            place_search or get_place_search_client(),
            name,
        )
    return _persist(db, map_, submitter, coords, note)


def import_google_maps_list(
    db: Session,
    map_id: str,
    actor: User,
    places: Iterable[ParsedPlace],
) -> ImportResult:
    """Submit every place of a parsed shared list; owner only.

    Duplicates and invalid entries are counted as skipped, never fatal.
    """
    try:
        map_ = db.get(Map, map_id)
    except SQLAlchemyError as exc:
        raise StorageError("Failed to fetch map") from exc
    if map_ is None:
        raise NotFound("Map not found")
    if map_.owner_id != actor.id:
        raise Forbidden("Only the map owner can import locations")

    result = ImportResult()
    for place in places:
        try:
            lat, lng = validate_coordinates(place.latitude, place.longitude)
            coords = Coordinates(
                name=place.name,
                latitude=lat,
                longitude=lng,
                source_url=place.google_maps_url,
            )
            _persist(db, map_, actor, coords, None)
        except ValidationError as exc:
            result.skipped += 1
            result.errors.append(f"{place.name}: {exc.detail}")
            continue
        result.imported += 1

    logger.info(
        "Imported %d locations into map %s (%d skipped)",
        result.imported,
        map_id,
        result.skipped,
    )
    return result
