# src/community_maps/api/v1/endpoints/maps.py
"""Map endpoints: creation, listing, editing, upvotes and per-map submissions."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from community_maps.core.errors import Forbidden, ValidationError
from community_maps.models import Location, Map
from community_maps.schemas.location import (
    GoogleListImportRequest,
    ImportResponse,
    LocationResponse,
    LocationSubmit,
    NearbyLocationResponse,
    PendingCount,
    PendingSubmissionResponse,
    Submitter,
)
from community_maps.schemas.map import (
    MapCreate,
    MapListResponse,
    MapResponse,
    MapSummary,
    MapUpdate,
    MapUpdateResponse,
    OwnedMapResponse,
    SlugAvailability,
)
from community_maps.schemas.vote import UpvoteResponse
from community_maps.services import maps as map_service
from community_maps.services import votes as vote_service
from community_maps.services.moderation import moderation_service
from community_maps.services.submissions import import_google_maps_list, submit_location

from ..dependencies import (
    CurrentUserDep,
    ListFetcherDep,
    OptionalUserDep,
    PlaceSearchDep,
    SessionDep,
)

router = APIRouter(tags=["maps"])


@router.get("/check-slug", response_model=SlugAvailability)
async def check_slug(
    db: SessionDep,
    slug: Annotated[str | None, Query()] = None,
) -> SlugAvailability:
    """Report whether a custom slug can be used for a new map."""
    if not slug:
        raise ValidationError("Slug is required")
    return SlugAvailability(available=map_service.check_slug_availability(db, slug))


@router.post("/maps", response_model=MapResponse, status_code=status.HTTP_201_CREATED)
async def create_map(
    payload: MapCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Map:
    """Create a new map owned by the caller."""
    return map_service.create_map(
        db,
        current_user,
        payload.title,
        payload.short_description,
        payload.body,
        payload.display_picture,
        slug=payload.slug,
        city=payload.city,
    )


@router.get("/maps", response_model=MapListResponse)
async def list_maps(
    db: SessionDep,
    current_user: OptionalUserDep,
    page: Annotated[int, Query()] = 1,
    limit: Annotated[int | None, Query()] = None,
) -> MapListResponse:
    """List maps, newest first, with vote and location counts."""
    result = map_service.list_maps(db, page=page, limit=limit)
    ids = [map_.id for map_ in result.items]
    upvoted = vote_service.get_upvote_status(
        db, ids, current_user.id if current_user is not None else None
    )
    items = [
        MapSummary.model_validate(map_).model_copy(
            update={
                "vote_count": result.vote_counts.get(map_.id, 0),
                "location_count": result.location_counts.get(map_.id, 0),
                "has_upvoted": upvoted.get(map_.id, False),
            }
        )
        for map_ in result.items
    ]
    return MapListResponse(items=items, total=result.total, page=result.page, limit=result.limit)


@router.get("/my-maps", response_model=list[OwnedMapResponse])
async def list_my_maps(current_user: CurrentUserDep, db: SessionDep) -> list[OwnedMapResponse]:
    """List the caller's own maps with the number of submissions awaiting review."""
    return [
        OwnedMapResponse.model_validate(item.map).model_copy(
            update={"pending_count": item.pending_count}
        )
        for item in map_service.list_owned_maps(db, current_user)
    ]


@router.get("/maps/{slug}", response_model=MapResponse)
async def get_map(slug: str, db: SessionDep) -> Map:
    """Fetch a single map by its public slug."""
    return map_service.get_map_by_slug(db, slug)


@router.put("/maps/{map_id}", response_model=MapUpdateResponse)
async def update_map(
    map_id: str,
    payload: MapUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MapUpdateResponse:
    """Edit a map's title, short description and body (owner only).

    Returns:
        The map id, new title and the regenerated slug
    """
    map_ = map_service.update_map(
        db,
        map_id,
        current_user,
        payload.title,
        payload.short_description,
        payload.body,
    )
    return MapUpdateResponse(id=map_.id, title=map_.title, slug=map_.slug)


@router.post("/maps/{map_id}/upvote", response_model=UpvoteResponse)
async def upvote_map(map_id: str, current_user: CurrentUserDep, db: SessionDep) -> UpvoteResponse:
    """Upvote a map; repeating the call is a no-op."""
    created = vote_service.upvote(db, map_id, current_user.id)
    return UpvoteResponse(created=created)


@router.post(
    "/maps/{map_id}/locations",
    response_model=LocationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_map_location(
    map_id: str,
    payload: LocationSubmit,
    current_user: CurrentUserDep,
    db: SessionDep,
    place_search: PlaceSearchDep,
) -> Location:
    """Propose a location for a map; it stays pending until the owner decides."""
    return await submit_location(
        db,
        map_id,
        current_user,
        url=payload.url,
        query=payload.query,
        name=payload.name,
        note=payload.note,
        place_search=place_search,
    )


@router.get("/maps/{map_id}/locations", response_model=list[NearbyLocationResponse])
async def list_map_locations(
    map_id: str,
    db: SessionDep,
    lat: Annotated[float | None, Query(ge=-90, le=90)] = None,
    lng: Annotated[float | None, Query(ge=-180, le=180)] = None,
) -> list[NearbyLocationResponse]:
    """List approved locations, nearest first when ``lat``/``lng`` are given."""
    near = (lat, lng) if lat is not None and lng is not None else None
    return [
        NearbyLocationResponse.model_validate(item.location).model_copy(
            update={"distance_km": item.distance_km, "distance": item.distance_label}
        )
        for item in moderation_service.list_approved(db, map_id, near=near)
    ]


@router.get("/maps/{map_id}/pending", response_model=list[PendingSubmissionResponse])
async def list_pending(
    map_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> list[PendingSubmissionResponse]:
    """List submissions awaiting a decision (owner only)."""
    return [
        PendingSubmissionResponse(
            id=item.location.id,
            map_id=item.location.map_id,
            name=item.location.name,
            source_url=item.location.source_url,
            note=item.location.note,
            creator_id=item.location.creator_id,
            status=item.location.status,
            submitted_by=Submitter(
                first_name=item.submitter_first_name,
                last_name=item.submitter_last_name,
                picture_url=item.submitter_picture_url,
            ),
        )
        for item in moderation_service.list_pending(db, map_id, current_user)
    ]


@router.get("/maps/{map_id}/pending/count", response_model=PendingCount)
async def pending_count(map_id: str, db: SessionDep) -> PendingCount:
    """Return the number of pending submissions on a map."""
    return PendingCount(count=moderation_service.pending_count(db, map_id))


@router.post("/maps/{map_id}/import/google-list", response_model=ImportResponse)
async def import_google_list(
    map_id: str,
    payload: GoogleListImportRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
    fetcher: ListFetcherDep,
) -> ImportResponse:
    """Import every place of a shared Google Maps list into a map (owner only)."""
    map_ = map_service.get_map(db, map_id)
    if map_.owner_id != current_user.id:
        raise Forbidden("Only the map owner can import locations")
    parsed = await fetcher.fetch(payload.url)
    result = import_google_maps_list(db, map_id, current_user, parsed.locations)
    return ImportResponse(
        list_name=parsed.name,
        imported=result.imported,
        skipped=result.skipped,
        errors=result.errors,
    )
