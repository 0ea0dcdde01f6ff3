# src/community_maps/api/v1/endpoints/locations.py
"""Endpoints for individual locations: details, upvotes and moderation."""

from fastapi import APIRouter, status

from community_maps.models import Location
from community_maps.schemas.location import LocationDetailResponse, LocationResponse
from community_maps.schemas.vote import LocationUpvoteResponse
from community_maps.services import location_votes
from community_maps.services.moderation import moderation_service

from ..dependencies import CurrentUserDep, OptionalUserDep, SessionDep

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("/{location_id}", response_model=LocationDetailResponse)
async def get_location(
    location_id: str,
    db: SessionDep,
    current_user: OptionalUserDep,
) -> LocationDetailResponse:
    """Fetch one location with its upvote count and whether the caller upvoted it."""
    details = location_votes.get_location_details(
        db, location_id, current_user.id if current_user is not None else None
    )
    return LocationDetailResponse.model_validate(details.location).model_copy(
        update={"upvotes": details.upvotes, "has_upvoted": details.has_upvoted}
    )


@router.post("/{location_id}/upvote", response_model=LocationUpvoteResponse)
async def toggle_location_upvote(
    location_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> LocationUpvoteResponse:
    """Add the caller's upvote to a location, or remove it if already present."""
    return LocationUpvoteResponse(
        is_upvoted=location_votes.toggle_upvote(db, location_id, current_user.id)
    )


@router.post("/{location_id}/approve", response_model=LocationResponse)
async def approve_location(
    location_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Location:
    """Approve a submission on a map the caller owns."""
    return moderation_service.approve(db, location_id, current_user)


@router.post("/{location_id}/reject", response_model=LocationResponse)
async def reject_location(
    location_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Location:
    """Reject a submission on a map the caller owns."""
    return moderation_service.reject(db, location_id, current_user)


@router.delete("/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_location(
    location_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> None:
    """Permanently remove a location from a map the caller owns."""
    moderation_service.delete(db, location_id, current_user)
