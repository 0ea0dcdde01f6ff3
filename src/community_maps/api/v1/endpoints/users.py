# src/community_maps/api/v1/endpoints/users.py
"""User profile endpoints."""

from fastapi import APIRouter

from community_maps.models import User
from community_maps.schemas.user import ProfileUpdateRequest, UserResponse
from community_maps.services.identity import update_profile

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/users", tags=["users"])


@router.patch("/me", response_model=UserResponse)
async def update_me(
    payload: ProfileUpdateRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> User:
    """Update the signed-in user's profile."""
    return update_profile(
        db,
        current_user,
        first_name=payload.first_name,
        last_name=payload.last_name,
        city=payload.city,
        picture_url=payload.picture_url,
    )
