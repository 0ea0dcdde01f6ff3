# src/community_maps/api/v1/endpoints/auth.py
"""Authentication endpoints for the Community Maps API."""

from fastapi import APIRouter

from community_maps.schemas.user import MeResponse, UserResponse

from ..dependencies import ResolvedIdentityDep

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.get("/me", response_model=MeResponse)
async def read_me(resolved: ResolvedIdentityDep) -> MeResponse:
    """Return the caller's profile, creating it on first sign-in.

    Args:
        resolved: Identity resolved from the bearer token

    Returns:
        The local user record and whether it was created by this request
    """
    return MeResponse(
        user=UserResponse.model_validate(resolved.user),
        is_new_user=resolved.is_new_user,
    )
