# src/community_maps/api/v1/endpoints/votes.py
"""Vote-related endpoints for the Community Maps API."""

from fastapi import APIRouter

from community_maps.schemas.vote import UpvoteStatusRequest
from community_maps.services import votes as vote_service

from ..dependencies import OptionalUserDep, SessionDep

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("/status")
async def upvote_status(
    payload: UpvoteStatusRequest,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> dict[str, bool]:
    """Report, per map id, whether the caller has upvoted it.

    Anonymous callers get False for every id.
    """
    user_id = current_user.id if current_user is not None else None
    return vote_service.get_upvote_status(db, payload.map_ids, user_id)
