"""Vote-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class UpvoteResponse(BaseModel):
    """Result of an upvote; ``created`` is False for a repeat."""

    upvoted: bool = True
    created: bool


class UpvoteStatusRequest(BaseModel):
    """Batch of maps to check."""

    map_ids: list[str] = Field(..., alias="mapIds", max_length=200)

    model_config = ConfigDict(populate_by_name=True)


class LocationUpvoteResponse(BaseModel):
    """State of the caller's upvote after a toggle."""

    is_upvoted: bool
