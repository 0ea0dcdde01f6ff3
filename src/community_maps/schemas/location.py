"""Location-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class LocationSubmit(BaseModel):
    """Schema for proposing a location; give either ``url`` or ``query``."""

    url: str | None = Field(None, description="Google Maps link with embedded coordinates")
    query: str | None = Field(None, description="Free-text place search")
    name: str | None = Field(None, max_length=200)
    note: str | None = Field(None, max_length=2000)


class LocationResponse(BaseModel):
    """Schema for location information returned by the API."""

    id: str
    map_id: str
    creator_id: str
    name: str
    latitude: float
    longitude: float
    source_url: str
    note: str | None
    status: Literal["pending", "approved", "rejected"]
    is_approved: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NearbyLocationResponse(LocationResponse):
    """Approved location with an optional distance from the caller."""

    distance_km: float | None = None
    distance: str | None = None


class LocationDetailResponse(LocationResponse):
    """A single location with its upvote total and the caller's vote."""

    upvotes: int = 0
    has_upvoted: bool = False


class Submitter(BaseModel):
    """Public fields of the user who submitted a location."""

    first_name: str | None
    last_name: str | None
    picture_url: str | None


class PendingSubmissionResponse(BaseModel):
    """Pending location joined with its submitter."""

    id: str
    map_id: str
    name: str
    source_url: str
    note: str | None
    creator_id: str
    status: str
    submitted_by: Submitter


class PendingCount(BaseModel):
    """Number of locations awaiting moderation."""

    count: int


class GoogleListImportRequest(BaseModel):
    """Shared Google Maps list to import."""

    url: str


class ImportResponse(BaseModel):
    """Outcome of a bulk import."""

    list_name: str | None = None
    imported: int
    skipped: int
    errors: list[str]
