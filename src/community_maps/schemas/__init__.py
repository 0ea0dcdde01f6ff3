# src/community_maps/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .location import (
    GoogleListImportRequest,
    ImportResponse,
    LocationDetailResponse,
    LocationResponse,
    LocationSubmit,
    NearbyLocationResponse,
    PendingCount,
    PendingSubmissionResponse,
)
from .map import (
    MapCreate,
    MapListResponse,
    MapResponse,
    MapSummary,
    MapUpdate,
    MapUpdateResponse,
    OwnedMapResponse,
    SlugAvailability,
)
from .user import MeResponse, ProfileUpdateRequest, UserResponse
from .vote import LocationUpvoteResponse, UpvoteResponse, UpvoteStatusRequest

__all__ = [
    "GoogleListImportRequest", "ImportResponse", "LocationDetailResponse", "LocationResponse",
    "LocationSubmit", "NearbyLocationResponse", "PendingCount", "PendingSubmissionResponse",
    "MapCreate", "MapListResponse", "MapResponse", "MapSummary", "MapUpdate",
    "MapUpdateResponse", "OwnedMapResponse", "SlugAvailability",
    "MeResponse", "ProfileUpdateRequest", "UserResponse",
    "LocationUpvoteResponse", "UpvoteResponse", "UpvoteStatusRequest",
]
