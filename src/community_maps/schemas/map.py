"""Map-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MapCreate(BaseModel):
    """Schema for creating a new map.

    Fields are optional at the schema level so that missing values surface
    as a 400 from the repository rather than a 422 from request parsing.
    """

    title: str | None = None
    short_description: str | None = Field(None, alias="shortDescription")
    body: str | None = None
    display_picture: str | None = Field(None, alias="displayPicture")
    slug: str | None = None
    city: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class MapUpdate(BaseModel):
    """Schema for editing a map's text fields."""

    title: str | None = None
    short_description: str | None = Field(None, alias="shortDescription")
    body: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class MapUpdateResponse(BaseModel):
    """Minimal payload returned after an edit."""

    id: str
    title: str
    slug: str


class MapResponse(BaseModel):
    """Schema for map information returned by the API."""

    id: str
    title: str
    slug: str
    short_description: str
    body: str
    display_picture: str | None
    city: str | None
    owner_id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MapSummary(MapResponse):
    """Map listing entry with aggregate counts."""

    vote_count: int = 0
    location_count: int = 0
    has_upvoted: bool = False


class OwnedMapResponse(MapResponse):
    """One of the caller's own maps with its review backlog."""

    pending_count: int = 0


class MapListResponse(BaseModel):
    """A page of maps."""

    items: list[MapSummary]
    total: int
    page: int
    limit: int


class SlugAvailability(BaseModel):
    """Result of a slug availability check."""

    available: bool
