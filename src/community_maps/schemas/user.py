"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    """Public profile information."""

    id: str
    email: str | None = None
    first_name: str
    last_name: str
    picture_url: str | None = None
    city: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MeResponse(BaseModel):
    """Profile of the signed-in user plus whether it was just created."""

    user: UserResponse
    is_new_user: bool


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; at least one field must be set."""

    first_name: str | None = Field(None, alias="firstName", max_length=100)
    last_name: str | None = Field(None, alias="lastName", max_length=100)
    city: str | None = Field(None, max_length=100)
    picture_url: str | None = Field(None, alias="pictureUrl")

    model_config = ConfigDict(populate_by_name=True)
