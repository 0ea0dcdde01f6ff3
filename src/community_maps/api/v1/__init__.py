# src/community_maps/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    locations_router,
    maps_router,
    system_router,
    uploads_router,
    users_router,
    votes_router,
)

__all__ = [
    "auth_router",
    "locations_router",
    "maps_router",
    "system_router",
    "uploads_router",
    "users_router",
    "votes_router",
]
