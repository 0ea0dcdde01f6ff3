# src/community_maps/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .locations import router as locations_router
from .maps import router as maps_router
from .system import router as system_router
from .uploads import router as uploads_router
from .users import router as users_router
from .votes import router as votes_router

__all__ = [
    "auth_router",
    "locations_router",
    "maps_router",
    "system_router",
    "uploads_router",
    "users_router",
    "votes_router",
]
