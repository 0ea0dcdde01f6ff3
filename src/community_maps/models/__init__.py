# src/community_maps/models/__init__.py
"""SQLAlchemy models for the Community Maps application."""

from .location import Location
from .location_vote import LocationVote
from .map import Map
from .user import User
from .vote import Vote

__all__ = [
    "Location",
    "LocationVote",
    "Map",
    "User",
    "Vote",
]
