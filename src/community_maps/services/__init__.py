"""Business logic services for the Community Maps application."""

from .google_maps import GoogleMapsListFetcher
from .moderation import ModerationService
from .places import PlaceSearchClient
from .storage import LocalObjectStorage

__all__ = [
    "GoogleMapsListFetcher",
    "LocalObjectStorage",
    "ModerationService",
    "PlaceSearchClient",
]
