"""Pure helper functions."""

from .distance import distance_km, format_distance

__all__ = ["distance_km", "format_distance"]
