"""Domain exceptions shared by services and the HTTP layer.

Services raise these; the application installs a single handler that turns
them into JSON error responses carrying ``status_code``.
"""

from __future__ import annotations

from fastapi import status


class MapsError(RuntimeError):
    """Base exception for all Community Maps failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "An unexpected error occurred"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(MapsError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class Unauthorized(MapsError):
    """No identity is attached to the request."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"


class ResolutionError(Unauthorized):
    """The identity could not be resolved; treated as unauthenticated."""

    default_detail = "Could not validate credentials"


class Forbidden(MapsError):
    """Identity present but lacking rights over the target entity."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You don't have permission to perform this action"


class NotFound(MapsError):
    """Referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class StorageError(MapsError):
    """The backing data store or object store failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Storage failure"


class UpstreamError(MapsError):
    """A third-party lookup (place search, Google Maps) failed."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Upstream service unavailable"
