"""Free-text place lookup against the Places "find place" endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from community_maps.core.errors import UpstreamError
from community_maps.core.settings import settings

logger = logging.getLogger(__name__)

FIND_PLACE_FIELDS = "geometry,name,place_id"


@dataclass(frozen=True)
class PlaceCandidate:
    """First match returned by a place search."""

    name: str
    place_id: str | None
    latitude: float | None
    longitude: float | None

    @property
    def has_geometry(self) -> bool:
        """Return True when the candidate carries a coordinate pair."""
        return self.latitude is not None and self.longitude is not None

    @property
    def google_maps_url(self) -> str:
        """Return a stable link for the place."""
        if self.place_id:
            return f"https://www.google.com/maps/place/?q=place_id:{self.place_id}"
        return f"https://www.google.com/maps/@{self.latitude},{self.longitude},17z"


class PlaceSearchClient:
    """Thin async client over the place-search HTTP API."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.places_base_url).rstrip("/")
        self._api_key = api_key if api_key is not None else settings.places_api_key
        self._timeout = timeout if timeout is not None else settings.places_timeout_seconds
        self._transport = transport

    @staticmethod
    def _to_candidate(raw: dict[str, Any], query: str) -> PlaceCandidate:
        location = (raw.get("geometry") or {}).get("location") or {}
        lat = location.get("lat")
        lng = location.get("lng")
        return PlaceCandidate(
            name=raw.get("name") or query,
            place_id=raw.get("place_id"),
            latitude=float(lat) if lat is not None else None,
            longitude=float(lng) if lng is not None else None,
        )

    async def find_place(self, query: str) -> PlaceCandidate | None:
        """Return the first candidate for ``query``, or None if nothing matched.

        Raises:
            UpstreamError: On transport failures or an error status from the API.
        """
        params = {
            "input": query,
            "inputtype": "textquery",
            "fields": FIND_PLACE_FIELDS,
        }
        if self._api_key:
            params["key"] = self._api_key

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    f"{self._base_url}/findplacefromtext/json", params=params
                )
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Place search failed for %r: %s", query, exc)
            raise UpstreamError("Place search is unavailable") from exc

        api_status = payload.get("status", "OK")
        if api_status == "ZERO_RESULTS":
            return None
        if api_status != "OK":
            logger.warning("Place search returned status %s for %r", api_status, query)
            raise UpstreamError(f"Place search failed with status {api_status}")

        candidates = payload.get("candidates") or []
        if not candidates:
            return None
        return self._to_candidate(candidates[0], query)


def get_place_search_client() -> PlaceSearchClient:
    """Return a client configured from settings."""
    return PlaceSearchClient()
