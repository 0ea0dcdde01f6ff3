"""Coordinate extraction from Google Maps URLs and shared-list pages.

Shared lists embed each saved place in the page payload as::

    [null,null,LAT,LNG],["ID1","CID"],"/g/PLACE_ID"],"Place Name"

The CID (second half of the feature id pair) is the canonical identifier
and the only way to build a stable link, so entries without one are dropped.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from urllib.parse import parse_qs, unquote_plus, urlparse

import httpx

from community_maps.core.errors import UpstreamError, ValidationError
from community_maps.core.settings import settings

logger = logging.getLogger(__name__)

UINT64_MODULUS = 1 << 64
LOOKBEHIND_CHARS = 500

_AT_COORDS = re.compile(r"@(-?\d+(?:\.\d+)?),(-?\d+(?:\.\d+)?)")
_DATA_COORDS = re.compile(r"!3d(-?\d+(?:\.\d+)?)!4d(-?\d+(?:\.\d+)?)")
_PAIR = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$")

_PLACE_PATTERN = re.compile(r'/g/([A-Za-z0-9_-]+)"\],"([^"]+)"')
_CID_PATTERN = re.compile(r'\[\[?"?(-?\d{15,25})"?,\s*"?(-?\d{15,25})"?\]\]?(?=[^\]]*$)')
_COORD_PATTERN = re.compile(r"\[null,null,(-?\d+\.?\d*),(-?\d+\.?\d*)\]")
_LIST_NAME_PATTERNS = (
    re.compile(r'<meta\s+property="og:title"\s+content="([^"]+)"'),
    re.compile(r"<title>([^<]+)</title>"),
)
_PLUS_CODE_PREFIX = re.compile(r"^[A-Z0-9]{4}\+[A-Z0-9]+\s+(.+)$", re.IGNORECASE)
_ADDRESS_LIKE = re.compile(r"^(No\.?|Plot|Gate|Building|Floor|Block|Sector)\s*#?\d", re.IGNORECASE)


@dataclass(frozen=True)
class ExtractedPlace:
    """Coordinates (and the place name, if present) found in a map URL."""

    latitude: float
    longitude: float
    name: str | None = None


@dataclass(frozen=True)
class ParsedPlace:
    """A saved place recovered from a shared list."""

    name: str
    latitude: float
    longitude: float
    cid: str
    google_maps_url: str


@dataclass
class ParsedList:
    """Result of parsing one shared-list page."""

    locations: list[ParsedPlace] = field(default_factory=list)
    name: str | None = None
    found: int = 0
    with_cid: int = 0
    without_cid: int = 0


def coordinates_in_range(latitude: float, longitude: float) -> bool:
    """Return True for finite coordinates inside the valid lat/lng ranges."""
    return (
        math.isfinite(latitude)
        and math.isfinite(longitude)
        and -90 <= latitude <= 90
        and -180 <= longitude <= 180
    )


def cid_url(cid: str) -> str:
    """Return the canonical Google Maps link for a CID."""
    return f"https://maps.google.com/?cid={cid}"


def _place_name_from_path(path: str) -> str | None:
    parts = [part for part in path.split("/") if part]
    if "place" not in parts:
        return None
    index = parts.index("place")
    if index + 1 >= len(parts) or parts[index + 1].startswith("@"):
        return None
    name = unquote_plus(parts[index + 1]).strip()
    return name or None


def extract_coordinates(url: str) -> ExtractedPlace:
    """Pull a coordinate pair out of a Google Maps URL.

    Looks at, in order, the ``!3d..!4d..`` data fragment (the pin itself),
    the ``@lat,lng`` viewport, and the ``q``/``query``/``ll`` parameters.

    Raises:
        ValidationError: If no valid coordinate pair is present.
    """
    if not url or not url.strip().lower().startswith(("http://", "https://")):
        raise ValidationError("A Google Maps URL is required")

    parsed = urlparse(url.strip())
    name = _place_name_from_path(parsed.path)
    haystack = unquote_plus(f"{parsed.path}{parsed.fragment and '#' + parsed.fragment}")

    candidates: list[tuple[str, str]] = []
    for pattern in (_DATA_COORDS, _AT_COORDS):
        match = pattern.search(haystack)
        if match:
            candidates.append((match.group(1), match.group(2)))

    params = parse_qs(parsed.query)
    fragment_params = parse_qs(parsed.fragment)
    for key in ("q", "query", "ll"):
        for value in params.get(key, []) + fragment_params.get(key, []):
            match = _PAIR.match(value)
            if match:
                candidates.append((match.group(1), match.group(2)))

    for raw_lat, raw_lng in candidates:
        latitude, longitude = float(raw_lat), float(raw_lng)
        if coordinates_in_range(latitude, longitude):
            return ExtractedPlace(latitude=latitude, longitude=longitude, name=name)

    raise ValidationError("Could not extract valid coordinates from the Google Maps URL")


def is_valid_place_name(name: str) -> bool:
    """Heuristically reject address fragments and payload noise."""
    if len(name) < 2 or len(name) > 100:
        return False
    if name.isdigit():
        return False
    if _ADDRESS_LIKE.match(name):
        return False
    if re.match(r"^\d+[/\-,\s]", name):
        return False
    if name.startswith(("http", "/")):
        return False
    return "null" not in name and "\\u" not in name


def clean_place_name(name: str) -> str:
    """Strip a leading plus code (``"WH8X+Q46 Cafe"`` -> ``"Cafe"``)."""
    match = _PLUS_CODE_PREFIX.match(name)
    if match:
        return match.group(1)
    return name.strip()


def _unsigned_cid(cid: str) -> str:
    value = int(cid)
    if value < 0:
        value += UINT64_MODULUS
    return str(value)


def _extract_list_name(html: str) -> str | None:
    for pattern in _LIST_NAME_PATTERNS:
        match = pattern.search(html)
        if match:
            name = match.group(1).replace(" - Google Maps", "").strip()
            if name:
                return name
    return None


def parse_list_html(html: str) -> ParsedList:
    """Extract saved places from a shared-list page."""
    result = ParsedList(name=_extract_list_name(html))
    seen: set[str] = set()

    for match in _PLACE_PATTERN.finditer(html):
        result.found += 1
        name = match.group(2)
        if not is_valid_place_name(name):
            continue

        before = html[max(0, match.start() - LOOKBEHIND_CHARS):match.start()]
        cid_match = _CID_PATTERN.search(before)
        if cid_match is None:
            result.without_cid += 1
            logger.debug("No CID found for %s", name)
            continue

        # Nearest pair preceding the name belongs to this place.
        coord_matches = list(_COORD_PATTERN.finditer(before))
        coord_match = coord_matches[-1] if coord_matches else None
        if coord_match is None:
            result.without_cid += 1
            logger.debug("No coordinates found for %s", name)
            continue

        latitude, longitude = float(coord_match.group(1)), float(coord_match.group(2))
        if not coordinates_in_range(latitude, longitude):
            result.without_cid += 1
            continue

        cid = _unsigned_cid(cid_match.group(2))
        if cid in seen:
            continue
        seen.add(cid)

        result.with_cid += 1
        result.locations.append(
            ParsedPlace(
                name=clean_place_name(name),
                latitude=latitude,
                longitude=longitude,
                cid=cid,
                google_maps_url=cid_url(cid),
            )
        )

    logger.info(
        "Parsed Google Maps list: %d candidates, %d with CID, %d without",
        result.found,
        result.with_cid,
        result.without_cid,
    )
    return result


class GoogleMapsListFetcher:
    """Fetch and parse a shared Google Maps list."""

    def __init__(
        self,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout if timeout is not None else settings.google_maps_timeout_seconds
        self._transport = transport

    @staticmethod
    def _check_url(url: str) -> None:
        if "maps.app.goo.gl" not in url and "google.com/maps" not in url:
            raise ValidationError("Invalid URL. Please provide a Google Maps list URL.")

    async def fetch(self, url: str) -> ParsedList:
        """Download ``url`` (following short-link redirects) and parse it.

        Raises:
            ValidationError: For non-Google-Maps URLs or lists with no places.
            UpstreamError: If the page cannot be fetched.
        """
        self._check_url(url)
        headers = {
            "User-Agent": settings.google_maps_user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url, headers=headers)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Failed to fetch Google Maps list %s: %s", url, exc)
            raise UpstreamError(
                "Failed to fetch the Google Maps list. It may be private or unavailable."
            ) from exc

        parsed = parse_list_html(response.text)
        if not parsed.locations:
            raise ValidationError("No locations found in this list. It may be empty or private.")
        return parsed
