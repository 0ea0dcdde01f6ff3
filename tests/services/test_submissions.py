# mypy: ignore-errors
# tests/services/test_submissions.py
"""Tests for the location submission pipeline."""

import httpx
import pytest

from community_maps.core.errors import Forbidden, NotFound, ValidationError
from community_maps.models.location import LOCATION_STATUS_PENDING
from community_maps.services.google_maps import ParsedPlace
from community_maps.services.places import PlaceSearchClient
from community_maps.services.submissions import (
    import_google_maps_list,
    submit_location,
    validate_coordinates,
)

PLACE_URL = "https://www.google.com/maps/place/Corner+House/@12.9719,77.6412,17z"


def _place_search(payload):
    return PlaceSearchClient(
        base_url="https://places.test",
        api_key="k",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=payload)),
    )


@pytest.mark.parametrize(
    ("lat", "lng"),
    [(91, 0), (-90.5, 0), (0, 180.01), (0, -181), ("abc", 1), (None, 1), (float("nan"), 0)],
)
def test_validate_coordinates_rejects_bad_values(lat, lng) -> None:
    with pytest.raises(ValidationError):
        validate_coordinates(lat, lng)


def test_validate_coordinates_accepts_bounds() -> None:
    assert validate_coordinates("90", -180) == (90.0, -180.0)


@pytest.mark.asyncio
async def test_submit_from_url_is_pending(db_session, test_map, other_user) -> None:
    location = await submit_location(db_session, test_map.id, other_user, url=PLACE_URL, note="  Great cake ")

    assert location.status == LOCATION_STATUS_PENDING
    assert location.is_approved is False
    assert location.name == "Corner House"
    assert (location.latitude, location.longitude) == (12.9719, 77.6412)
    assert location.note == "Great cake"
    assert location.creator_id == other_user.id


@pytest.mark.asyncio
async def test_owner_submission_is_also_pending(db_session, test_map, test_user) -> None:
    location = await submit_location(db_session, test_map.id, test_user, url=PLACE_URL)
    assert location.status == LOCATION_STATUS_PENDING


@pytest.mark.asyncio
async def test_explicit_name_overrides_url_name(db_session, test_map, other_user) -> None:
    location = await submit_location(db_session, test_map.id, other_user, url=PLACE_URL, name="CH Indiranagar")
    assert location.name == "CH Indiranagar"


@pytest.mark.asyncio
async def test_url_without_name_requires_one(db_session, test_map, other_user) -> None:
    with pytest.raises(ValidationError):
        await submit_location(
            db_session, test_map.id, other_user, url="https://www.google.com/maps/@12.97,77.64,15z"
        )


@pytest.mark.asyncio
async def test_url_with_out_of_range_coordinates(db_session, test_map, other_user) -> None:
    with pytest.raises(ValidationError):
        await submit_location(
            db_session,
            test_map.id,
            other_user,
            url="https://www.google.com/maps/place/Nowhere/@123.0,77.0,15z",
        )


@pytest.mark.asyncio
async def test_requires_exactly_one_source(db_session, test_map, other_user) -> None:
    with pytest.raises(ValidationError):
        await submit_location(db_session, test_map.id, other_user)
    with pytest.raises(ValidationError):
        await submit_location(db_session, test_map.id, other_user, url=PLACE_URL, query="Corner House")


@pytest.mark.asyncio
async def test_unknown_map(db_session, other_user) -> None:
    with pytest.raises(NotFound):
        await submit_location(db_session, "missing-map", other_user, url=PLACE_URL)


@pytest.mark.asyncio
async def test_submit_from_query(db_session, test_map, other_user) -> None:
    search = _place_search(
        {
            "status": "OK",
            "candidates": [
                {
                    "name": "Vidyarthi Bhavan",
                    "place_id": "ChIJvb",
                    "geometry": {"location": {"lat": 12.9453, "lng": 77.5713}},
                }
            ],
        }
    )
    location = await submit_location(
        db_session, test_map.id, other_user, query="vidyarthi bhavan", place_search=search
    )
    assert location.name == "Vidyarthi Bhavan"
    assert location.source_url.endswith("place_id:ChIJvb")
    assert location.status == LOCATION_STATUS_PENDING


@pytest.mark.asyncio
async def test_query_without_result(db_session, test_map, other_user) -> None:
    search = _place_search({"status": "ZERO_RESULTS", "candidates": []})
    with pytest.raises(ValidationError):
        await submit_location(db_session, test_map.id, other_user, query="zzzz", place_search=search)


@pytest.mark.asyncio
async def test_duplicate_url_is_rejected(db_session, test_map, other_user) -> None:
    await submit_location(db_session, test_map.id, other_user, url=PLACE_URL)
    with pytest.raises(ValidationError):
        await submit_location(db_session, test_map.id, other_user, url=PLACE_URL)


@pytest.mark.asyncio
async def test_same_name_within_tolerance_is_duplicate(db_session, test_map, other_user) -> None:
    await submit_location(db_session, test_map.id, other_user, url=PLACE_URL)
    nearly_same = "https://www.google.com/maps/place/Corner+House/@12.971901,77.641201,19z"
    with pytest.raises(ValidationError):
        await submit_location(db_session, test_map.id, other_user, url=nearly_same)


@pytest.mark.asyncio
async def test_same_name_far_apart_is_allowed(db_session, test_map, other_user) -> None:
    await submit_location(db_session, test_map.id, other_user, url=PLACE_URL)
    branch = "https://www.google.com/maps/place/Corner+House/@12.9352,77.6245,17z"
    location = await submit_location(db_session, test_map.id, other_user, url=branch)
    assert location.latitude == 12.9352


def _parsed(name, cid, lat=12.97, lng=77.59):
    return ParsedPlace(
        name=name,
        latitude=lat,
        longitude=lng,
        cid=cid,
        google_maps_url=f"https://maps.google.com/?cid={cid}",
    )


def test_import_counts_imported_and_skipped(db_session, test_map, test_user) -> None:
    places = [
        _parsed("Blue Tokai", "1"),
        _parsed("Blue Tokai", "1"),
        _parsed("Matteo", "2", lat=12.98, lng=77.6),
    ]
    result = import_google_maps_list(db_session, test_map.id, test_user, places)

    assert result.imported == 2
    assert result.skipped == 1
    assert result.errors and "Blue Tokai" in result.errors[0]


def test_import_is_owner_only(db_session, test_map, other_user) -> None:
    with pytest.raises(Forbidden):
        import_google_maps_list(db_session, test_map.id, other_user, [_parsed("X", "9")])


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("lat", "lng"),
    [(-90, -180), (90, 180), (0, 0), (45.123456, -122.5), (-33.8688, 151.2093)],
)
async def test_url_coordinates_stored_exactly(db_session, test_map, other_user, lat, lng) -> None:
    url = f"https://www.google.com/maps/place/Pin/@{lat},{lng},17z"
    location = await submit_location(db_session, test_map.id, other_user, url=url)
    assert (location.latitude, location.longitude) == (float(lat), float(lng))
