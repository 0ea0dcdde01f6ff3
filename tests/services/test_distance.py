# mypy: ignore-errors
# tests/services/test_distance.py
"""Tests for Haversine distance and its display format."""

import pytest

from community_maps.utils import distance_km, format_distance


def test_same_point_is_zero() -> None:
    assert distance_km(12.9716, 77.5946, 12.9716, 77.5946) == pytest.approx(0.0)


def test_one_degree_of_longitude_at_equator() -> None:
    assert distance_km(0, 0, 0, 1) == pytest.approx(111.195, rel=1e-3)


def test_distance_is_symmetric() -> None:
    a = distance_km(12.9716, 77.5946, 13.0827, 80.2707)
    b = distance_km(13.0827, 80.2707, 12.9716, 77.5946)
    assert a == pytest.approx(b)
    # Bangalore to Chennai
    assert 280 < a < 300


@pytest.mark.parametrize(
    ("km", "expected"),
    [
        (0.0, "0 m"),
        (0.85, "850 m"),
        (0.9994, "999 m"),
        (1.0, "1.0 km"),
        (1.234, "1.2 km"),
        (12.96, "13.0 km"),
    ],
)
def test_format_distance(km, expected) -> None:
    assert format_distance(km) == expected
