import pytest

from pawpath.models.response import DirectionsResult, RouteRecommendation, Waypoint
from pawpath.services.route_service import build_walk_record
from pawpath.services.walk_conversion import (
    classify_difficulty,
    derive_duration_minutes,
    estimate_duration_minutes,
    parse_distance_label,
)


@pytest.mark.parametrize(
    "label, expected",
    [
        ("2.5 km", 2.5),
        ("2.5km", 2.5),
        ("5 KM", 5.0),
        (" 3.2 Km ", 3.2),
        ("7", 7.0),
        ("bogus", 0.0),
        ("", 0.0),
        (None, 0.0),
        ("nan km", 0.0),
    ],
)
def test_parse_distance_label(label, expected):
    assert parse_distance_label(label) == expected


@pytest.mark.parametrize(
    "distance_km, expected",
    [
        (2.9, "easy"),
        (3, "moderate"),
        (6, "moderate"),
        (6.1, "hard"),
        (0, "easy"),
        (-1, "easy"),
    ],
)
def test_classify_difficulty(distance_km, expected):
    assert classify_difficulty(distance_km) == expected


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (1800, 30),
        (1850, 31),
        (1820, 30),
        (1830, 31),
        (None, 0),
        (0, 0),
        (float("nan"), 0),
        (float("inf"), 0),
    ],
)
def test_derive_duration_minutes(seconds, expected):
    assert derive_duration_minutes(seconds) == expected


def test_estimate_duration_assumes_five_km_per_hour():
    assert estimate_duration_minutes(2.5) == 30
    assert estimate_duration_minutes(0) == 0


def _route(label, directions=None, highlights="Via Riverside Park"):
    return RouteRecommendation(
        route_name="Riverside Park Loop (3km)",
        waypoints=[
            Waypoint(lat=51.5, lng=-0.1, name="Start", role="start"),
            Waypoint(lat=51.51, lng=-0.11, name="Riverside Park", role="poi", category="park"),
            Waypoint(lat=51.5, lng=-0.1, name="End", role="end"),
        ],
        estimated_distance_label=label,
        highlights_text=highlights,
        directions=directions,
    )


def test_build_walk_record_uses_directions_duration():
    directions = DirectionsResult(total_distance_meters=2500, total_duration_seconds=1800)
    record = build_walk_record(_route("2.5 km", directions), "user-123")

    assert record.name == "Riverside Park Loop (3km)"
    assert record.distance_km == 2.5
    assert record.duration_minutes == 30
    assert record.difficulty == "easy"
    assert record.notes == "Via Riverside Park"
    assert record.owner_id == "user-123"


def test_build_walk_record_estimates_duration_without_directions():
    record = build_walk_record(_route("4.5km"), "user-123")

    assert record.duration_minutes == 54
    assert record.difficulty == "moderate"


def test_build_walk_record_with_unparseable_label():
    record = build_walk_record(_route("about a mile"), "user-123")

    assert record.distance_km == 0
    assert record.duration_minutes == 0
    assert record.difficulty == "easy"
