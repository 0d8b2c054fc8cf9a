import json
from typing import Dict, List, Optional

import pytest

from pawpath.config import Settings
from pawpath.models.request import Coordinates, RoutePreferences
from pawpath.models.response import (
    DirectionStep,
    DirectionsResult,
    GeocodeResult,
    PointOfInterest,
    Waypoint,
)
from pawpath.models.walk import WalkRecord
from pawpath.services.map.map_service import MapService
from pawpath.services.walk_store import WalkStore

ORIGIN = Coordinates(lat=51.5007, lng=-0.1246)


class StubMapService(MapService):
    def __init__(
        self,
        *,
        geocode_result: Optional[GeocodeResult] = None,
        places: Optional[List[PointOfInterest]] = None,
        directions: Optional[DirectionsResult] = None,
        geocode_error: Optional[Exception] = None,
    ):
        self.geocode_result = geocode_result
        self.places = places if places is not None else []
        self.directions = directions
        self.geocode_error = geocode_error
        self.calls: Dict[str, list] = {"geocode": [], "places": [], "directions": []}

    async def geocode(self, text):
        self.calls["geocode"].append(text)
        if self.geocode_error is not None:
            raise self.geocode_error
        return self.geocode_result

    async def find_nearby_places(self, center, radius_m, category=None):
        self.calls["places"].append((center, radius_m, category))
        return [p for p in self.places if category is None or category in p.category_tags]

    async def get_directions(self, waypoints):
        self.calls["directions"].append(list(waypoints))
        return self.directions


class StubLLMClient:
    def __init__(self, payload=None, *, text: Optional[str] = None, error: Optional[Exception] = None):
        self.text = text if text is not None else json.dumps(payload)
        self.error = error
        self.received = []

    def complete(self, system_prompt, user_prompt, *, temperature, max_tokens):
        self.received.append(
            {"system": system_prompt, "user": user_prompt, "temperature": temperature, "max_tokens": max_tokens}
        )
        if self.error is not None:
            raise self.error
        return self.text


class StubWalkStore(WalkStore):
    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.inserted: List[WalkRecord] = []

    def insert_walk(self, walk):
        if self.error is not None:
            raise self.error
        self.inserted.append(walk)
        return walk.model_copy(update={"id": f"walk-{len(self.inserted)}"})


def make_poi(place_id, name, lat, lng, tags, rating=None, distance=None):
    return PointOfInterest(
        place_id=place_id,
        name=name,
        location=Coordinates(lat=lat, lng=lng),
        category_tags=set(tags),
        rating=rating,
        distance_from_origin_m=distance,
    )


@pytest.fixture
def settings_enabled():
    return Settings(
        ai_recommendations_enabled=True,
        google_maps_api_key="test-maps-key",
        openai_api_key="test-openai-key",
    )


@pytest.fixture
def geocoded():
    return GeocodeResult(
        coordinates=ORIGIN,
        formatted_address="Riverside Town, London, UK",
        place_id="geo-1",
    )


@pytest.fixture
def candidates():
    return [
        make_poi("park-1", "Riverside Park", 51.503, -0.12, ["park"], 4.6, 420.0),
        make_poi("cafe-1", "Bark & Brew Cafe, High Street", 51.5021, -0.1201, ["cafe"], 4.4, 380.0),
        make_poi("dog-1", "Meadow Dog Park", 51.4991, -0.1302, ["dog_park", "park"], None, 510.0),
        make_poi("water-1", "Thames Beach", 51.5052, -0.1188, ["water"], 4.1, 700.0),
        make_poi("cafe-2", "Corner Coffee", 51.4985, -0.121, ["cafe"], None, 460.0),
    ]


@pytest.fixture
def directions():
    return DirectionsResult(
        total_distance_meters=3240,
        total_duration_seconds=2460,
        start_address="Riverside Town, London, UK",
        end_address="Riverside Town, London, UK",
        encoded_polyline="_p~iF~ps|U_ulLnnqC",
        steps=[
            DirectionStep(
                distance_meters=3240,
                duration_seconds=2460,
                instruction_text="Head north on River Walk",
                start_location=ORIGIN,
                end_location=ORIGIN,
                polyline_segment="_p~iF~ps|U",
            )
        ],
    )


@pytest.fixture
def cafe_plan_payload():
    return {
        "routeName": "Riverside Coffee Loop",
        "waypoints": [
            {"lat": 51.5, "lng": -0.12, "name": "Start", "role": "start"},
            {"lat": 51.503, "lng": -0.12, "name": "Riverside Park", "role": "poi", "category": "park", "placeId": "park-1"},
            {"lat": 51.5021, "lng": -0.1201, "name": "Bark & Brew Cafe, High Street", "role": "poi", "category": "cafe"},
            {"lat": 51.5, "lng": -0.12, "name": "End", "role": "end"},
        ],
        "dogFriendlyNotes": "Water bowls outside the cafe.",
        "reasoning": "Park first, then coffee on the way back.",
    }


@pytest.fixture
def cafe_prefs():
    return RoutePreferences(target_distance_km=3, must_include={"cafe"}, circular=True)


def start_end(origin=ORIGIN):
    return [
        Waypoint(lat=origin.lat, lng=origin.lng, name="Start", role="start"),
        Waypoint(lat=origin.lat, lng=origin.lng, name="End", role="end"),
    ]
