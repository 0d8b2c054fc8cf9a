import json
import random
from collections import Counter

import pytest

from pawpath.models.request import RoutePreferences
from pawpath.services.nlp.llm_client import LLMServiceError
from pawpath.services.route.errors import AIServiceError
from pawpath.services.route.waypoint_selector import WaypointSelector, shuffle_candidates

from conftest import ORIGIN, StubLLMClient, make_poi


@pytest.mark.parametrize(
    "items",
    [[], [1], [1, 2], list(range(10)), ["a", "b", "a", "c", "b"], list(range(50))],
)
def test_shuffle_is_a_permutation(items):
    shuffled = shuffle_candidates(items)

    assert len(shuffled) == len(items)
    assert Counter(shuffled) == Counter(items)


def test_shuffle_does_not_mutate_input():
    items = list(range(20))
    shuffle_candidates(items, random.Random(7))
    assert items == list(range(20))


def test_shuffle_orderings_vary_between_calls():
    items = list(range(20))
    orderings = {tuple(shuffle_candidates(items)) for _ in range(10)}
    assert len(orderings) > 1


@pytest.mark.asyncio
async def test_select_anchors_circular_route_and_recovers_place_ids(
    settings_enabled, candidates, cafe_plan_payload, cafe_prefs
):
    llm = StubLLMClient(cafe_plan_payload)
    selector = WaypointSelector(llm_client=llm, config=settings_enabled)

    waypoints = await selector.select(ORIGIN, candidates, cafe_prefs, "Riverside Town, London, UK")

    assert (waypoints[0].lat, waypoints[0].lng) == (ORIGIN.lat, ORIGIN.lng)
    assert (waypoints[-1].lat, waypoints[-1].lng) == (ORIGIN.lat, ORIGIN.lng)
    assert [wp.role for wp in waypoints] == ["start", "poi", "poi", "end"]
    # Cafe came back without an id and was matched by coordinates
    assert waypoints[2].place_id == "cafe-1"
    assert waypoints[1].place_id == "park-1"


@pytest.mark.asyncio
async def test_select_leaves_unknown_place_id_absent(settings_enabled, candidates, cafe_prefs):
    payload = {
        "waypoints": [
            {"lat": 51.5, "lng": -0.12, "name": "Start", "role": "start"},
            {"lat": 51.6, "lng": -0.2, "name": "Mystery Meadow", "role": "poi", "category": "park"},
            {"lat": 51.5, "lng": -0.12, "name": "End", "role": "end"},
        ]
    }
    selector = WaypointSelector(llm_client=StubLLMClient(payload), config=settings_enabled)

    waypoints = await selector.select(ORIGIN, candidates, cafe_prefs, "Riverside Town")

    assert waypoints[1].place_id is None


@pytest.mark.asyncio
async def test_select_keeps_model_end_point_for_one_way_routes(settings_enabled, candidates):
    payload = {
        "waypoints": [
            {"lat": 51.5, "lng": -0.12, "name": "Start", "role": "start"},
            {"lat": 51.503, "lng": -0.12, "name": "Riverside Park", "role": "poi", "placeId": "park-1"},
            {"lat": 51.5052, "lng": -0.1188, "name": "Thames Beach", "role": "end"},
        ]
    }
    prefs = RoutePreferences(target_distance_km=2, circular=False)
    selector = WaypointSelector(llm_client=StubLLMClient(payload), config=settings_enabled)

    waypoints = await selector.select(ORIGIN, candidates, prefs, "Riverside Town")

    assert (waypoints[0].lat, waypoints[0].lng) == (ORIGIN.lat, ORIGIN.lng)
    assert (waypoints[-1].lat, waypoints[-1].lng) == (51.5052, -0.1188)


@pytest.mark.asyncio
async def test_prompt_is_limited_to_budget(settings_enabled, cafe_plan_payload, cafe_prefs):
    many = [
        make_poi(f"park-{i}", f"Park Number {i}", 51.5 + i / 1000, -0.12, ["park"])
        for i in range(30)
    ]
    llm = StubLLMClient(cafe_plan_payload)
    selector = WaypointSelector(llm_client=llm, config=settings_enabled)

    await selector.select(ORIGIN, many, cafe_prefs, "Riverside Town")

    prompt = llm.received[0]["user"]
    listed = [line for line in prompt.splitlines() if "placeId: park-" in line]
    assert len(listed) == settings_enabled.poi_prompt_limit
    assert "Must include categories: cafe" in prompt
    assert "between 2.7km and 3.3km" in prompt
    assert llm.received[0]["temperature"] == settings_enabled.llm_temperature
    assert llm.received[0]["max_tokens"] == settings_enabled.llm_max_tokens


@pytest.mark.asyncio
async def test_prompt_describes_candidates(settings_enabled, candidates, cafe_plan_payload, cafe_prefs):
    llm = StubLLMClient(cafe_plan_payload)
    selector = WaypointSelector(llm_client=llm, config=settings_enabled)

    await selector.select(ORIGIN, candidates, cafe_prefs, "Riverside Town, London, UK")

    prompt = llm.received[0]["user"]
    assert "Riverside Town, London, UK" in prompt
    assert "Riverside Park [park] - 420m from start, 4.6 stars" in prompt
    assert "Corner Coffee [cafe] - 460m from start, no rating" in prompt
    assert "placeId: dog-1" in prompt


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "text",
    [
        "Sorry, I can't help with that.",
        json.dumps({"waypoints": [{"lat": 51.5, "lng": -0.12, "name": "Start", "role": "start"}]}),
        json.dumps({"waypoints": [{"lat": 51.5, "name": "Start", "role": "start"}, {"lat": 51.5, "lng": -0.12, "name": "End", "role": "end"}]}),
    ],
)
async def test_select_rejects_unusable_output(settings_enabled, candidates, cafe_prefs, text):
    selector = WaypointSelector(llm_client=StubLLMClient(text=text), config=settings_enabled)

    with pytest.raises(AIServiceError) as excinfo:
        await selector.select(ORIGIN, candidates, cafe_prefs, "Riverside Town")

    assert "invalid response" in excinfo.value.message


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kind, fragment",
    [
        ("configuration", "configuration error"),
        ("quota", "temporarily unavailable"),
        ("unavailable", "Failed to plan a route"),
    ],
)
async def test_select_classifies_model_failures(settings_enabled, candidates, cafe_prefs, kind, fragment):
    llm = StubLLMClient(text="", error=LLMServiceError("raw upstream detail", kind=kind))
    selector = WaypointSelector(llm_client=llm, config=settings_enabled)

    with pytest.raises(AIServiceError) as excinfo:
        await selector.select(ORIGIN, candidates, cafe_prefs, "Riverside Town")

    assert fragment in excinfo.value.message
    assert "raw upstream detail" not in excinfo.value.message


@pytest.mark.asyncio
async def test_select_recovers_missing_category_from_matched_place(settings_enabled, candidates, cafe_prefs):
    payload = {
        "waypoints": [
            {"lat": 51.5, "lng": -0.12, "name": "Start", "role": "start"},
            {"lat": 51.4991, "lng": -0.1302, "name": "Meadow Dog Park", "role": "poi"},
            {"lat": 51.5, "lng": -0.12, "name": "End", "role": "end"},
        ]
    }
    selector = WaypointSelector(llm_client=StubLLMClient(payload), config=settings_enabled)

    waypoints = await selector.select(ORIGIN, candidates, cafe_prefs, "Riverside Town")

    assert waypoints[1].place_id == "dog-1"
    assert waypoints[1].category == "dog_park"
