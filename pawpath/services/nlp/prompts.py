"""Prompt templates for AI-assisted waypoint selection."""
from __future__ import annotations

from textwrap import dedent
from typing import Iterable, Sequence

from pawpath.models.request import Coordinates, RoutePreferences
from pawpath.models.response import PointOfInterest

SYSTEM_PROMPT = dedent(
    """
    You are an expert dog walking route planner. You pick real places from a supplied list and order them into a walk that is safe and enjoyable for a dog and its owner. Always respond with valid JSON only, no markdown formatting.
    """
).strip()

OUTPUT_INSTRUCTIONS = dedent(
    """
    Return ONLY a JSON object in this exact shape:
    {
      "routeName": "Short descriptive name",
      "waypoints": [
        {"lat": <start lat>, "lng": <start lng>, "name": "Start", "role": "start"},
        {"lat": <lat>, "lng": <lng>, "name": "<place name>", "role": "poi", "category": "cafe|park|dog_park|water|other", "placeId": "<id from the list>"},
        {"lat": <end lat>, "lng": <end lng>, "name": "End", "role": "end"}
      ],
      "dogFriendlyNotes": "Specific dog-related information",
      "reasoning": "One or two sentences on why these stops were chosen"
    }
    Rules:
    - The first waypoint has role "start" and the last has role "end".
    - Include between 2 and 4 waypoints with role "poi", chosen only from the places listed.
    - Copy coordinates and placeId exactly as listed.
    """
).strip()


def describe_candidate(index: int, poi: PointOfInterest) -> str:
    """One-line description of a candidate place for the prompt."""
    tags = ", ".join(sorted(poi.category_tags)) or "other"
    rating = f"{poi.rating:.1f} stars" if poi.rating is not None else "no rating"
    if poi.distance_from_origin_m is not None:
        distance = f"{round(poi.distance_from_origin_m)}m from start"
    else:
        distance = "distance unknown"
    return (
        f"{index}. {poi.name} [{tags}] - {distance}, {rating}, "
        f"at ({poi.location.lat:.6f}, {poi.location.lng:.6f}), placeId: {poi.place_id}"
    )


def _format_tags(tags: Iterable[str]) -> str:
    return ", ".join(sorted(tags)) or "none"


def build_route_prompt(
    origin: Coordinates,
    location_label: str,
    candidates: Sequence[PointOfInterest],
    prefs: RoutePreferences,
) -> str:
    target = prefs.target_distance_km
    low, high = target * 0.9, target * 1.1
    if prefs.circular:
        shape = "a circular walk that starts and ends at the user's location"
    else:
        shape = "a one-way walk that starts at the user's location and ends at the last stop"

    places = "\n".join(describe_candidate(i, poi) for i, poi in enumerate(candidates, 1))

    return dedent(
        """
        USER LOCATION: {label} ({lat:.6f}, {lng:.6f})

        USER REQUIREMENTS:
        - Route shape: {shape}
        - Target distance: {target:g}km (anything between {low:.1f}km and {high:.1f}km is acceptable)
        - Must include categories: {must}
        - Soft preferences: {soft}

        AVAILABLE NEARBY PLACES:
        {places}

        TASK:
        Choose stops strategically so the walk flows in one direction and avoids backtracking.
        Include at least one stop for every must-include category when the list allows it.

        {output}
        """
    ).strip().format(
        label=location_label,
        lat=origin.lat,
        lng=origin.lng,
        shape=shape,
        target=target,
        low=low,
        high=high,
        must=_format_tags(prefs.must_include),
        soft=_format_tags(prefs.soft_preferences),
        places=places,
        output=OUTPUT_INSTRUCTIONS,
    )
