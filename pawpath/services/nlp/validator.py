"""Strict parsing of model output into an ordered waypoint plan."""
from __future__ import annotations

import json
import numbers
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from pawpath.config.place_types import WAYPOINT_CATEGORIES, normalize_category
from pawpath.models.response import Waypoint

MIN_WAYPOINTS = 2
MAX_WAYPOINTS = 6


class WaypointPlanError(ValueError):
    """Model output that cannot be turned into a usable waypoint list."""


@dataclass(frozen=True)
class WaypointPlan:
    waypoints: List[Waypoint]
    route_name: Optional[str] = None
    dog_friendly_notes: Optional[str] = None
    reasoning: Optional[str] = None


class WaypointPlanValidator:
    """Validate raw LLM text into a WaypointPlan; never repair structure."""

    def validate(self, text: str) -> WaypointPlan:
        payload = self._safe_json_load(text)
        if payload is None:
            raise WaypointPlanError("Model output is not a JSON object")

        raw_waypoints = payload.get("waypoints")
        if not isinstance(raw_waypoints, list):
            raise WaypointPlanError("Model output has no waypoint list")
        if len(raw_waypoints) < MIN_WAYPOINTS:
            raise WaypointPlanError(
                f"Expected at least {MIN_WAYPOINTS} waypoints, got {len(raw_waypoints)}"
            )
        if len(raw_waypoints) > MAX_WAYPOINTS:
            raise WaypointPlanError(
                f"Expected at most {MAX_WAYPOINTS} waypoints, got {len(raw_waypoints)}"
            )

        waypoints = [self._waypoint(i, item) for i, item in enumerate(raw_waypoints)]
        self._check_roles(waypoints)

        return WaypointPlan(
            waypoints=waypoints,
            route_name=self._optional_text(payload.get("routeName")),
            dog_friendly_notes=self._optional_text(payload.get("dogFriendlyNotes")),
            reasoning=self._optional_text(payload.get("reasoning")),
        )

    def _waypoint(self, index: int, item: Any) -> Waypoint:
        if not isinstance(item, dict):
            raise WaypointPlanError(f"Waypoint {index} is not an object")

        for key in ("lat", "lng", "name", "role"):
            if item.get(key) in (None, ""):
                raise WaypointPlanError(f"Waypoint {index} is missing '{key}'")

        for key in ("lat", "lng"):
            value = item[key]
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise WaypointPlanError(f"Waypoint {index} has a non-numeric '{key}'")

        category = item.get("category")
        if category is not None:
            if not isinstance(category, str):
                raise WaypointPlanError(f"Waypoint {index} has an invalid category")
            category = normalize_category(category)
            if category not in WAYPOINT_CATEGORIES:
                raise WaypointPlanError(f"Waypoint {index} has unknown category '{category}'")

        place_id = item.get("placeId", item.get("place_id"))
        if place_id is not None and not isinstance(place_id, str):
            raise WaypointPlanError(f"Waypoint {index} has an invalid placeId")

        try:
            return Waypoint(
                lat=item["lat"],
                lng=item["lng"],
                name=item["name"],
                role=item["role"],
                category=category,
                place_id=place_id or None,
            )
        except ValidationError as exc:
            raise WaypointPlanError(f"Waypoint {index} is invalid: {exc}") from exc

    @staticmethod
    def _check_roles(waypoints: List[Waypoint]) -> None:
        if waypoints[0].role != "start":
            raise WaypointPlanError("First waypoint must have role 'start'")
        if waypoints[-1].role != "end":
            raise WaypointPlanError("Last waypoint must have role 'end'")
        for waypoint in waypoints[1:-1]:
            if waypoint.role != "poi":
                raise WaypointPlanError("Intermediate waypoints must have role 'poi'")

    @staticmethod
    def _optional_text(value: Any) -> Optional[str]:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    @staticmethod
    def _safe_json_load(text: str) -> Optional[Dict[str, Any]]:
        if not isinstance(text, str):
            return None
        candidate = text.strip()
        try:
            loaded = json.loads(candidate)
        except json.JSONDecodeError:
            # Tolerate markdown fences or chatter around the object
            start = candidate.find("{")
            end = candidate.rfind("}")
            if start == -1 or end == -1 or end <= start:
                return None
            snippet = candidate[start : end + 1]
            try:
                loaded = json.loads(snippet)
            except json.JSONDecodeError:
                return None
        if isinstance(loaded, dict):
            return loaded
        return None
