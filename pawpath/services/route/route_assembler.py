"""
Route assembler - names the route, writes its highlights and packages the recommendation
"""
import re
from typing import List, Optional

from pawpath.models.request import RoutePreferences
from pawpath.models.response import DirectionsResult, RouteRecommendation, Waypoint

HIGHLIGHT_SEPARATOR = " • "
FALLBACK_HIGHLIGHTS = "A pleasant walk for you and your dog"
MAX_NAME_WORDS = 3

_NAME_BREAK = re.compile(r"\s*(?:,| - | \| |\()")


def format_km(value: float) -> str:
    """Format kilometres without a trailing .0, e.g. 2.0 -> '2km', 2.5 -> '2.5km'"""
    return f"{round(value, 1):g}km"


def abbreviate_place_name(name: str) -> str:
    """Shorten a place name to its leading words, dropping address-like suffixes"""
    head = _NAME_BREAK.split(name.strip(), maxsplit=1)[0]
    words = head.split()
    return " ".join(words[:MAX_NAME_WORDS]) or name.strip()


class RouteAssembler:
    """Deterministic packaging of a selected route; makes no external calls"""

    def assemble(
        self,
        waypoints: List[Waypoint],
        directions: DirectionsResult,
        prefs: RoutePreferences,
        dog_friendly_notes: Optional[str] = None,
    ) -> RouteRecommendation:
        return RouteRecommendation(
            route_name=self.build_name(waypoints, prefs),
            waypoints=tuple(waypoints),
            estimated_distance_label=format_km(directions.total_distance_meters / 1000),
            highlights_text=self.build_highlights(waypoints, prefs),
            dog_friendly_notes=dog_friendly_notes,
            directions=directions,
        )

    @staticmethod
    def build_name(waypoints: List[Waypoint], prefs: RoutePreferences) -> str:
        target = format_km(prefs.target_distance_km)
        stops = [wp for wp in waypoints if wp.role == "poi"]
        if stops:
            kind = "Loop" if prefs.circular else "Walk"
            return f"{abbreviate_place_name(stops[0].name)} {kind} ({target})"
        if prefs.circular:
            return f"{target} Circular Walk"
        return f"{target} Walk"

    @staticmethod
    def build_highlights(waypoints: List[Waypoint], prefs: RoutePreferences) -> str:
        clauses = []

        stops = [wp.name for wp in waypoints if wp.role == "poi"]
        if stops:
            clauses.append("Via " + ", ".join(stops))
        if "cafe" in prefs.must_include:
            clauses.append("Dog-friendly café stop")
        if "off-leash" in prefs.soft_preferences:
            clauses.append("Off-leash areas along the way")
        if "scenic" in prefs.soft_preferences:
            clauses.append("Scenic views")

        return HIGHLIGHT_SEPARATOR.join(clauses) if clauses else FALLBACK_HIGHLIGHTS
