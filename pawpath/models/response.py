"""
Response models for custom route generation
Includes geocoding, candidate places, waypoints and walking directions
"""
from typing import Literal, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field

from pawpath.models.request import Coordinates


WaypointRole = Literal["start", "end", "poi"]
WaypointCategory = Literal["cafe", "park", "dog_park", "water", "other"]


class GeocodeResult(BaseModel):
    """Resolved location for a free-text query"""
    model_config = ConfigDict(frozen=True)

    coordinates: Coordinates
    formatted_address: str
    place_id: Optional[str] = None


class PointOfInterest(BaseModel):
    """Candidate place returned by the nearby search"""
    place_id: str
    name: str
    location: Coordinates
    category_tags: Set[str] = set()
    rating: Optional[float] = None
    distance_from_origin_m: Optional[float] = None


class Waypoint(BaseModel):
    """One stop in an ordered walking route"""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90, allow_inf_nan=False)
    lng: float = Field(ge=-180, le=180, allow_inf_nan=False)
    name: str = Field(min_length=1)
    role: WaypointRole
    category: Optional[WaypointCategory] = None
    place_id: Optional[str] = None


class DirectionStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    distance_meters: int
    duration_seconds: int
    instruction_text: str
    start_location: Coordinates
    end_location: Coordinates
    polyline_segment: str = ""


class DirectionsResult(BaseModel):
    """Walking path between an ordered list of waypoints"""
    model_config = ConfigDict(frozen=True)

    total_distance_meters: int
    total_duration_seconds: int
    start_address: str = ""
    end_address: str = ""
    encoded_polyline: str = ""
    steps: Tuple[DirectionStep, ...] = ()


class RouteRecommendation(BaseModel):
    """Assembled custom route, immutable once built"""
    model_config = ConfigDict(frozen=True)

    route_name: str
    waypoints: Tuple[Waypoint, ...]
    estimated_distance_label: str  # e.g. "2.5km"
    highlights_text: str
    dog_friendly_notes: Optional[str] = None
    directions: Optional[DirectionsResult] = None
