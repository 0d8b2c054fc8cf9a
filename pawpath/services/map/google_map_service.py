import logging
import math
import re
from typing import Dict, List, Optional

import httpx

from pawpath.config import Settings, settings
from pawpath.config.place_types import (
    filter_supported_types,
    get_category_tags_for_types,
    get_google_types_for_category,
)
from pawpath.models.request import Coordinates
from pawpath.models.response import (
    DirectionStep,
    DirectionsResult,
    GeocodeResult,
    PointOfInterest,
    Waypoint,
)
from pawpath.services.map.map_service import MapService, MapServiceError

logger = logging.getLogger(__name__)

_HTML_TAG = re.compile(r"<[^>]+>")
_NO_ROUTE_STATUSES = {"ZERO_RESULTS", "NOT_FOUND", "MAX_ROUTE_LENGTH_EXCEEDED"}


class GoogleMapService(MapService):
    """Google Maps Platform implementation: Geocoding, Places (New) and Directions"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        config: Settings = settings,
    ):
        self.api_key = api_key or config.google_maps_api_key
        self.geocode_url = "https://maps.googleapis.com/maps/api/geocode/json"
        self.nearby_search_url = "https://places.googleapis.com/v1/places:searchNearby"
        self.directions_url = "https://maps.googleapis.com/maps/api/directions/json"
        self.max_radius_m = config.places_max_radius_m
        self.max_results = config.places_max_results

        if not self.api_key:
            raise ValueError("Google Maps API Key is required")

        # Transport retries only cover connection failures, never HTTP statuses
        self._client = client or httpx.AsyncClient(
            timeout=config.http_timeout_seconds,
            transport=httpx.AsyncHTTPTransport(retries=config.http_max_retries),
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def geocode(self, text: str) -> Optional[GeocodeResult]:
        """Resolve an address or place name using the Geocoding API"""
        data = await self._get_json(
            self.geocode_url, {"address": text, "key": self.api_key}, "Geocoding"
        )

        status = data.get("status", "UNKNOWN_ERROR")
        if status in ("ZERO_RESULTS", "INVALID_REQUEST"):
            return None
        self._check_status(status, data, "Geocoding")

        results = data.get("results", [])
        if not results:
            return None

        best = results[0]
        # Several loose matches means the query was ambiguous
        if len(results) > 1 and best.get("partial_match"):
            logger.info("Ambiguous geocode for %r: %d partial matches", text, len(results))
            return None

        location = best.get("geometry", {}).get("location")
        if not location or "lat" not in location or "lng" not in location:
            return None

        return GeocodeResult(
            coordinates=Coordinates(lat=location["lat"], lng=location["lng"]),
            formatted_address=best.get("formatted_address") or text,
            place_id=best.get("place_id"),
        )

    async def find_nearby_places(
        self,
        center: Coordinates,
        radius_m: float,
        category: Optional[str] = None,
    ) -> List[PointOfInterest]:
        """Search nearby places using Google Places API (New) v1"""
        body = {
            "maxResultCount": self.max_results,
            "locationRestriction": {
                "circle": {
                    "center": {"latitude": center.lat, "longitude": center.lng},
                    "radius": min(radius_m, self.max_radius_m),
                }
            },
        }

        # Add type filtering if a category is specified
        if category:
            body["includedTypes"] = get_google_types_for_category(category)

        try:
            response = await self._client.post(
                self.nearby_search_url,
                headers={
                    "Content-Type": "application/json",
                    "X-Goog-Api-Key": self.api_key,
                    "X-Goog-FieldMask": (
                        "places.id,places.displayName,places.location,"
                        "places.rating,places.types,places.primaryType"
                    ),
                },
                json=body,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise self._status_error(e.response, "Places") from e
        except httpx.HTTPError as e:
            raise MapServiceError(f"Failed to fetch places: {e}") from e

        places = response.json().get("places", [])
        return self._convert_places(places, center, category)

    async def get_directions(self, waypoints: List[Waypoint]) -> Optional[DirectionsResult]:
        """Get walking directions through the waypoints using the Directions API"""
        if len(waypoints) < 2:
            raise ValueError("At least two waypoints are required for directions")

        params = {
            "origin": self._waypoint_reference(waypoints[0]),
            "destination": self._waypoint_reference(waypoints[-1]),
            "mode": "walking",
            "key": self.api_key,
        }
        intermediates = waypoints[1:-1]
        if intermediates:
            params["waypoints"] = "|".join(self._waypoint_reference(wp) for wp in intermediates)

        data = await self._get_json(self.directions_url, params, "Directions")

        status = data.get("status", "UNKNOWN_ERROR")
        if status in _NO_ROUTE_STATUSES:
            return None
        self._check_status(status, data, "Directions")

        if not data.get("routes"):
            return None

        return self._convert_directions(data["routes"][0])

    async def _get_json(self, url: str, params: Dict, api_name: str) -> Dict:
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise self._status_error(e.response, api_name) from e
        except httpx.HTTPError as e:
            raise MapServiceError(f"{api_name} API request failed: {e}") from e
        return response.json()

    @staticmethod
    def _status_error(response: httpx.Response, api_name: str) -> MapServiceError:
        error_detail = ""
        try:
            error_data = response.json()
            message = error_data.get("error", {}).get("message", "")
            if message:
                error_detail = f" - {message}"
        except ValueError:
            pass

        status_code = response.status_code
        if status_code == 429:
            return MapServiceError("API quota exceeded", status_code)
        if status_code == 403:
            return MapServiceError(f"API key invalid or {api_name} API not enabled", status_code)
        if status_code == 400:
            return MapServiceError(
                f"Bad request (400): Invalid request parameters{error_detail}", status_code
            )
        return MapServiceError(f"{api_name} API error: {status_code}{error_detail}", status_code)

    @staticmethod
    def _check_status(status: str, data: Dict, api_name: str) -> None:
        """Raise for legacy web-service statuses other than OK"""
        if status == "OK":
            return
        detail = data.get("error_message", "")
        if status in ("OVER_QUERY_LIMIT", "OVER_DAILY_LIMIT"):
            raise MapServiceError("API quota exceeded")
        if status == "REQUEST_DENIED":
            raise MapServiceError(f"API key invalid or {api_name} API not enabled")
        raise MapServiceError(f"{api_name} API error: {status} {detail}".strip())

    @staticmethod
    def _waypoint_reference(waypoint: Waypoint) -> str:
        if waypoint.role == "poi" and waypoint.place_id:
            return f"place_id:{waypoint.place_id}"
        return f"{waypoint.lat},{waypoint.lng}"

    def _convert_places(
        self, places: List[Dict], center: Coordinates, category: Optional[str]
    ) -> List[PointOfInterest]:
        """Convert Google Places API (New) v1 response to PointOfInterest models"""
        converted_places = []

        for place in places:
            place_id = place.get("id")
            location = place.get("location", {})
            if not place_id or "latitude" not in location or "longitude" not in location:
                logger.debug("Skipping place without id or location: %s", place)
                continue

            name = place.get("displayName", {}).get("text", "Unknown Place")
            lat = location["latitude"]
            lng = location["longitude"]

            # Combine and deduplicate types (primary type first)
            raw_types = place.get("types", [])
            primary_type = place.get("primaryType", "")
            all_types = [primary_type] if primary_type else []
            all_types.extend(t for t in raw_types if t != primary_type)

            tags = get_category_tags_for_types(filter_supported_types(all_types))
            if category:
                tags.add(category)

            converted_places.append(
                PointOfInterest(
                    place_id=place_id,
                    name=name,
                    location=Coordinates(lat=lat, lng=lng),
                    category_tags=tags,
                    rating=place.get("rating"),
                    distance_from_origin_m=round(
                        self._calculate_distance(center.lat, center.lng, lat, lng), 1
                    ),
                )
            )

        return converted_places

    @staticmethod
    def _convert_directions(route: Dict) -> DirectionsResult:
        """Convert a Directions API route into a DirectionsResult"""
        legs = route.get("legs", [])
        steps = []
        total_distance = 0
        total_duration = 0

        for leg in legs:
            total_distance += leg.get("distance", {}).get("value", 0)
            total_duration += leg.get("duration", {}).get("value", 0)
            for step in leg.get("steps", []):
                instruction = _HTML_TAG.sub(" ", step.get("html_instructions", ""))
                start = step.get("start_location", {})
                end = step.get("end_location", {})
                steps.append(
                    DirectionStep(
                        distance_meters=step.get("distance", {}).get("value", 0),
                        duration_seconds=step.get("duration", {}).get("value", 0),
                        instruction_text=" ".join(instruction.split()),
                        start_location=Coordinates(lat=start.get("lat", 0.0), lng=start.get("lng", 0.0)),
                        end_location=Coordinates(lat=end.get("lat", 0.0), lng=end.get("lng", 0.0)),
                        polyline_segment=step.get("polyline", {}).get("points", ""),
                    )
                )

        return DirectionsResult(
            total_distance_meters=int(total_distance),
            total_duration_seconds=int(total_duration),
            start_address=legs[0].get("start_address", "") if legs else "",
            end_address=legs[-1].get("end_address", "") if legs else "",
            encoded_polyline=route.get("overview_polyline", {}).get("points", ""),
            steps=steps,
        )

    @staticmethod
    def _calculate_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
        """Distance in meters between two points (Haversine formula)"""
        R = 6371000  # Earth radius in meters

        lat1_rad = math.radians(lat1)
        lat2_rad = math.radians(lat2)
        delta_lat = math.radians(lat2 - lat1)
        delta_lng = math.radians(lng2 - lng1)

        a = (
            math.sin(delta_lat / 2) ** 2
            + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lng / 2) ** 2
        )
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

        return R * c
