"""
Custom route service - the caller-facing entry point for route generation and saving

Pipeline: Location resolution → POI discovery → AI waypoint selection → Directions → Assembly
"""
import logging
from functools import cached_property
from typing import Awaitable, Callable, Optional, TypeVar

from fastapi.concurrency import run_in_threadpool

from pawpath.config import Settings, settings
from pawpath.models.request import RoutePreferences
from pawpath.models.response import RouteRecommendation
from pawpath.models.walk import WalkRecord
from pawpath.services.map.google_map_service import GoogleMapService
from pawpath.services.map.map_service import MapService
from pawpath.services.nlp.llm_client import WaypointLLMClient
from pawpath.services.route.directions_service import DirectionsSynthesizer
from pawpath.services.route.errors import (
    AIServiceError,
    DirectionsError,
    FeatureDisabledError,
    LocationNotFoundError,
    RouteServiceError,
    RouteValidationError,
    StoreError,
)
from pawpath.services.route.location_resolver import LocationResolver
from pawpath.services.route.poi_discovery import PoiDiscoveryService
from pawpath.services.route.route_assembler import RouteAssembler
from pawpath.services.route.waypoint_selector import WaypointSelector
from pawpath.services.walk_conversion import (
    classify_difficulty,
    derive_duration_minutes,
    estimate_duration_minutes,
    parse_distance_label,
)
from pawpath.services.walk_store import MongoWalkStore, WalkStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

MIN_LOCATION_LENGTH = 2
MIN_DISTANCE_KM = 1.0
MAX_DISTANCE_KM = 10.0

# Category raised when a stage fails for a reason it did not classify itself
_STAGE_FAILURES = {
    "location": lambda: LocationNotFoundError(
        "We couldn't look up that location right now. Please try again."
    ),
    "places": lambda: LocationNotFoundError(
        "We couldn't search for places around that location right now. Please try again."
    ),
    "waypoints": lambda: AIServiceError(),
    "directions": lambda: DirectionsError(),
}


def build_walk_record(route: RouteRecommendation, owner_id: str) -> WalkRecord:
    """Convert a generated route into the walk record shape"""
    distance_km = parse_distance_label(route.estimated_distance_label)

    if route.directions is not None:
        duration_minutes = derive_duration_minutes(route.directions.total_duration_seconds)
    else:
        duration_minutes = estimate_duration_minutes(distance_km)

    return WalkRecord(
        name=route.route_name,
        distance_km=distance_km,
        duration_minutes=duration_minutes,
        difficulty=classify_difficulty(distance_km),
        notes=route.highlights_text or "",
        owner_id=owner_id,
    )


class CustomRouteService:
    """
    Orchestrates the custom route pipeline; all-or-nothing per request

    Collaborators are optional so tests can inject stubs; the defaults are
    built on first use from the injected settings.
    """

    def __init__(
        self,
        config: Settings = settings,
        map_service: Optional[MapService] = None,
        llm_client: Optional[WaypointLLMClient] = None,
        walk_store: Optional[WalkStore] = None,
        selector: Optional[WaypointSelector] = None,
    ):
        self.config = config
        self._map_service = map_service
        self._llm_client = llm_client
        self._walk_store = walk_store
        self._selector = selector

    @property
    def map_service(self) -> MapService:
        if self._map_service is None:
            self._map_service = GoogleMapService(config=self.config)
        return self._map_service

    @property
    def walk_store(self) -> WalkStore:
        if self._walk_store is None:
            self._walk_store = MongoWalkStore(config=self.config)
        return self._walk_store

    @cached_property
    def resolver(self) -> LocationResolver:
        return LocationResolver(self.map_service)

    @cached_property
    def poi_discovery(self) -> PoiDiscoveryService:
        return PoiDiscoveryService(self.map_service, max_radius_m=self.config.places_max_radius_m)

    @cached_property
    def selector(self) -> WaypointSelector:
        return self._selector or WaypointSelector(llm_client=self._llm_client, config=self.config)

    @cached_property
    def directions(self) -> DirectionsSynthesizer:
        return DirectionsSynthesizer(self.map_service)

    @cached_property
    def assembler(self) -> RouteAssembler:
        return RouteAssembler()

    @staticmethod
    def validate_request(location_text: Optional[str], prefs: RoutePreferences) -> str:
        """Check caller input before any external call; returns the trimmed location"""
        location = (location_text or "").strip()
        if not location:
            raise RouteValidationError("Please enter a location.")
        if len(location) < MIN_LOCATION_LENGTH:
            raise RouteValidationError("Please enter a valid location.")

        distance = prefs.target_distance_km
        if not (MIN_DISTANCE_KM <= distance <= MAX_DISTANCE_KM):
            raise RouteValidationError("Distance must be between 1 and 10 kilometers.")

        return location

    async def generate_custom_route(
        self, location_text: str, prefs: RoutePreferences
    ) -> RouteRecommendation:
        if not self.config.ai_recommendations_enabled:
            raise FeatureDisabledError()

        location = self.validate_request(location_text, prefs)

        logger.info("Generating %skm route near %r", prefs.target_distance_km, location)
        geocoded = await self._run_stage("location", lambda: self.resolver.resolve(location))

        radius_m = self.poi_discovery.search_radius_m(prefs.target_distance_km)
        logger.info("Searching for places within %.0fm", radius_m)
        candidates = await self._run_stage(
            "places",
            lambda: self.poi_discovery.find_candidates(geocoded.coordinates, radius_m),
        )

        plan = await self._run_stage(
            "waypoints",
            lambda: self.selector.plan(
                geocoded.coordinates, candidates, prefs, geocoded.formatted_address
            ),
        )

        directions = await self._run_stage(
            "directions", lambda: self.directions.compute_directions(plan.waypoints)
        )

        route = self.assembler.assemble(
            plan.waypoints, directions, prefs, dog_friendly_notes=plan.dog_friendly_notes
        )
        logger.info("Generated route %r (%s)", route.route_name, route.estimated_distance_label)
        return route

    async def save_generated_walk(
        self, route: RouteRecommendation, owner_id: str
    ) -> WalkRecord:
        if not owner_id:
            raise RouteValidationError("You must be logged in to save walks.")

        record = build_walk_record(route, owner_id)
        try:
            return await run_in_threadpool(self.walk_store.insert_walk, record)
        except Exception as e:
            logger.error("Error saving walk: %s", e)
            raise StoreError() from e

    async def _run_stage(self, stage: str, call: Callable[[], Awaitable[T]]) -> T:
        """Run one pipeline stage, mapping unclassified failures to its category"""
        try:
            return await call()
        except RouteServiceError:
            raise
        except Exception as e:
            logger.error("Route generation failed at %s stage: %r", stage, e)
            raise _STAGE_FAILURES[stage]() from e

    async def close(self) -> None:
        if self._map_service is not None:
            await self._map_service.close()
        if self._walk_store is not None:
            self._walk_store.close()
