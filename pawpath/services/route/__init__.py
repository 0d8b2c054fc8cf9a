# Route pipeline stages
from .directions_service import DirectionsSynthesizer
from .location_resolver import LocationResolver
from .poi_discovery import PoiDiscoveryService
from .route_assembler import RouteAssembler
from .waypoint_selector import WaypointSelector, shuffle_candidates

__all__ = [
    "DirectionsSynthesizer",
    "LocationResolver",
    "PoiDiscoveryService",
    "RouteAssembler",
    "WaypointSelector",
    "shuffle_candidates",
]
