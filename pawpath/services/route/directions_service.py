"""
Directions synthesizer - computes the walkable path through the selected waypoints
"""
import logging
from typing import List

from pawpath.models.response import DirectionsResult, Waypoint
from pawpath.services.map.map_service import MapService
from pawpath.services.route.errors import DirectionsError

logger = logging.getLogger(__name__)


class DirectionsSynthesizer:
    def __init__(self, map_service: MapService):
        self.map_service = map_service

    async def compute_directions(self, waypoints: List[Waypoint]) -> DirectionsResult:
        if len(waypoints) < 2:
            raise DirectionsError()

        directions = await self.map_service.get_directions(waypoints)
        if directions is None:
            logger.info("No walking route through %d waypoints", len(waypoints))
            raise DirectionsError()

        logger.info(
            "Walking route: %dm, %d mins",
            directions.total_distance_meters,
            round(directions.total_duration_seconds / 60),
        )
        return directions
