"""
Location resolver - turns free-text input into coordinates and a canonical address
"""
import logging

from pawpath.models.response import GeocodeResult
from pawpath.services.map.map_service import MapService
from pawpath.services.route.errors import LocationNotFoundError

logger = logging.getLogger(__name__)


class LocationResolver:
    def __init__(self, map_service: MapService):
        self.map_service = map_service

    async def resolve(self, location_text: str) -> GeocodeResult:
        result = await self.map_service.geocode(location_text)
        if result is None:
            logger.info("No geocoding match for %r", location_text)
            raise LocationNotFoundError()

        logger.info(
            "Resolved %r to %s (%.6f, %.6f)",
            location_text,
            result.formatted_address,
            result.coordinates.lat,
            result.coordinates.lng,
        )
        return result
