"""
POI discovery service - searches nearby dog-friendly places around the walk origin
"""
import logging
from typing import Dict, List, Optional, Sequence

from pawpath.config import settings
from pawpath.config.place_types import DOG_WALKING_CATEGORIES
from pawpath.models.request import Coordinates
from pawpath.models.response import PointOfInterest
from pawpath.services.map.map_service import MapService
from pawpath.services.route.errors import NoCandidatesFoundError

logger = logging.getLogger(__name__)

# Search radius relative to the target walk length
SEARCH_RADIUS_BUFFER = 1.5


class PoiDiscoveryService:
    """Runs one nearby search per walk category and merges the results"""

    def __init__(
        self,
        map_service: MapService,
        categories: Optional[Sequence[str]] = None,
        max_radius_m: float = settings.places_max_radius_m,
    ):
        self.map_service = map_service
        self.categories = list(categories or DOG_WALKING_CATEGORIES)
        self.max_radius_m = max_radius_m

    def search_radius_m(self, target_distance_km: float) -> float:
        """Search radius for a target walk distance, capped by the provider limit"""
        return min(target_distance_km * 1000 * SEARCH_RADIUS_BUFFER, self.max_radius_m)

    async def find_candidates(
        self, origin: Coordinates, radius_m: float
    ) -> List[PointOfInterest]:
        merged: Dict[str, PointOfInterest] = {}
        failures: List[Exception] = []

        for category in self.categories:
            try:
                places = await self.map_service.find_nearby_places(
                    center=origin, radius_m=radius_m, category=category
                )
            except Exception as e:
                logger.warning("Nearby search for %s failed: %s", category, e)
                failures.append(e)
                continue

            logger.info("Found %d %s places", len(places), category)
            for place in places:
                existing = merged.get(place.place_id)
                if existing is None:
                    merged[place.place_id] = place
                else:
                    # Same place found under several categories
                    merged[place.place_id] = existing.model_copy(
                        update={"category_tags": existing.category_tags | place.category_tags}
                    )

        if not merged:
            # A provider outage is not the same as an empty area
            if failures:
                raise failures[-1]
            raise NoCandidatesFoundError()

        if failures:
            logger.warning("%d of %d nearby searches failed", len(failures), len(self.categories))

        logger.info("Total candidate places: %d", len(merged))
        return list(merged.values())
