from abc import ABC, abstractmethod
from typing import List, Optional

from pawpath.models.request import Coordinates
from pawpath.models.response import (
    DirectionsResult,
    GeocodeResult,
    PointOfInterest,
    Waypoint,
)


class MapServiceError(Exception):
    """Upstream map provider failure (transport, quota, credentials)"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MapService(ABC):
    """Map service abstract interface"""

    @abstractmethod
    async def geocode(self, text: str) -> Optional[GeocodeResult]:
        """Resolve free text to coordinates, or None when nothing matches"""
        pass

    @abstractmethod
    async def find_nearby_places(
        self,
        center: Coordinates,
        radius_m: float,
        category: Optional[str] = None,
    ) -> List[PointOfInterest]:
        """Search for nearby places, optionally restricted to one walk category"""
        pass

    @abstractmethod
    async def get_directions(self, waypoints: List[Waypoint]) -> Optional[DirectionsResult]:
        """Compute a walking route through the waypoints in order

        Returns None when the provider finds no walkable route.
        """
        pass

    async def close(self) -> None:
        """Release any held connections"""
        pass
