"""Error categories surfaced by the custom route service."""
from __future__ import annotations

from typing import Optional


class RouteServiceError(Exception):
    """Base class for every user-facing route service failure."""

    category = "route_service_error"
    default_message = "Something went wrong. Please try again."
    status_code = 500

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class RouteValidationError(RouteServiceError):
    category = "validation_error"
    default_message = "Please check your route request and try again."
    status_code = 400


class LocationNotFoundError(RouteServiceError):
    category = "location_not_found"
    default_message = "We couldn't find that location. Please try a more specific address."
    status_code = 404


class NoCandidatesFoundError(RouteServiceError):
    category = "no_candidates_found"
    default_message = "We couldn't find any dog-friendly places nearby. Please try a different area."
    status_code = 404


class AIServiceError(RouteServiceError):
    category = "ai_service_error"
    default_message = "Failed to plan a route with the AI service. Please try again."
    status_code = 502


class DirectionsError(RouteServiceError):
    category = "directions_error"
    default_message = (
        "We couldn't find a walkable path between the chosen stops. "
        "Please try again or adjust your preferences."
    )
    status_code = 502


class FeatureDisabledError(RouteServiceError):
    category = "feature_disabled"
    default_message = "AI route generation is currently unavailable. Please try again later."
    status_code = 503


class StoreError(RouteServiceError):
    category = "store_error"
    default_message = "Failed to save walk. Please try again."
    status_code = 500
