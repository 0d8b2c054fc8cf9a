from typing import Any, Iterable, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pawpath.config.place_types import normalize_category


class Coordinates(BaseModel):
    """Latitude/longitude pair in decimal degrees."""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90, allow_inf_nan=False)
    lng: float = Field(ge=-180, le=180, allow_inf_nan=False)


def _tag_values(value: Any) -> Iterable:
    """Accept a single tag or a list of tags"""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, set, frozenset, tuple)):
        return value
    raise ValueError("must be a list of category names")


class RoutePreferences(BaseModel):
    # Range is enforced by the route service so that a bad distance surfaces
    # as a validation error rather than a schema error.
    target_distance_km: float
    must_include: Set[str] = set()
    soft_preferences: Set[str] = set()
    circular: bool = True

    @field_validator("must_include", mode="before")
    @classmethod
    def _normalize_must_include(cls, value):
        return {
            normalize_category(tag)
            for tag in _tag_values(value)
            if isinstance(tag, str) and tag.strip()
        }

    @field_validator("soft_preferences", mode="before")
    @classmethod
    def _normalize_soft_preferences(cls, value):
        return {
            tag.strip().lower().replace("_", "-")
            for tag in _tag_values(value)
            if isinstance(tag, str) and tag.strip()
        }


class CustomRouteRequest(BaseModel):
    location: str
    preferences: RoutePreferences
