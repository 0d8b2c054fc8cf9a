"""
Place Types Configuration for Dog-Walking Route Generation
Maps our walk categories to Google Places API (New) types and back.
"""

from typing import Dict, Iterable, List, Set


# Google Places API types worth walking a dog to
COMMON_GOOGLE_TYPES = {
    # Green space
    "park",
    "dog_park",
    "national_park",
    "hiking_area",
    "garden",
    "botanical_garden",
    "playground",
    # Water access
    "beach",
    "marina",
    # Refreshment stops
    "cafe",
    "coffee_shop",
    "tea_house",
    "bakery",
}

# Category mapping: walk categories -> Google types
CUSTOM_CATEGORY_MAPPING = {
    "park": ["park", "national_park", "hiking_area", "garden", "botanical_garden"],
    "dog_park": ["dog_park"],
    "water": ["beach", "marina"],
    "cafe": ["cafe", "coffee_shop", "tea_house", "bakery"],
}

# Categories searched for every route request
DOG_WALKING_CATEGORIES = ["park", "dog_park", "water", "cafe"]

# Waypoint categories the route model understands
WAYPOINT_CATEGORIES = {"cafe", "park", "dog_park", "water", "other"}

# User-facing aliases for must-include tags
CATEGORY_ALIASES = {
    "water_access": "water",
    "coffee": "cafe",
    "coffee_shop": "cafe",
    "dogpark": "dog_park",
    "dog-park": "dog_park",
}

# Reverse mapping: Google type -> categories
GOOGLE_TYPE_TO_CATEGORIES: Dict[str, List[str]] = {}
for category, google_types in CUSTOM_CATEGORY_MAPPING.items():
    for google_type in google_types:
        if google_type not in GOOGLE_TYPE_TO_CATEGORIES:
            GOOGLE_TYPE_TO_CATEGORIES[google_type] = []
        GOOGLE_TYPE_TO_CATEGORIES[google_type].append(category)


def get_google_types_for_category(category: str) -> List[str]:
    """Get Google Places API types for a given walk category."""
    return CUSTOM_CATEGORY_MAPPING.get(category, [])


def get_categories_for_google_type(google_type: str) -> List[str]:
    """Get walk categories for a given Google Places API type."""
    return GOOGLE_TYPE_TO_CATEGORIES.get(google_type, [])


def is_valid_google_type(place_type: str) -> bool:
    return place_type in COMMON_GOOGLE_TYPES


def filter_supported_types(google_types: Iterable[str]) -> List[str]:
    """Filter a list of Google types to only include supported ones."""
    seen = set()
    result = []

    for google_type in google_types:
        if is_valid_google_type(google_type) and google_type not in seen:
            seen.add(google_type)
            result.append(google_type)

    return result


def normalize_category(tag: str) -> str:
    """Lower-case a category tag and resolve known aliases."""
    key = tag.strip().lower()
    return CATEGORY_ALIASES.get(key, key)


def get_category_tags_for_types(google_types: Iterable[str]) -> Set[str]:
    """Collect every walk category implied by a list of Google types."""
    tags: Set[str] = set()
    for google_type in google_types:
        tags.update(get_categories_for_google_type(google_type))
    return tags


def get_primary_category_for_tags(tags: Iterable[str]) -> str:
    """Pick the single waypoint category that best describes a set of tags."""
    # Most specific first
    category_priority = ["dog_park", "cafe", "water", "park"]

    found = set(tags)
    for category in category_priority:
        if category in found:
            return category
    return "other"
