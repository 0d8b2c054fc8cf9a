"""
Pure conversion helpers for saving a generated route as a walk record
"""
import math
import re
from typing import Optional

from pawpath.models.walk import Difficulty

# Average walking pace of 5 km/h
MINUTES_PER_KM = 12

_UNIT_SUFFIX = re.compile(r"\s*(?:km|kms|kilometers|kilometres)\s*$", re.IGNORECASE)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_distance_label(label: Optional[str]) -> float:
    """Parse a label such as "2.5 km" into kilometres; 0 when unparseable"""
    if not label:
        return 0.0
    numeric = _UNIT_SUFFIX.sub("", label.strip()).strip()
    try:
        parsed = float(numeric)
    except ValueError:
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def classify_difficulty(distance_km: float) -> Difficulty:
    """Under 3km is easy, 3-6km inclusive is moderate, anything longer is hard"""
    if distance_km < 3:
        return "easy"
    if distance_km <= 6:
        return "moderate"
    return "hard"


def derive_duration_minutes(duration_seconds: Optional[float]) -> int:
    """Whole minutes from a directions duration, rounding half up"""
    if not duration_seconds or not math.isfinite(duration_seconds):
        return 0
    return round_half_up(duration_seconds / 60)


def estimate_duration_minutes(distance_km: float) -> int:
    """Fallback duration when a route has no computed directions"""
    return round_half_up(distance_km * MINUTES_PER_KM)
