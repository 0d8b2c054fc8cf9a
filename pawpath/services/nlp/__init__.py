"""Language-model helpers for choosing walking waypoints."""
from .llm_client import LLMServiceError, WaypointLLMClient
from .validator import WaypointPlan, WaypointPlanError, WaypointPlanValidator

__all__ = [
    "LLMServiceError",
    "WaypointLLMClient",
    "WaypointPlan",
    "WaypointPlanError",
    "WaypointPlanValidator",
]
