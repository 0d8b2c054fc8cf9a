"""
Waypoint selector - asks the language model to pick and order stops from the candidate places
"""
import logging
import random
from typing import Dict, List, Optional, Sequence, Tuple, TypeVar

from fastapi.concurrency import run_in_threadpool

from pawpath.config import Settings, settings
from pawpath.config.place_types import get_primary_category_for_tags
from pawpath.models.request import Coordinates, RoutePreferences
from pawpath.models.response import PointOfInterest, Waypoint
from pawpath.services.nlp.llm_client import LLMServiceError, WaypointLLMClient
from pawpath.services.nlp.prompts import SYSTEM_PROMPT, build_route_prompt
from pawpath.services.nlp.validator import (
    WaypointPlan,
    WaypointPlanError,
    WaypointPlanValidator,
)
from pawpath.services.route.errors import AIServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_AI_ERROR_MESSAGES = {
    "configuration": "AI service configuration error. Please contact support.",
    "quota": "AI service temporarily unavailable. Please try again in a few minutes.",
    "malformed_output": "Received invalid response from AI service. Please try again.",
}


def shuffle_candidates(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Return a Fisher-Yates shuffled copy of ``items``.

    A fresh unseeded generator is used per call so that asking again with the
    same inputs presents the candidates in a different order.
    """
    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def _coordinate_key(lat: float, lng: float) -> Tuple[float, float]:
    return (round(lat, 6), round(lng, 6))


class WaypointSelector:
    """Candidate shuffling, prompt construction, model call, validation and enrichment"""

    def __init__(
        self,
        llm_client: Optional[WaypointLLMClient] = None,
        validator: Optional[WaypointPlanValidator] = None,
        config: Settings = settings,
        rng: Optional[random.Random] = None,
    ):
        self.llm_client = llm_client or WaypointLLMClient(config=config)
        self.validator = validator or WaypointPlanValidator()
        self.prompt_limit = config.poi_prompt_limit
        self.temperature = config.llm_temperature
        self.max_tokens = config.llm_max_tokens
        self._rng = rng

    async def select(
        self,
        origin: Coordinates,
        candidates: Sequence[PointOfInterest],
        prefs: RoutePreferences,
        location_label: str,
    ) -> List[Waypoint]:
        plan = await self.plan(origin, candidates, prefs, location_label)
        return plan.waypoints

    async def plan(
        self,
        origin: Coordinates,
        candidates: Sequence[PointOfInterest],
        prefs: RoutePreferences,
        location_label: str,
    ) -> WaypointPlan:
        """Select an ordered waypoint plan; raises AIServiceError on any model failure"""
        shown = shuffle_candidates(candidates, self._rng)[: self.prompt_limit]
        prompt = build_route_prompt(origin, location_label, shown, prefs)

        logger.info("Asking AI to choose waypoints from %d candidates", len(shown))
        try:
            text = await run_in_threadpool(
                self.llm_client.complete,
                SYSTEM_PROMPT,
                prompt,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            plan = self.validator.validate(text)
        except LLMServiceError as e:
            logger.error("AI waypoint selection failed (%s): %s", e.kind, e)
            raise AIServiceError(_AI_ERROR_MESSAGES.get(e.kind)) from e
        except WaypointPlanError as e:
            logger.error("AI returned an unusable waypoint plan: %s", e)
            raise AIServiceError(_AI_ERROR_MESSAGES["malformed_output"]) from e

        if plan.reasoning:
            logger.debug("AI reasoning: %s", plan.reasoning)

        waypoints = self._anchor(plan.waypoints, origin, prefs.circular)
        waypoints = self._enrich(waypoints, candidates)
        logger.info("AI selected waypoints: %s", [wp.name for wp in waypoints])

        return WaypointPlan(
            waypoints=waypoints,
            route_name=plan.route_name,
            dog_friendly_notes=plan.dog_friendly_notes,
            reasoning=plan.reasoning,
        )

    @staticmethod
    def _anchor(waypoints: List[Waypoint], origin: Coordinates, circular: bool) -> List[Waypoint]:
        """Pin the start (and for loops, the end) to the resolved origin"""
        pinned = {"lat": origin.lat, "lng": origin.lng}
        anchored = list(waypoints)
        anchored[0] = anchored[0].model_copy(update=pinned)
        if circular:
            anchored[-1] = anchored[-1].model_copy(update=pinned)
        return anchored

    @staticmethod
    def _enrich(
        waypoints: List[Waypoint], candidates: Sequence[PointOfInterest]
    ) -> List[Waypoint]:
        """Recover missing place ids (and categories) by exact coordinate match against the candidates"""
        by_coordinates: Dict[Tuple[float, float], PointOfInterest] = {
            _coordinate_key(poi.location.lat, poi.location.lng): poi for poi in candidates
        }

        enriched = []
        for waypoint in waypoints:
            if waypoint.role == "poi" and not waypoint.place_id:
                match = by_coordinates.get(_coordinate_key(waypoint.lat, waypoint.lng))
                if match is not None:
                    update = {"place_id": match.place_id}
                    if waypoint.category is None:
                        update["category"] = get_primary_category_for_tags(match.category_tags)
                    waypoint = waypoint.model_copy(update=update)
                else:
                    logger.debug("No place id found for waypoint %s", waypoint.name)
            enriched.append(waypoint)
        return enriched
