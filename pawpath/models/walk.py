"""
Walk record models for saved routes
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


Difficulty = Literal["easy", "moderate", "hard"]


class WalkRecord(BaseModel):
    """Persisted walk created from a generated route"""
    id: Optional[str] = None
    name: str
    distance_km: float
    duration_minutes: int
    difficulty: Difficulty
    notes: str = ""
    owner_id: str
    created_at: Optional[datetime] = None
