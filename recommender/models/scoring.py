"""
Scoring model: ScoreBreakdown, RankedEvent, fallback levels, and results.

Contains:
- ScoreBreakdown: per-factor contributions plus total (derived, never persisted)
- RankedEvent: a candidate with its breakdown and computed distance
- FallbackLevel: how far the cascade relaxed the user's filters
- CascadeOutcome / RecommendationResult: stage and API results
"""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .event import CandidateEvent


class FallbackLevel(str, Enum):
    """Strictly ordered relaxation levels; the cascade only moves forward."""

    EXACT = "exact"
    RELAXED_TIME = "relaxed_time"
    RELAXED_DISTANCE = "relaxed_distance"
    RELAXED_CATEGORY = "relaxed_category"
    RELAXED_AUDIENCE = "relaxed_audience"
    ANY = "any"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)


_LEVEL_ORDER: List[FallbackLevel] = list(FallbackLevel)

FALLBACK_MESSAGES = {
    FallbackLevel.EXACT: None,
    FallbackLevel.RELAXED_TIME: "No exact matches for that time, showing upcoming options",
    FallbackLevel.RELAXED_DISTANCE: "No exact matches, showing nearby options",
    FallbackLevel.RELAXED_CATEGORY: "No matches in those categories, showing other activities nearby",
    FallbackLevel.RELAXED_AUDIENCE: "Showing events open to a wider audience",
    FallbackLevel.ANY: "Showing all available events",
}


def fallback_message(level: FallbackLevel) -> Optional[str]:
    """Human-readable explanation for a relaxed response; None for EXACT."""
    return FALLBACK_MESSAGES[level]


class ScoreBreakdown(BaseModel):
    """All components are in 0-1; total is their fixed-weight combination."""

    model_config = ConfigDict(frozen=True)

    distance: float
    interest: float
    engagement: float
    recency: float
    total: float


class RankedEvent(BaseModel):
    """A candidate event with its scoring components."""

    event: CandidateEvent
    score: ScoreBreakdown
    distance_km: Optional[float] = None

    def sort_key(self) -> Tuple:
        """Score descending, then earliest start, then id."""
        return (-self.score.total, self.event.start_time, self.event.id)


class CascadeOutcome(BaseModel):
    """What the cascade settled on, plus the levels it tried along the way."""

    candidates: List[CandidateEvent]
    level: FallbackLevel
    total_available: int
    attempted: List[FallbackLevel]
    radius_km: Optional[float] = None


class RecommendationResult(BaseModel):
    events: List[RankedEvent]
    fallback_level: FallbackLevel
    total_available: int

    @property
    def fallback_message(self) -> Optional[str]:
        return fallback_message(self.fallback_level)
