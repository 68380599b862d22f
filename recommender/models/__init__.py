"""Data models for the recommendation engine."""

from .config import DEFAULT_CONFIG, RecommendationConfig, resolve_config
from .event import Audience, CandidateEvent, Coordinate, EventStatus, HostInfo, ensure_candidates
from .scoring import (
    CascadeOutcome,
    FallbackLevel,
    RankedEvent,
    RecommendationResult,
    ScoreBreakdown,
    fallback_message,
)
from .user import (
    Filters,
    Gender,
    Participation,
    TimeRange,
    UserContext,
    UserProfile,
    anonymous_profile,
)

__all__ = [
    "DEFAULT_CONFIG",
    "Audience",
    "CandidateEvent",
    "CascadeOutcome",
    "Coordinate",
    "EventStatus",
    "FallbackLevel",
    "Filters",
    "Gender",
    "HostInfo",
    "Participation",
    "RankedEvent",
    "RecommendationConfig",
    "RecommendationResult",
    "ScoreBreakdown",
    "TimeRange",
    "UserContext",
    "UserProfile",
    "anonymous_profile",
    "ensure_candidates",
    "fallback_message",
    "resolve_config",
]
