"""Pipeline stages: engagement aggregation, fallback cascade, ranking, orchestration."""

from .cascade import FallbackCascade, LevelConstraints, constraints_for
from .engagement import affinity, build_engagement_profile, preferred_window
from .orchestrator import RecommendationCoordinator, build_user_context
from .ranking import rank_candidates

__all__ = [
    "FallbackCascade",
    "LevelConstraints",
    "RecommendationCoordinator",
    "affinity",
    "build_engagement_profile",
    "build_user_context",
    "constraints_for",
    "preferred_window",
    "rank_candidates",
]
