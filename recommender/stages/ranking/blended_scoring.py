"""
Per-candidate blended scoring: distance, interest, engagement, and recency.

Builds a ScoreBreakdown for one candidate; the result depends only on its
inputs so it can be recomputed for explainability and tests.
"""

from datetime import datetime
from typing import Optional, Tuple

from ...errors import InvalidCandidate
from ...models.config import RecommendationConfig
from ...models.event import CandidateEvent
from ...models.scoring import ScoreBreakdown
from ...models.user import UserContext
from ...taxonomy import CategoryTaxonomy
from ...utils.geo import distance_km
from ...utils.time import hours_until, local_hour
from .components import distance_score, engagement_score, interest_score, recency_score


def build_score_breakdown(
    event: CandidateEvent,
    user: UserContext,
    radius_km: float,
    now: datetime,
    config: RecommendationConfig,
    taxonomy: CategoryTaxonomy,
) -> Tuple[ScoreBreakdown, Optional[float]]:
    """
    Score one event for one user.

    Returns (breakdown, distance_km); distance is None when the user has no location.
    Raises InvalidCandidate when the event lacks usable venue coordinates.
    """
    venue = event.venue
    if venue is None:
        raise InvalidCandidate(event.id, "missing or out-of-range venue coordinates")

    km = distance_km(user.location, venue) if user.location is not None else None

    distance = distance_score(km, radius_km, config)
    interest = interest_score(user.interest_tags, event.category, taxonomy, config)
    engagement = engagement_score(user.engagement_for(event.category), config)
    recency = recency_score(
        hours_until(event.start_time, now),
        local_hour(event.start_time, config.local_timezone),
        user.preferred_hours,
        config,
    )
    total = (
        config.weight_distance * distance
        + config.weight_interest * interest
        + config.weight_engagement * engagement
        + config.weight_recency * recency
    )
    breakdown = ScoreBreakdown(
        distance=distance,
        interest=interest,
        engagement=engagement,
        recency=recency,
        total=total,
    )
    return breakdown, km
