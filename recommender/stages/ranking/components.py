"""
Per-factor scoring components, each normalized to 0-1.

- distance: linear falloff to zero at the effective radius; neutral without location
- interest: direct tag->category match, partial credit for an adjacent category
- engagement: capped-linear in past participations for the category
- recency: sooner is better up to a knee, gentle decay after; preferred-window bonus
"""

import math
from typing import Iterable, Optional, Sequence

from ...models.config import RecommendationConfig
from ...taxonomy import CategoryTaxonomy


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def distance_score(
    distance_km: Optional[float],
    radius_km: float,
    config: RecommendationConfig,
) -> float:
    """1 - clamp(distance / radius, 0, 1); neutral constant when distance is unknown."""
    if distance_km is None:
        return config.neutral_distance_score
    return 1.0 - clamp(distance_km / radius_km)


def interest_score(
    interest_tags: Iterable[str],
    category: str,
    taxonomy: CategoryTaxonomy,
    config: RecommendationConfig,
) -> float:
    """
    Best match over all tags, never a sum: extra tags cannot stack credit.
    """
    matched = taxonomy.categories_for_tags(interest_tags)
    if not matched:
        return 0.0
    if category in matched:
        return 1.0
    if any(taxonomy.is_related(user_category, category) for user_category in matched):
        return config.interest_related_credit
    return 0.0


def engagement_score(count: int, config: RecommendationConfig) -> float:
    """Diminishing returns: full credit at engagement_saturation past events."""
    if count <= 0:
        return 0.0
    return min(count, config.engagement_saturation) / config.engagement_saturation


def recency_base(hours_away: float, config: RecommendationConfig) -> float:
    hours = max(0.0, hours_away)
    knee = config.recency_knee_hours
    if hours <= knee:
        return 1.0 - (1.0 - config.recency_knee_score) * (hours / knee)
    decayed = config.recency_knee_score * math.exp(
        -config.recency_decay_per_hour * (hours - knee)
    )
    return max(config.recency_floor, decayed)


def recency_score(
    hours_away: float,
    start_hour: int,
    preferred_hours: Sequence[int],
    config: RecommendationConfig,
) -> float:
    score = recency_base(hours_away, config)
    if preferred_hours and start_hour in preferred_hours:
        score += config.preferred_window_bonus
    return clamp(score)
