"""
Main ranking orchestration: score every candidate, drop invalid ones, sort.

Ordering is total score descending, then earliest start time, then event id,
so identical inputs always produce the same list.
"""

import logging
from datetime import datetime
from typing import Iterable, List

from ...errors import InvalidCandidate
from ...models.config import DEFAULT_CONFIG, RecommendationConfig
from ...models.event import CandidateEvent
from ...models.scoring import RankedEvent
from ...models.user import UserContext
from ...taxonomy import DEFAULT_TAXONOMY, CategoryTaxonomy
from .blended_scoring import build_score_breakdown

logger = logging.getLogger(__name__)


def score_candidates(
    candidates: Iterable[CandidateEvent],
    user: UserContext,
    radius_km: float,
    now: datetime,
    config: RecommendationConfig = DEFAULT_CONFIG,
    taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY,
) -> List[RankedEvent]:
    """Score candidates in input order; invalid candidates are logged and excluded."""
    scored: List[RankedEvent] = []
    for event in candidates:
        try:
            breakdown, km = build_score_breakdown(event, user, radius_km, now, config, taxonomy)
        except InvalidCandidate as e:
            logger.warning("[invalid_candidate] EXCLUDED event_id=%s reason=%s", e.event_id, e.reason)
            continue
        scored.append(RankedEvent(event=event, score=breakdown, distance_km=km))
    return scored


def rank_candidates(
    candidates: Iterable[CandidateEvent],
    user: UserContext,
    radius_km: float,
    now: datetime,
    config: RecommendationConfig = DEFAULT_CONFIG,
    taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY,
) -> List[RankedEvent]:
    """Score and sort: total descending, then earliest start_time, then id."""
    scored = score_candidates(candidates, user, radius_km, now, config, taxonomy)
    scored.sort(key=RankedEvent.sort_key)
    return scored


def order_by_start_time(ranked: List[RankedEvent]) -> List[RankedEvent]:
    """Soonest first, then id; used for the last-resort level."""
    return sorted(ranked, key=lambda r: (r.event.start_time, r.event.id))
