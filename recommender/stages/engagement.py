"""
Engagement aggregation: per-category affinity and preferred activity window.

Input is the user's approved past participations as (category, start_hour)
pairs. Counts never decay: recency of the event itself is weighted by the
scoring engine, not recency of the user's history.
"""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Sequence, Tuple

from ..models.user import Participation
from ..utils.time import local_hour

logger = logging.getLogger(__name__)

WINDOW_HOURS = 4

HistoryItem = Tuple[str, int]


def affinity(history: Iterable[HistoryItem]) -> Dict[str, int]:
    """Count of past participations per category."""
    return dict(Counter(category for category, _ in history))


def preferred_window(history: Iterable[HistoryItem]) -> List[int]:
    """
    Most active 4-hour window as [s, s+1, s+2, s+3] mod 24.

    Every start offset s in [0, 24) is tried; the first (smallest) s with the
    maximum total wins. Empty history yields [] (no preference signal).
    """
    per_hour = [0] * 24
    seen = False
    for _, hour in history:
        if not 0 <= hour <= 23:
            logger.warning("[engagement] HOUR_OUT_OF_RANGE hour=%s skipped", hour)
            continue
        per_hour[hour] += 1
        seen = True
    if not seen:
        return []

    best_start, best_total = 0, -1
    for start in range(24):
        total = sum(per_hour[(start + i) % 24] for i in range(WINDOW_HOURS))
        if total > best_total:
            best_start, best_total = start, total
    return [(best_start + i) % 24 for i in range(WINDOW_HOURS)]


def history_from_participations(
    participations: Sequence[Participation],
    tz_name: str,
) -> List[HistoryItem]:
    """(category, local start hour) pairs for the aggregator."""
    return [(p.category, local_hour(p.start_time, tz_name)) for p in participations]


def build_engagement_profile(
    participations: Sequence[Participation],
    tz_name: str,
) -> Tuple[Dict[str, int], List[int]]:
    """Return (engagement_by_category, preferred_hours) for a user's history."""
    history = history_from_participations(participations, tz_name)
    return affinity(history), preferred_window(history)
