"""
Fallback Cascade: relax the user's filters until enough candidates remain.

Levels, strictly in order (never re-tightened within a request):
  EXACT             all filters verbatim
  RELAXED_TIME      drop the time range
  RELAXED_DISTANCE  also double the radius (capped at max_search_radius_km)
  RELAXED_CATEGORY  also drop the category filter
  RELAXED_AUDIENCE  also widen audience to everything the user may see
  ANY               every eligible event, soonest first

The public entry point is FallbackCascade.run.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import FrozenSet, List, Optional

from ..models.config import DEFAULT_CONFIG, RecommendationConfig
from ..models.event import Audience, CandidateEvent, Coordinate
from ..models.scoring import CascadeOutcome, FallbackLevel
from ..models.user import TimeRange, UserContext
from ..sources import CachedEventSource, RepositoryQuery
from ..utils.geo import distance_km
from ..utils.time import matches_time_range

logger = logging.getLogger(__name__)

RELAXABLE_LEVELS = [
    FallbackLevel.EXACT,
    FallbackLevel.RELAXED_TIME,
    FallbackLevel.RELAXED_DISTANCE,
    FallbackLevel.RELAXED_CATEGORY,
    FallbackLevel.RELAXED_AUDIENCE,
]


@dataclass(frozen=True)
class LevelConstraints:
    """The filters in force at one cascade level."""

    level: FallbackLevel
    time_range: TimeRange
    categories: FrozenSet[str]
    radius_km: Optional[float]
    audiences: FrozenSet[Audience]
    search_text: str

    def same_filters_as(self, other: "LevelConstraints") -> bool:
        return replace(self, level=other.level) == other

    def admits(
        self,
        event: CandidateEvent,
        location: Optional[Coordinate],
        now: datetime,
        tz_name: str,
    ) -> bool:
        if event.audience not in self.audiences:
            return False
        if self.categories and event.category not in self.categories:
            return False
        if not matches_time_range(event.start_time, self.time_range, now, tz_name):
            return False
        if self.search_text and not event.matches_text(self.search_text):
            return False
        if self.radius_km is not None and location is not None:
            venue = event.venue
            if venue is None or distance_km(location, venue) > self.radius_km:
                return False
        return True


def constraints_for(
    level: FallbackLevel,
    user: UserContext,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> LevelConstraints:
    """Filters in force at level; each level keeps every relaxation of the ones before it."""
    filters = user.filters
    eligible = user.eligible_audiences
    if level == FallbackLevel.ANY:
        return LevelConstraints(level, TimeRange.NONE, frozenset(), None, eligible, "")

    # Audience filter narrows within the eligible set, never beyond it
    audiences = eligible & {filters.audience} if filters.audience is not None else eligible
    time_range = filters.time_range
    categories = filters.categories
    # The profile radius bounds a located user when the request sets none
    radius = filters.max_distance_km if filters.max_distance_km is not None else user.radius_km

    if level.rank >= FallbackLevel.RELAXED_TIME.rank:
        time_range = TimeRange.NONE
    if level.rank >= FallbackLevel.RELAXED_DISTANCE.rank and radius is not None:
        radius = max(radius, min(radius * 2, config.max_search_radius_km))
    if level.rank >= FallbackLevel.RELAXED_CATEGORY.rank:
        categories = frozenset()
    if level.rank >= FallbackLevel.RELAXED_AUDIENCE.rank:
        audiences = eligible
    return LevelConstraints(
        level, time_range, categories, radius, frozenset(audiences), filters.search_text.strip()
    )


def scoring_radius(
    constraints: LevelConstraints,
    user: UserContext,
    config: RecommendationConfig,
) -> float:
    """Radius the distance component is normalized against at this level."""
    if constraints.radius_km is not None:
        return constraints.radius_km
    return user.radius_km or config.default_radius_km


class FallbackCascade:
    """Runs the relaxation levels against the (cached) event repository."""

    def __init__(self, source: CachedEventSource, config: RecommendationConfig = DEFAULT_CONFIG):
        self._source = source
        self._config = config

    def _query(self, audiences: FrozenSet[Audience]) -> RepositoryQuery:
        return RepositoryQuery.build(
            self._config.eligible_statuses, audiences, self._config.repository_limit
        )

    async def run(self, user: UserContext, now: datetime) -> CascadeOutcome:
        """
        Return the first level with at least min_results candidates, or ANY.

        Raises RepositoryError if any query fails; no partial outcome is returned.
        """
        config = self._config
        fetched = await self._source.fetch(self._query(user.eligible_audiences))
        # A cached pool may hold events that have started since it was fetched
        pool = [e for e in fetched if e.start_time >= now]
        total_available = len(pool)
        attempted: List[FallbackLevel] = []

        exact = constraints_for(FallbackLevel.EXACT, user, config)
        bounded = exact.radius_km is not None and user.location is not None
        if user.filters.is_empty() and not bounded:
            attempted.append(FallbackLevel.EXACT)
            logger.debug("[cascade] NO_FILTERS level=exact count=%d", total_available)
            return CascadeOutcome(
                candidates=list(pool),
                level=FallbackLevel.EXACT,
                total_available=total_available,
                attempted=attempted,
                radius_km=scoring_radius(exact, user, config),
            )

        previous: Optional[LevelConstraints] = None
        for level in RELAXABLE_LEVELS:
            constraints = constraints_for(level, user, config)
            if previous is not None and constraints.same_filters_as(previous):
                # Relaxation is a no-op for these filters; the count cannot change
                continue
            previous = constraints
            events = await self._source.fetch(self._query(constraints.audiences))
            matched = [
                e for e in events
                if e.start_time >= now
                and constraints.admits(e, user.location, now, config.local_timezone)
            ]
            attempted.append(level)
            logger.debug("[cascade] level=%s count=%d", level.value, len(matched))
            if len(matched) >= config.min_results:
                logger.info("[cascade] SETTLED level=%s count=%d", level.value, len(matched))
                return CascadeOutcome(
                    candidates=matched,
                    level=level,
                    total_available=total_available,
                    attempted=attempted,
                    radius_km=scoring_radius(constraints, user, config),
                )

        attempted.append(FallbackLevel.ANY)
        last_resort = constraints_for(FallbackLevel.ANY, user, config)
        logger.info("[cascade] SETTLED level=any count=%d", total_available)
        return CascadeOutcome(
            candidates=sorted(pool, key=lambda e: (e.start_time, e.id)),
            level=FallbackLevel.ANY,
            total_available=total_available,
            attempted=attempted,
            radius_km=scoring_radius(last_resort, user, config),
        )
