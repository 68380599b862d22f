"""
Pipeline orchestrator: builds the UserContext, runs the fallback cascade,
then ranks the surviving candidates.

The main entry point is RecommendationCoordinator.recommend, which returns the
ordered events plus the fallback level and total_available for UI messaging.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional, Sequence

from ..cache import ResultCache
from ..location import LocationProvider, resolve_location
from ..models.config import RecommendationConfig, resolve_config
from ..models.event import Coordinate
from ..models.scoring import FallbackLevel, RecommendationResult
from ..models.user import Filters, Participation, UserContext, UserProfile, anonymous_profile
from ..sources import CachedEventSource, EventRepository, ParticipationStore, UserProfileStore
from ..taxonomy import DEFAULT_TAXONOMY, CategoryTaxonomy
from ..utils.time import utc_now
from .cascade import FallbackCascade
from .engagement import build_engagement_profile
from .ranking import order_by_start_time, rank_candidates

logger = logging.getLogger(__name__)


def build_user_context(
    profile: UserProfile,
    participations: Sequence[Participation],
    location: Optional[Coordinate],
    filters: Optional[Filters] = None,
    config: Optional[RecommendationConfig] = None,
) -> UserContext:
    """Combine stored profile, history, and request inputs into a UserContext."""
    config = resolve_config(config)
    engagement, preferred_hours = build_engagement_profile(participations, config.local_timezone)
    return UserContext(
        user_id=profile.id,
        location=location,
        interest_tags=frozenset(profile.interest_tags),
        engagement_by_category=engagement,
        preferred_hours=preferred_hours,
        filters=filters or Filters(),
        eligible_audiences=profile.eligible_audiences(),
        radius_km=profile.settings_radius_km,
    )


class RecommendationCoordinator:
    """
    Public entry point of the engine.

    Holds only immutable collaborators; the ResultCache is the single piece of
    shared mutable state, so concurrent recommend() calls are independent.
    """

    def __init__(
        self,
        repository: EventRepository,
        cache: ResultCache,
        profiles: UserProfileStore,
        participations: ParticipationStore,
        config: Optional[RecommendationConfig] = None,
        taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY,
        default_location: Optional[Coordinate] = None,
    ):
        self.config = resolve_config(config)
        self.taxonomy = taxonomy
        self.default_location = default_location
        self._profiles = profiles
        self._participations = participations
        self._source = CachedEventSource(repository, cache, self.config)
        self._cascade = FallbackCascade(self._source, self.config)

    async def load_user_context(
        self,
        user_id: str,
        filters: Optional[Filters] = None,
        location_provider: Optional[LocationProvider] = None,
    ) -> UserContext:
        """Fetch profile, participations, and location concurrently."""
        profile, participations, location = await asyncio.gather(
            self._profiles.get_profile(user_id),
            self._participations.get_approved_participations(user_id),
            resolve_location(
                location_provider,
                self.config.location_timeout_seconds,
                fallback=self.default_location,
            ),
        )
        if profile is None:
            logger.debug("[recommend] UNKNOWN_USER user_id=%s using anonymous profile", user_id)
            profile = anonymous_profile(user_id)
        return build_user_context(profile, participations, location, filters, self.config)

    async def recommend(
        self,
        user_id: str,
        filters: Optional[Filters] = None,
        location_provider: Optional[LocationProvider] = None,
        now: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> RecommendationResult:
        """
        Recommend events for user_id.

        Raises:
            RepositoryError: the event repository failed or timed out.
        """
        user = await self.load_user_context(user_id, filters, location_provider)
        return await self.recommend_for_context(user, now=now, limit=limit)

    async def recommend_for_context(
        self,
        user: UserContext,
        now: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> RecommendationResult:
        """Run cascade and ranking for an already-built UserContext."""
        now = now or utc_now()
        outcome = await self._cascade.run(user, now)

        ranked = rank_candidates(
            outcome.candidates, user, outcome.radius_km, now, self.config, self.taxonomy
        )
        if outcome.level == FallbackLevel.ANY:
            ranked = order_by_start_time(ranked)

        cap = self.config.max_results if limit is None else min(limit, self.config.max_results)
        events = ranked[:cap]
        logger.info(
            "[recommend] user_id=%s level=%s returned=%d total_available=%d attempted=%s",
            user.user_id, outcome.level.value, len(events), outcome.total_available,
            ",".join(level.value for level in outcome.attempted),
        )
        return RecommendationResult(
            events=events,
            fallback_level=outcome.level,
            total_available=outcome.total_available,
        )
