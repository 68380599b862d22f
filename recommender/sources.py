"""
Collaborator abstractions consumed by the engine.

- EventRepository: candidate events, filtered server-side (non-expired,
  non-deleted), ordered by start time ascending.
- UserProfileStore: interest tags, gender/audience settings, radius.
- ParticipationStore: the user's approved past participations.

CachedEventSource puts the repository behind the ResultCache and enforces
the repository timeout.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Protocol, Sequence, Tuple, Union

from .cache import ResultCache
from .errors import RepositoryError, RepositoryTimeout
from .models.config import RecommendationConfig
from .models.event import Audience, CandidateEvent, ensure_candidates
from .models.user import Participation, UserProfile

logger = logging.getLogger(__name__)


class EventRepository(Protocol):
    """Protocol for event queries. Implement for a JSON file, a database, or an HTTP backend."""

    async def query_events(
        self,
        statuses: Sequence[str],
        audience_filter: FrozenSet[Audience],
        limit: int,
    ) -> List[Union[Dict[str, Any], CandidateEvent]]:
        """
        Return upcoming events whose status is in statuses and audience is in
        audience_filter, soonest first, at most limit. Raise on backend failure.
        """
        ...


class UserProfileStore(Protocol):
    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Return the profile, or None for an unknown user."""
        ...


class ParticipationStore(Protocol):
    async def get_approved_participations(self, user_id: str) -> List[Participation]:
        """Return the user's approved past participations (any order)."""
        ...


@dataclass(frozen=True)
class RepositoryQuery:
    """One repository query; its cache key is a canonical serialization."""

    statuses: Tuple[str, ...]
    audiences: Tuple[Audience, ...]
    limit: int

    @classmethod
    def build(
        cls,
        statuses: Iterable[str],
        audiences: Iterable[Audience],
        limit: int,
    ) -> "RepositoryQuery":
        return cls(
            statuses=tuple(sorted(set(statuses))),
            audiences=tuple(sorted(set(audiences), key=lambda a: a.value)),
            limit=limit,
        )

    def cache_key(self, prefix: str = "events:") -> str:
        return (
            f"{prefix}status={','.join(self.statuses)}"
            f";audience={','.join(a.value for a in self.audiences)}"
            f";limit={self.limit}"
        )


class CachedEventSource:
    """
    Event repository reads through the ResultCache.

    Failures are surfaced as RepositoryError (RepositoryTimeout on timeout)
    and never cached, so the next request for the same key retries.
    """

    def __init__(
        self,
        repository: EventRepository,
        cache: ResultCache,
        config: RecommendationConfig,
    ):
        self._repository = repository
        self._cache = cache
        self._config = config

    async def fetch(self, query: RepositoryQuery) -> Tuple[CandidateEvent, ...]:
        if not query.audiences:
            return ()
        key = query.cache_key(self._config.cache_key_prefix)

        async def _load() -> Tuple[CandidateEvent, ...]:
            return await self._query_repository(query)

        return await self._cache.get(key, _load, self._config.cache_ttl_seconds)

    async def _query_repository(self, query: RepositoryQuery) -> Tuple[CandidateEvent, ...]:
        timeout = self._config.repository_timeout_seconds
        try:
            rows = await asyncio.wait_for(
                self._repository.query_events(
                    query.statuses, frozenset(query.audiences), query.limit
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.error("[repository] TIMEOUT after %.1fs query=%s", timeout, query.cache_key())
            raise RepositoryTimeout(timeout) from None
        except RepositoryError:
            raise
        except Exception as e:
            logger.error("[repository] QUERY_FAILED query=%s", query.cache_key(), exc_info=True)
            raise RepositoryError(f"Event repository query failed: {e}") from e

        events = ensure_candidates(rows)
        allowed = set(query.statuses)
        # The repository contract filters status/audience; enforce it in case a backend does not
        return tuple(
            e for e in events
            if e.status.value in allowed and e.audience in query.audiences
        )
