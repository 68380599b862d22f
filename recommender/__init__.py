"""
Event Recommendation Engine

Single entry point for the recommender package:
- models/: RecommendationConfig, CandidateEvent, UserContext, RankedEvent
- stages/: engagement, cascade, ranking, orchestrator (RecommendationCoordinator)
- cache / invalidation: ResultCache and the change-notification task
- sources / location: collaborator Protocols the host application implements
"""

from .cache import ResultCache
from .errors import (
    InvalidCandidate,
    LocationErrorReason,
    LocationUnavailable,
    RecommenderError,
    RepositoryError,
    RepositoryTimeout,
)
from .invalidation import CacheInvalidator, ChangeNotification, QueueChangeChannel
from .location import LocationProvider, StaticLocationProvider, resolve_location
from .models import (
    DEFAULT_CONFIG,
    Audience,
    CandidateEvent,
    Coordinate,
    FallbackLevel,
    Filters,
    RankedEvent,
    RecommendationConfig,
    RecommendationResult,
    TimeRange,
    UserContext,
    resolve_config,
)
from .sources import CachedEventSource, EventRepository, ParticipationStore, UserProfileStore
from .stages import RecommendationCoordinator, build_user_context
from .taxonomy import DEFAULT_TAXONOMY, CategoryTaxonomy

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_TAXONOMY",
    "Audience",
    "CacheInvalidator",
    "CachedEventSource",
    "CandidateEvent",
    "CategoryTaxonomy",
    "ChangeNotification",
    "Coordinate",
    "EventRepository",
    "FallbackLevel",
    "Filters",
    "InvalidCandidate",
    "LocationErrorReason",
    "LocationProvider",
    "LocationUnavailable",
    "ParticipationStore",
    "QueueChangeChannel",
    "RankedEvent",
    "RecommendationConfig",
    "RecommendationCoordinator",
    "RecommendationResult",
    "RecommenderError",
    "RepositoryError",
    "RepositoryTimeout",
    "ResultCache",
    "StaticLocationProvider",
    "TimeRange",
    "UserContext",
    "UserProfileStore",
    "build_user_context",
    "resolve_config",
    "resolve_location",
]
