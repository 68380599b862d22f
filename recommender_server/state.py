"""Application state: engine config, cache, invalidation channel, stores, coordinator."""

import logging
from typing import Optional

from recommender import (
    CacheInvalidator,
    QueueChangeChannel,
    RecommendationConfig,
    RecommendationCoordinator,
    ResultCache,
)
from recommender.sources import EventRepository

from .config import ServerConfig, get_config
from .services import JsonEventRepository, JsonUserStore

logger = logging.getLogger(__name__)


class AppState:
    """Global application state. One ResultCache is shared by every request."""

    def __init__(
        self,
        config: ServerConfig,
        recommender_config: Optional[RecommendationConfig] = None,
        repository: Optional[EventRepository] = None,
        user_store: Optional[JsonUserStore] = None,
    ):
        self.config = config
        self.recommender_config = recommender_config or config.load_recommender_config()

        self.repository = repository or JsonEventRepository(config.events_json_path)
        self.user_store = user_store or JsonUserStore(config.users_json_path)
        logger.info(
            "[startup] Event repository: %s, user store: %s",
            type(self.repository).__name__, type(self.user_store).__name__,
        )

        self.cache = ResultCache(default_ttl=self.recommender_config.cache_ttl_seconds)
        self.channel = QueueChangeChannel()
        self.invalidator = CacheInvalidator(
            self.cache, self.channel, prefix=self.recommender_config.cache_key_prefix
        )
        self.coordinator = RecommendationCoordinator(
            repository=self.repository,
            cache=self.cache,
            profiles=self.user_store,
            participations=self.user_store,
            config=self.recommender_config,
            default_location=config.default_location(),
        )


_state: Optional[AppState] = None


def get_state() -> AppState:
    global _state
    if _state is None:
        _state = AppState(get_config())
    return _state


def set_state(state: Optional[AppState]) -> None:
    """Install a prebuilt state (tests, embedding apps); None resets to lazy creation."""
    global _state
    _state = state
