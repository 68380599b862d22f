"""
Server Configuration

Loads configuration from environment variables and provides defaults.
A .env file at the project root is loaded with python-dotenv.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from recommender.models import DEFAULT_CONFIG, Coordinate, RecommendationConfig

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
DATA_DIR = PACKAGE_DIR / "data"
DEMO_EVENTS_PATH = DATA_DIR / "demo_events.json"
DEMO_USERS_PATH = DATA_DIR / "demo_users.json"

root_env = PACKAGE_DIR.parent / ".env"
if root_env.exists():
    load_dotenv(root_env)


@dataclass
class ServerConfig:
    """Server configuration."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Data: events and users JSON (bundled London demo data when unset)
    events_json_path: Path = DEMO_EVENTS_PATH
    users_json_path: Path = DEMO_USERS_PATH
    # Optional JSON document for RecommendationConfig.from_dict
    recommender_config_path: Optional[Path] = None

    # Coordinate substituted when the client sends no location
    default_latitude: Optional[float] = None
    default_longitude: Optional[float] = None

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load configuration from environment variables."""
        base_dir = PACKAGE_DIR.parent

        def _path_env(key: str, default: Optional[Path] = None) -> Optional[Path]:
            v = os.getenv(key)
            if not v:
                return default
            p = Path(v)
            return p if p.is_absolute() else (base_dir / p).resolve()

        def _float_env(key: str) -> Optional[float]:
            v = (os.getenv(key) or "").strip()
            return float(v) if v else None

        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            events_json_path=_path_env("EVENTS_JSON_PATH", DEMO_EVENTS_PATH),
            users_json_path=_path_env("USERS_JSON_PATH", DEMO_USERS_PATH),
            recommender_config_path=_path_env("RECOMMENDER_CONFIG_PATH"),
            default_latitude=_float_env("DEFAULT_LATITUDE"),
            default_longitude=_float_env("DEFAULT_LONGITUDE"),
        )

    def validate(self) -> Tuple[bool, List[str]]:
        """
        Validate the configuration.

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []
        if not self.events_json_path.exists():
            errors.append(f"Events JSON not found: {self.events_json_path}")
        if self.recommender_config_path and not self.recommender_config_path.exists():
            errors.append(f"Recommender config not found: {self.recommender_config_path}")
        if (self.default_latitude is None) != (self.default_longitude is None):
            errors.append("DEFAULT_LATITUDE and DEFAULT_LONGITUDE must be set together")
        return len(errors) == 0, errors

    def default_location(self) -> Optional[Coordinate]:
        if self.default_latitude is None or self.default_longitude is None:
            return None
        return Coordinate(latitude=self.default_latitude, longitude=self.default_longitude)

    def load_recommender_config(self) -> RecommendationConfig:
        """Engine config from RECOMMENDER_CONFIG_PATH merged over defaults."""
        if not self.recommender_config_path:
            return DEFAULT_CONFIG
        with open(self.recommender_config_path) as f:
            data = json.load(f)
        logger.info("[config] Loaded recommender config from %s", self.recommender_config_path)
        return RecommendationConfig.from_dict(data)


# Global config instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def reload_config() -> ServerConfig:
    """Reload configuration from environment."""
    global _config
    _config = None
    return get_config()
