"""
Engine configuration: scoring weights, cascade thresholds, recency shape, cache.

RecommendationConfig defaults are defined here. The server may pass a dict
(e.g. from a JSON file named by RECOMMENDER_CONFIG_PATH); from_dict() merges it
with these defaults. Only the relative behavior (ordering of relaxation,
saturation shape) is a contract; the numbers are tunables.
"""

from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RecommendationConfig(BaseModel):
    """Configuration for the event recommendation engine."""

    model_config = ConfigDict(frozen=True)

    # -------------------------------------------------------------------------
    # Blended Scoring Weights (must sum to 1.0)
    # total = w_distance * distance + w_interest * interest
    #       + w_engagement * engagement + w_recency * recency
    # Every component is normalized to 0-1 before weighting.
    # -------------------------------------------------------------------------

    weight_distance: float = 0.30
    weight_interest: float = 0.35
    weight_engagement: float = 0.15
    weight_recency: float = 0.20

    # -------------------------------------------------------------------------
    # Distance
    # distance = 1 - clamp(km / effective_radius, 0, 1)
    # -------------------------------------------------------------------------

    # Radius used for scoring when the user set no distance filter and the
    # profile has no radius setting.
    default_radius_km: float = Field(default=10.0, gt=0)
    # RelaxedDistance doubles the radius but never beyond this ceiling.
    max_search_radius_km: float = Field(default=50.0, gt=0)
    # Distance component for every candidate when the user has no location.
    neutral_distance_score: float = Field(default=0.5, ge=0.0, le=1.0)

    # -------------------------------------------------------------------------
    # Interest
    # 1.0 for a direct tag->category match, partial credit for an adjacent category.
    # -------------------------------------------------------------------------

    interest_related_credit: float = Field(default=0.6, gt=0.0, lt=1.0)

    # -------------------------------------------------------------------------
    # Engagement
    # capped-linear: min(count, saturation) / saturation
    # -------------------------------------------------------------------------

    engagement_saturation: int = Field(default=5, ge=1)

    # -------------------------------------------------------------------------
    # Recency
    # Linear from 1.0 down to recency_knee_score over the first knee hours,
    # then knee_score * exp(-decay * (hours - knee)), floored at recency_floor.
    # Events starting in the user's preferred window get a fixed bonus (capped at 1.0).
    # -------------------------------------------------------------------------

    recency_knee_hours: float = Field(default=2.0, gt=0)
    recency_knee_score: float = Field(default=0.8, gt=0.0, le=1.0)
    recency_decay_per_hour: float = Field(default=0.02, ge=0.0)
    recency_floor: float = Field(default=0.1, ge=0.0, le=1.0)
    preferred_window_bonus: float = Field(default=0.2, ge=0.0, le=1.0)

    # -------------------------------------------------------------------------
    # Fallback Cascade
    # -------------------------------------------------------------------------

    # A cascade level is accepted once it yields at least this many candidates.
    min_results: int = Field(default=6, ge=1)
    # Max events returned to the caller after ranking.
    max_results: int = Field(default=50, ge=1)
    # Statuses a candidate may have; anything else is filtered out upstream.
    eligible_statuses: Tuple[str, ...] = ("active", "full")
    # Limit passed to the repository on every query.
    repository_limit: int = Field(default=200, ge=1)
    # IANA zone used for hour-of-day (preferred window) and "today".
    local_timezone: str = "UTC"

    # -------------------------------------------------------------------------
    # Result Cache / collaborators
    # -------------------------------------------------------------------------

    cache_ttl_seconds: float = Field(default=60.0, gt=0)
    cache_key_prefix: str = "events:"
    repository_timeout_seconds: float = Field(default=5.0, gt=0)
    location_timeout_seconds: float = Field(default=3.0, gt=0)

    @model_validator(mode="after")
    def weights_sum_to_one(self):
        total = (
            self.weight_distance
            + self.weight_interest
            + self.weight_engagement
            + self.weight_recency
        )
        if abs(total - 1.0) > 0.01:
            raise ValueError(f"Scoring weights must sum to 1.0, got {total}")
        return self

    @model_validator(mode="after")
    def result_bounds_consistent(self):
        if self.max_results < self.min_results:
            raise ValueError(
                f"max_results ({self.max_results}) must be >= min_results ({self.min_results})"
            )
        if self.recency_floor > self.recency_knee_score:
            raise ValueError("recency_floor must not exceed recency_knee_score")
        return self

    @classmethod
    def from_dict(cls, config_dict: Dict) -> "RecommendationConfig":
        """Create config from dictionary (e.g., loaded from JSON)."""
        flat = {}
        if "weights" in config_dict:
            for name, value in config_dict["weights"].items():
                flat[f"weight_{name}"] = value
        if "cascade" in config_dict:
            flat.update(config_dict["cascade"])
        if "recency" in config_dict:
            rc = config_dict["recency"]
            for key in ("knee_hours", "knee_score", "decay_per_hour", "floor"):
                if key in rc:
                    flat[f"recency_{key}"] = rc[key]
            if "preferred_window_bonus" in rc:
                flat["preferred_window_bonus"] = rc["preferred_window_bonus"]
        if "cache" in config_dict:
            cc = config_dict["cache"]
            if "ttl_seconds" in cc:
                flat["cache_ttl_seconds"] = cc["ttl_seconds"]
            if "key_prefix" in cc:
                flat["cache_key_prefix"] = cc["key_prefix"]
        # Top-level keys that already match field names
        flat.update({k: v for k, v in config_dict.items() if not isinstance(v, dict)})
        allowed = set(cls.model_fields)
        filtered = {k: v for k, v in flat.items() if k in allowed}
        return cls.model_validate(filtered)


DEFAULT_CONFIG = RecommendationConfig()


def resolve_config(config: Optional["RecommendationConfig"]) -> "RecommendationConfig":
    """Return config or DEFAULT_CONFIG when none is provided."""
    return config if config is not None else DEFAULT_CONFIG
