"""Pydantic request/response models for the API."""

from .requests import (
    ChangeNotificationRequest,
    FiltersPayload,
    LocationPayload,
    RecommendationRequest,
)
from .responses import EventCard, RecommendationResponse, ScoreCard

__all__ = [
    "ChangeNotificationRequest",
    "EventCard",
    "FiltersPayload",
    "LocationPayload",
    "RecommendationRequest",
    "RecommendationResponse",
    "ScoreCard",
]
