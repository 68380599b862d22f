"""Response models: event cards with score breakdowns."""

from typing import List, Optional

from pydantic import BaseModel


class ScoreCard(BaseModel):
    distance: float
    interest: float
    engagement: float
    recency: float
    total: float


class EventCard(BaseModel):
    id: str
    title: str
    category: str
    category_label: str
    subcategory: Optional[str] = None
    host_name: str = ""
    host_avatar_url: Optional[str] = None
    venue_name: str
    venue_area: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    start_time: str
    capacity: int
    participant_count: int
    spots_left: int
    audience: str
    status: str
    distance_km: Optional[float] = None
    score: ScoreCard
    queue_position: int


class RecommendationResponse(BaseModel):
    events: List[EventCard]
    fallback_level: str
    fallback_message: Optional[str] = None
    total_available: int
