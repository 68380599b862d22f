"""Request bodies for the recommendation and change-notification endpoints."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from recommender.models import Audience, Coordinate, Filters, TimeRange


class FiltersPayload(BaseModel):
    search_text: str = ""
    categories: List[str] = []
    time_range: TimeRange = TimeRange.NONE
    max_distance_km: Optional[float] = Field(default=None, gt=0)
    audience: Optional[Audience] = None

    def to_filters(self) -> Filters:
        return Filters(
            search_text=self.search_text,
            categories=frozenset(self.categories),
            time_range=self.time_range,
            max_distance_km=self.max_distance_km,
            audience=self.audience,
        )


class LocationPayload(BaseModel):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)

    def to_coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


class RecommendationRequest(BaseModel):
    user_id: str = Field(min_length=1)
    filters: FiltersPayload = FiltersPayload()
    location: Optional[LocationPayload] = None
    limit: Optional[int] = Field(default=None, ge=1)


class ChangeNotificationRequest(BaseModel):
    """Body of the events-table change webhook. Every field is informational."""

    source: str = "events"
    operation: Optional[Literal["insert", "update", "delete"]] = None
    event_id: Optional[str] = None
