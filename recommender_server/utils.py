"""Pure helpers: event card formatting and GeoJSON."""

from typing import Any, Dict, List, Optional

from recommender.models import Coordinate, RankedEvent, RecommendationResult

from .models import EventCard, RecommendationResponse, ScoreCard

SCORE_DECIMALS = 4


def _round(value: Optional[float], ndigits: int = SCORE_DECIMALS) -> Optional[float]:
    return None if value is None else round(value, ndigits)


def to_event_card(ranked: RankedEvent, position: int) -> EventCard:
    event = ranked.event
    score = ranked.score
    return EventCard(
        id=event.id,
        title=event.title,
        category=event.category,
        category_label=event.category_label or event.category.title(),
        subcategory=event.subcategory,
        host_name=event.host.display_name,
        host_avatar_url=event.host.avatar_url,
        venue_name=event.venue_name,
        venue_area=event.venue_area,
        latitude=event.venue_lat,
        longitude=event.venue_lng,
        start_time=event.start_time.isoformat(),
        capacity=event.capacity,
        participant_count=event.participant_count,
        spots_left=event.capacity - event.participant_count,
        audience=event.audience.value,
        status=event.status.value,
        distance_km=_round(ranked.distance_km, 2),
        score=ScoreCard(
            distance=_round(score.distance),
            interest=_round(score.interest),
            engagement=_round(score.engagement),
            recency=_round(score.recency),
            total=_round(score.total),
        ),
        queue_position=position,
    )


def to_recommendation_response(result: RecommendationResult) -> RecommendationResponse:
    return RecommendationResponse(
        events=[to_event_card(r, i + 1) for i, r in enumerate(result.events)],
        fallback_level=result.fallback_level.value,
        fallback_message=result.fallback_message,
        total_available=result.total_available,
    )


def polygon_feature(
    center: Coordinate,
    ring: List[Coordinate],
    radius_km: float,
) -> Dict[str, Any]:
    """GeoJSON Feature for a closed ring; positions are [longitude, latitude]."""
    return {
        "type": "Feature",
        "geometry": {
            "type": "Polygon",
            "coordinates": [[[p.longitude, p.latitude] for p in ring]],
        },
        "properties": {
            "center": [center.longitude, center.latitude],
            "radius_km": radius_km,
        },
    }
