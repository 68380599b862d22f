"""Recommendation endpoint."""

import logging

from fastapi import APIRouter

from ..models import RecommendationRequest, RecommendationResponse
from ..services import location_provider_for
from ..state import get_state
from ..utils import to_recommendation_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=RecommendationResponse)
async def recommend(request: RecommendationRequest):
    """
    Rank upcoming events for a user.

    Repository failures are mapped to 503/504 by the app's exception handlers.
    """
    state = get_state()
    coordinate = request.location.to_coordinate() if request.location else None
    result = await state.coordinator.recommend(
        request.user_id,
        filters=request.filters.to_filters(),
        location_provider=location_provider_for(coordinate),
        limit=request.limit,
    )
    return to_recommendation_response(result)
