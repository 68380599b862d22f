"""Configuration endpoint: the effective engine configuration."""

from fastapi import APIRouter

from ..state import get_state

router = APIRouter()


@router.get("")
def get_recommender_config():
    """Return the RecommendationConfig in force (defaults merged with RECOMMENDER_CONFIG_PATH)."""
    state = get_state()
    default_location = state.config.default_location()
    return {
        "recommender": state.recommender_config.model_dump(mode="json"),
        "default_location": default_location.model_dump() if default_location else None,
    }
