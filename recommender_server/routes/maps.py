"""Map overlay: search-radius boundary as GeoJSON."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from recommender.models import Coordinate
from recommender.utils import boundary_polygon

from ..state import get_state
from ..utils import polygon_feature

router = APIRouter()


@router.get("/boundary")
def get_boundary(
    latitude: float = Query(..., ge=-90.0, le=90.0),
    longitude: float = Query(..., ge=-180.0, le=180.0),
    radius_km: Optional[float] = Query(None, gt=0, description="Defaults to the engine's default radius"),
    points: int = Query(64, ge=3, le=720),
):
    """Closed polygon approximating the circle of radius_km around the point."""
    state = get_state()
    radius = radius_km or state.recommender_config.default_radius_km
    center = Coordinate(latitude=latitude, longitude=longitude)
    try:
        ring = boundary_polygon(center, radius, points)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return polygon_feature(center, ring, radius)
