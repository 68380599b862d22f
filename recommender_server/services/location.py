"""Location provider for a coordinate sent with the request."""

from typing import Optional

from recommender.location import LocationProvider, StaticLocationProvider
from recommender.models import Coordinate


def location_provider_for(coordinate: Optional[Coordinate]) -> Optional[LocationProvider]:
    """No coordinate means no provider: the coordinator falls back to the configured default."""
    if coordinate is None:
        return None
    return StaticLocationProvider(coordinate)
