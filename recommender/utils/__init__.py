"""Shared utilities for geometry and time."""

from .geo import EARTH_RADIUS_KM, boundary_polygon, distance_km
from .time import hours_until, local_hour, matches_time_range, utc_now

__all__ = [
    "EARTH_RADIUS_KM",
    "boundary_polygon",
    "distance_km",
    "hours_until",
    "local_hour",
    "matches_time_range",
    "utc_now",
]
