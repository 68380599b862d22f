"""
Geometry helpers: great-circle distance and a circular boundary ring.

distance_km drives filtering and scoring; boundary_polygon is only for the map overlay.
"""

import math
from typing import List

import numpy as np

from ..models.event import Coordinate

EARTH_RADIUS_KM = 6371.0


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance in kilometers."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    # Rounding can push h a hair above 1 for antipodal points
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def boundary_polygon(center: Coordinate, radius_km: float, points: int = 64) -> List[Coordinate]:
    """
    Closed ring approximating a circle of radius_km around center.

    Returns points + 1 coordinates: the vertices at evenly spaced bearings
    starting due north, then the first vertex again to close the ring.
    """
    if points < 3:
        raise ValueError(f"A boundary ring needs at least 3 points, got {points}")
    if radius_km <= 0:
        raise ValueError(f"radius_km must be positive, got {radius_km}")

    lat1 = math.radians(center.latitude)
    lon1 = math.radians(center.longitude)
    angular = radius_km / EARTH_RADIUS_KM
    bearings = np.linspace(0.0, 2 * np.pi, num=points, endpoint=False)

    lat2 = np.arcsin(
        np.sin(lat1) * np.cos(angular)
        + np.cos(lat1) * np.sin(angular) * np.cos(bearings)
    )
    lon2 = lon1 + np.arctan2(
        np.sin(bearings) * np.sin(angular) * np.cos(lat1),
        np.cos(angular) - np.sin(lat1) * np.sin(lat2),
    )
    lat_deg = np.clip(np.degrees(lat2), -90.0, 90.0)
    # Wrap longitudes into [-180, 180)
    lon_deg = (np.degrees(lon2) + 540.0) % 360.0 - 180.0

    ring = [
        Coordinate(latitude=float(lat), longitude=float(lon))
        for lat, lon in zip(lat_deg, lon_deg)
    ]
    ring.append(ring[0])
    return ring
