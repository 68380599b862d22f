"""
Location provider abstraction and resolution.

A missing location is a valid input: the scoring engine gives every candidate
the same neutral distance score. Callers may substitute a default coordinate.
"""

import asyncio
import logging
from typing import Optional, Protocol

from .errors import LocationErrorReason, LocationUnavailable
from .models.event import Coordinate

logger = logging.getLogger(__name__)


class LocationProvider(Protocol):
    async def current_location(self) -> Coordinate:
        """Return the user's coordinate or raise LocationUnavailable."""
        ...


class StaticLocationProvider:
    """Provider for a coordinate known up front (e.g. sent by the client)."""

    def __init__(self, coordinate: Optional[Coordinate]):
        self._coordinate = coordinate

    async def current_location(self) -> Coordinate:
        if self._coordinate is None:
            raise LocationUnavailable(LocationErrorReason.PERMISSION_DENIED)
        return self._coordinate


async def resolve_location(
    provider: Optional[LocationProvider],
    timeout_seconds: float,
    fallback: Optional[Coordinate] = None,
) -> Optional[Coordinate]:
    """Ask the provider for a coordinate; on any LocationUnavailable return fallback."""
    if provider is None:
        return fallback
    try:
        return await asyncio.wait_for(provider.current_location(), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        reason = LocationErrorReason.TIMEOUT
    except LocationUnavailable as e:
        reason = e.reason
    logger.warning(
        "[location] UNAVAILABLE reason=%s fallback=%s", reason.value, fallback is not None
    )
    return fallback
