"""
Error taxonomy for the recommendation engine.

- RepositoryError: the event repository failed; the request fails fast.
- InvalidCandidate: one malformed event; logged and excluded from the batch.
- LocationUnavailable: no coordinate for the user; treated as "no location".
- CacheMiss: internal to ResultCache, never surfaced to callers.
"""

from enum import Enum
from typing import Optional


class RecommenderError(Exception):
    """Base class for engine errors."""


class RepositoryError(RecommenderError):
    """The event repository could not serve a query (network/backend failure)."""


class RepositoryTimeout(RepositoryError):
    """The event repository did not answer within the configured timeout."""

    def __init__(self, timeout_seconds: float):
        super().__init__(f"Event repository timed out after {timeout_seconds:g}s")
        self.timeout_seconds = timeout_seconds


class InvalidCandidate(RecommenderError):
    """A candidate event is missing data required for scoring."""

    def __init__(self, event_id: Optional[str], reason: str):
        super().__init__(f"Invalid candidate {event_id or '<unknown>'}: {reason}")
        self.event_id = event_id
        self.reason = reason


class LocationErrorReason(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"


class LocationUnavailable(RecommenderError):
    """The location provider could not produce a coordinate."""

    def __init__(self, reason: LocationErrorReason, message: str = ""):
        super().__init__(message or f"Location unavailable: {reason.value}")
        self.reason = reason


class CacheMiss(KeyError):
    """No live cache entry for a key."""
