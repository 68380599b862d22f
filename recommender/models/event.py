"""
Event model: immutable snapshot of an event as read from the repository.

Used by the cascade, ranking, and coordinator instead of raw dicts.
Built from repository rows via CandidateEvent.model_validate(d) or ensure_candidates().
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

logger = logging.getLogger(__name__)


class Audience(str, Enum):
    EVERYONE = "everyone"
    WOMEN = "women"
    MEN = "men"


class EventStatus(str, Enum):
    ACTIVE = "active"
    FULL = "full"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    DELETED = "deleted"


class Coordinate(BaseModel):
    """A WGS84 point in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class HostInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    display_name: str = ""
    avatar_url: Optional[str] = None


class CandidateEvent(BaseModel):
    """
    Event payload used across the engine stages.

    Venue coordinates are optional so that rows with a missing venue still
    parse; the scoring engine rejects them per candidate (InvalidCandidate).
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(min_length=1)
    title: str = ""
    category: str = Field(min_length=1)
    category_label: str = ""
    subcategory: Optional[str] = None
    host: HostInfo = HostInfo()
    venue_name: str = ""
    venue_area: str = ""
    venue_lat: Optional[float] = None
    venue_lng: Optional[float] = None
    start_time: datetime
    capacity: int = Field(ge=1)
    participant_count: int = Field(default=0, ge=0)
    audience: Audience = Audience.EVERYONE
    status: EventStatus = EventStatus.ACTIVE

    @field_validator("category")
    @classmethod
    def normalize_category(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("start_time")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        """Naive timestamps from the store are UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def participants_within_capacity(self):
        if self.participant_count > self.capacity:
            raise ValueError(
                f"participant_count {self.participant_count} exceeds capacity {self.capacity}"
            )
        return self

    @property
    def venue(self) -> Optional[Coordinate]:
        """Venue as a Coordinate, or None when either axis is missing or out of range."""
        if self.venue_lat is None or self.venue_lng is None:
            return None
        try:
            return Coordinate(latitude=self.venue_lat, longitude=self.venue_lng)
        except ValidationError:
            return None

    def matches_text(self, needle: str) -> bool:
        """Case-insensitive substring match over the searchable text fields."""
        needle = needle.strip().lower()
        if not needle:
            return True
        haystacks = (
            self.title,
            self.venue_name,
            self.venue_area,
            self.category_label or self.category,
            self.subcategory or "",
        )
        return any(needle in h.lower() for h in haystacks)


def ensure_candidates(
    rows: Iterable[Union[Dict[str, Any], "CandidateEvent"]],
) -> List["CandidateEvent"]:
    """
    Convert repository rows to CandidateEvent models, dropping rows that fail validation.

    A malformed row is a data-integrity problem for that event only; it is
    logged and skipped so the rest of the batch is still usable.
    """
    out: List[CandidateEvent] = []
    for row in rows:
        if isinstance(row, CandidateEvent):
            out.append(row)
            continue
        try:
            out.append(CandidateEvent.model_validate(row))
        except ValidationError as e:
            event_id = row.get("id") if isinstance(row, dict) else None
            logger.warning(
                "[invalid_candidate] PARSE_FAILED event_id=%s errors=%d", event_id, e.error_count()
            )
    return out
