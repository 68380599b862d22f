"""
User-side models: filters, stored profile, participation history, and the
per-request UserContext the engine ranks against.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .event import Audience, Coordinate


class TimeRange(str, Enum):
    NONE = "none"
    NOW = "now"
    WITHIN_HOUR = "within_hour"
    TODAY = "today"


class Gender(str, Enum):
    WOMAN = "woman"
    MAN = "man"
    NON_BINARY = "non_binary"
    UNSPECIFIED = "unspecified"


class Filters(BaseModel):
    """User-selected filters for one recommendation request."""

    model_config = ConfigDict(frozen=True)

    search_text: str = ""
    categories: FrozenSet[str] = frozenset()
    time_range: TimeRange = TimeRange.NONE
    max_distance_km: Optional[float] = Field(default=None, gt=0)
    audience: Optional[Audience] = None

    @field_validator("categories")
    @classmethod
    def normalize_categories(cls, value: FrozenSet[str]) -> FrozenSet[str]:
        return frozenset(c.strip().lower() for c in value if c and c.strip())

    def is_empty(self) -> bool:
        """True when the user supplied no filter at all."""
        return (
            not self.search_text.strip()
            and not self.categories
            and self.time_range == TimeRange.NONE
            and self.max_distance_km is None
            and self.audience is None
        )


class UserProfile(BaseModel):
    """Stored profile fields the engine needs (read from the user store)."""

    id: str
    interest_tags: List[str] = []
    gender: Gender = Gender.UNSPECIFIED
    women_only_mode: bool = False
    settings_radius_km: Optional[float] = Field(default=None, gt=0)

    def eligible_audiences(self) -> FrozenSet[Audience]:
        """Audiences this user is allowed to see; a ceiling no filter relaxation can exceed."""
        if self.women_only_mode or self.gender == Gender.WOMAN:
            return frozenset({Audience.EVERYONE, Audience.WOMEN})
        if self.gender == Gender.MAN:
            return frozenset({Audience.EVERYONE, Audience.MEN})
        return frozenset({Audience.EVERYONE})


def anonymous_profile(user_id: str) -> UserProfile:
    """Profile used when the store has no record for user_id."""
    return UserProfile(id=user_id)


class Participation(BaseModel):
    """One approved past participation: the event's category and start time."""

    category: str
    start_time: datetime

    @field_validator("category")
    @classmethod
    def normalize_category(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("start_time")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class UserContext(BaseModel):
    """Ephemeral context built per recommendation request."""

    model_config = ConfigDict(frozen=True)

    user_id: str = ""
    location: Optional[Coordinate] = None
    interest_tags: FrozenSet[str] = frozenset()
    engagement_by_category: Dict[str, int] = {}
    preferred_hours: List[int] = []
    filters: Filters = Filters()
    eligible_audiences: FrozenSet[Audience] = frozenset({Audience.EVERYONE})
    radius_km: Optional[float] = Field(default=None, gt=0)

    @field_validator("interest_tags")
    @classmethod
    def normalize_tags(cls, value: FrozenSet[str]) -> FrozenSet[str]:
        return frozenset(t.strip().lower() for t in value if t and t.strip())

    @field_validator("engagement_by_category")
    @classmethod
    def non_negative_counts(cls, value: Dict[str, int]) -> Dict[str, int]:
        for category, count in value.items():
            if count < 0:
                raise ValueError(f"engagement count for {category!r} is negative: {count}")
        return value

    @field_validator("preferred_hours")
    @classmethod
    def four_consecutive_hours(cls, value: List[int]) -> List[int]:
        if not value:
            return []
        if len(value) != 4:
            raise ValueError(f"preferred_hours must have 4 hours or none, got {len(value)}")
        start = value[0]
        expected = [(start + i) % 24 for i in range(4)]
        if not 0 <= start <= 23 or value != expected:
            raise ValueError(f"preferred_hours must be 4 consecutive hours mod 24, got {value}")
        return value

    def engagement_for(self, category: str) -> int:
        return self.engagement_by_category.get(category, 0)
