"""
Shared fixtures for engine tests.

Every test runs against a fixed clock (NOW) and a central-London user.
Events are plain repository rows (dicts) built relative to NOW and placed a
given number of kilometers due north of the user, so distances are exact.
"""

import asyncio
import math
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from recommender.cache import ResultCache
from recommender.models import Audience, Coordinate, Participation, RecommendationConfig, UserProfile
from recommender.sources import CachedEventSource
from recommender.utils.geo import EARTH_RADIUS_KM

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
LONDON = Coordinate(latitude=51.5074, longitude=-0.1278)
KM_PER_DEGREE_LAT = EARTH_RADIUS_KM * math.pi / 180.0


def north_of(origin: Coordinate, km: float) -> Coordinate:
    return Coordinate(latitude=origin.latitude + km / KM_PER_DEGREE_LAT, longitude=origin.longitude)


def build_event(
    event_id: str,
    category: str = "coffee",
    hours: float = 3.0,
    km: Optional[float] = 1.0,
    audience: str = "everyone",
    status: str = "active",
    title: Optional[str] = None,
    now: datetime = NOW,
    **extra,
) -> Dict:
    """Repository row starting `hours` after now, `km` north of LONDON (None = no venue)."""
    row = {
        "id": event_id,
        "title": title or f"{category.title()} meetup {event_id}",
        "category": category,
        "category_label": category.title(),
        "venue_name": f"Venue {event_id}",
        "venue_area": "Central",
        "start_time": (now + timedelta(hours=hours)).isoformat(),
        "capacity": 6,
        "participant_count": 1,
        "audience": audience,
        "status": status,
    }
    if km is not None:
        venue = north_of(LONDON, km)
        row["venue_lat"] = venue.latitude
        row["venue_lng"] = venue.longitude
    row.update(extra)
    return row


class FakeEventRepository:
    """Repository double: honours the query contract and counts calls."""

    def __init__(self, rows=(), delay: float = 0.0, error: Optional[Exception] = None):
        self.rows: List[Dict] = list(rows)
        self.delay = delay
        self.error = error
        self.calls = 0

    async def query_events(self, statuses, audience_filter, limit):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        allowed = {a.value for a in audience_filter}
        out = [
            r for r in self.rows
            if r.get("status", "active") in statuses and r.get("audience", "everyone") in allowed
        ]
        out.sort(key=lambda r: (r["start_time"], r["id"]))
        return out[:limit]


class FakeUserStore:
    """Profile + participation store over dicts."""

    def __init__(
        self,
        profiles: Optional[Dict[str, UserProfile]] = None,
        participations: Optional[Dict[str, List[Participation]]] = None,
    ):
        self.profiles = profiles or {}
        self.participations = participations or {}

    async def get_profile(self, user_id):
        return self.profiles.get(user_id)

    async def get_approved_participations(self, user_id):
        return list(self.participations.get(user_id, []))


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def london():
    return LONDON


@pytest.fixture
def make_event():
    return build_event


@pytest.fixture
def fake_repository_cls():
    return FakeEventRepository


@pytest.fixture
def fake_user_store_cls():
    return FakeUserStore


@pytest.fixture
def make_source():
    """Build (source, repository, cache) for rows and an optional config."""

    def _make(rows=(), config: Optional[RecommendationConfig] = None, **repo_kwargs):
        config = config or RecommendationConfig()
        repository = FakeEventRepository(rows, **repo_kwargs)
        cache = ResultCache(default_ttl=config.cache_ttl_seconds)
        return CachedEventSource(repository, cache, config), repository, cache

    return _make


@pytest.fixture
def everyone():
    return frozenset({Audience.EVERYONE})
