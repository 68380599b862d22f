"""Recommendation Coordinator: end-to-end ranking, fallbacks, and concurrency."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from recommender.cache import ResultCache
from recommender.errors import LocationErrorReason, LocationUnavailable, RepositoryError
from recommender.location import StaticLocationProvider
from recommender.models import (
    Audience,
    FallbackLevel,
    Filters,
    Gender,
    Participation,
    RecommendationConfig,
    UserProfile,
)
from recommender.stages.orchestrator import RecommendationCoordinator, build_user_context


def _history(category, hour, count, day0=datetime(2026, 9, 1, tzinfo=timezone.utc)):
    return [
        Participation(category=category, start_time=day0 + timedelta(days=i, hours=hour))
        for i in range(count)
    ]


@pytest.fixture
def make_coordinator(fake_repository_cls, fake_user_store_cls):
    def _make(rows, profiles=None, participations=None, config=None, **kwargs):
        repository = fake_repository_cls(rows)
        store = fake_user_store_cls(profiles, participations)
        coordinator = RecommendationCoordinator(
            repository=repository,
            cache=ResultCache(),
            profiles=store,
            participations=store,
            config=config,
            **kwargs,
        )
        return coordinator, repository

    return _make


class FailingLocation:
    async def current_location(self):
        raise LocationUnavailable(LocationErrorReason.PERMISSION_DENIED)


class HangingLocation:
    async def current_location(self):
        await asyncio.sleep(10)


class TestBuildUserContext:
    def test_combines_profile_history_and_request(self, london):
        profile = UserProfile(id="u1", interest_tags=["Yoga"], gender=Gender.WOMAN, settings_radius_km=7)
        ctx = build_user_context(profile, _history("wellness", 18, 3), london, Filters(search_text="yoga"))
        assert ctx.user_id == "u1"
        assert ctx.interest_tags == {"yoga"}
        assert ctx.engagement_by_category == {"wellness": 3}
        assert 18 in ctx.preferred_hours
        assert ctx.eligible_audiences == {Audience.EVERYONE, Audience.WOMEN}
        assert ctx.radius_km == 7
        assert ctx.filters.search_text == "yoga"


class TestRecommend:
    @pytest.mark.asyncio
    async def test_engagement_history_lifts_category(self, make_coordinator, make_event, london, now):
        rows = [make_event("gaming", category="gaming"), make_event("wellness", category="wellness")]
        coordinator, _ = make_coordinator(
            rows,
            profiles={"u1": UserProfile(id="u1")},
            participations={"u1": _history("wellness", 8, 5)},
        )
        result = await coordinator.recommend("u1", location_provider=StaticLocationProvider(london), now=now)

        assert [r.event.id for r in result.events] == ["wellness", "gaming"]
        assert result.events[0].score.engagement == 1.0
        assert result.events[1].score.engagement == 0.0

    @pytest.mark.asyncio
    async def test_preferred_window_lifts_evening_event(self, make_coordinator, make_event, london):
        midnight = datetime(2026, 10, 19, 0, 0, tzinfo=timezone.utc)
        rows = [
            make_event("morning", hours=9.0, now=midnight),
            make_event("evening", hours=18.0, now=midnight),
        ]
        coordinator, _ = make_coordinator(
            rows,
            profiles={"u1": UserProfile(id="u1")},
            participations={"u1": _history("creative", 18, 4)},
        )
        result = await coordinator.recommend(
            "u1", location_provider=StaticLocationProvider(london), now=midnight
        )

        assert [r.event.id for r in result.events] == ["evening", "morning"]
        evening, morning = result.events
        assert evening.score.recency > morning.score.recency

    @pytest.mark.asyncio
    async def test_coffee_nearby_relaxes_distance(self, make_coordinator, make_event, london, now):
        rows = [
            make_event("far", category="coffee", km=6.0),
            make_event("near", category="coffee", km=0.5),
            make_event("park", category="outdoors", km=1.0),
        ]
        coordinator, _ = make_coordinator(
            rows,
            profiles={"u1": UserProfile(id="u1", interest_tags=["coffee"])},
            config=RecommendationConfig(min_results=2),
        )
        result = await coordinator.recommend(
            "u1",
            filters=Filters(categories={"coffee"}, max_distance_km=5.0),
            location_provider=StaticLocationProvider(london),
            now=now,
        )

        assert result.fallback_level == FallbackLevel.RELAXED_DISTANCE
        assert result.fallback_message == "No exact matches, showing nearby options"
        assert [r.event.id for r in result.events] == ["near", "far"]
        assert result.total_available == 3
        assert result.events[1].distance_km == pytest.approx(6.0)

    @pytest.mark.asyncio
    async def test_any_level_is_ordered_by_start_time(self, make_coordinator, make_event, london, now):
        rows = [
            make_event("late", hours=10.0, km=0.1),
            make_event("early", hours=1.0, km=9.0),
        ]
        coordinator, _ = make_coordinator(rows, config=RecommendationConfig(min_results=3))
        result = await coordinator.recommend(
            "u1",
            filters=Filters(search_text="nothing matches this"),
            location_provider=StaticLocationProvider(london),
            now=now,
        )
        assert result.fallback_level == FallbackLevel.ANY
        assert [r.event.id for r in result.events] == ["early", "late"]
        assert all(r.score.total > 0 for r in result.events)

    @pytest.mark.asyncio
    async def test_unknown_user_gets_anonymous_profile(self, make_coordinator, make_event, now):
        rows = [make_event("e1"), make_event("w1", audience="women")]
        coordinator, _ = make_coordinator(rows)
        result = await coordinator.recommend("ghost", now=now)
        assert [r.event.id for r in result.events] == ["e1"]
        assert result.fallback_level == FallbackLevel.EXACT
        assert result.fallback_message is None

    @pytest.mark.asyncio
    async def test_men_never_see_women_only_events(self, make_coordinator, make_event, london, now):
        rows = [make_event("w1", audience="women"), make_event("m1", audience="men"), make_event("e1")]
        coordinator, _ = make_coordinator(
            rows,
            profiles={"u1": UserProfile(id="u1", gender=Gender.MAN)},
            config=RecommendationConfig(min_results=5),
        )
        result = await coordinator.recommend(
            "u1",
            filters=Filters(categories={"pets"}),
            location_provider=StaticLocationProvider(london),
            now=now,
        )
        assert result.fallback_level == FallbackLevel.ANY
        assert {r.event.id for r in result.events} == {"m1", "e1"}

    @pytest.mark.asyncio
    async def test_location_failure_uses_default(self, make_coordinator, make_event, london, now):
        coordinator, _ = make_coordinator([make_event("e1", km=2.0)], default_location=london)
        result = await coordinator.recommend("u1", location_provider=FailingLocation(), now=now)
        assert result.events[0].distance_km == pytest.approx(2.0)

    @pytest.mark.asyncio
    async def test_location_timeout_without_default(self, make_coordinator, make_event, now):
        coordinator, _ = make_coordinator(
            [make_event("e1")], config=RecommendationConfig(location_timeout_seconds=0.01)
        )
        result = await coordinator.recommend("u1", location_provider=HangingLocation(), now=now)
        ranked = result.events[0]
        assert ranked.distance_km is None
        assert ranked.score.distance == 0.5

    @pytest.mark.asyncio
    async def test_limit_trims_results(self, make_coordinator, make_event, now):
        rows = [make_event(str(i), hours=1.0 + i) for i in range(8)]
        coordinator, _ = make_coordinator(rows)
        result = await coordinator.recommend("u1", now=now, limit=3)
        assert len(result.events) == 3
        assert result.total_available == 8

    @pytest.mark.asyncio
    async def test_invalid_candidate_does_not_fail_request(self, make_coordinator, make_event, london, now):
        coordinator, _ = make_coordinator([make_event("ok"), make_event("nowhere", km=None)])
        result = await coordinator.recommend("u1", location_provider=StaticLocationProvider(london), now=now)
        assert [r.event.id for r in result.events] == ["ok"]

    @pytest.mark.asyncio
    async def test_repeated_calls_are_identical(self, make_coordinator, make_event, london, now):
        rows = [
            make_event(str(i), category=c, hours=h, km=k)
            for i, (c, h, k) in enumerate(
                [("coffee", 1, 1), ("food", 2, 2), ("coffee", 1, 1), ("pets", 3, 0.5), ("food", 2, 2)]
            )
        ]
        coordinator, _ = make_coordinator(
            rows, profiles={"u1": UserProfile(id="u1", interest_tags=["coffee"])}
        )
        provider = StaticLocationProvider(london)
        first = await coordinator.recommend("u1", location_provider=provider, now=now)
        second = await coordinator.recommend("u1", location_provider=provider, now=now)
        assert first.model_dump() == second.model_dump()

    @pytest.mark.asyncio
    async def test_concurrent_requests_share_one_repository_read(
        self, make_coordinator, make_event, london, now
    ):
        rows = [make_event(str(i), category=c) for i, c in enumerate(["coffee", "wellness", "gaming"])]
        profiles = {
            f"u{i}": UserProfile(id=f"u{i}", interest_tags=[tag])
            for i, tag in enumerate(["coffee", "yoga", "videogames"] * 4)
        }
        coordinator, repository = make_coordinator(rows, profiles=profiles)
        provider = StaticLocationProvider(london)

        results = await asyncio.gather(
            *(coordinator.recommend(uid, location_provider=provider, now=now) for uid in profiles)
        )

        assert repository.calls == 1
        tops = {uid: r.events[0].event.category for uid, r in zip(profiles, results)}
        assert tops["u0"] == "coffee"
        assert tops["u1"] == "wellness"
        assert tops["u2"] == "gaming"

    @pytest.mark.asyncio
    async def test_repository_failure_fails_request(self, fake_user_store_cls, fake_repository_cls, now):
        store = fake_user_store_cls()
        coordinator = RecommendationCoordinator(
            repository=fake_repository_cls(error=ConnectionError("socket closed")),
            cache=ResultCache(),
            profiles=store,
            participations=store,
        )
        with pytest.raises(RepositoryError):
            await coordinator.recommend("u1", now=now)
