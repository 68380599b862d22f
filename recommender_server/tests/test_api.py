"""API endpoints over the bundled London demo data."""

import time

from recommender.models import RecommendationConfig


def _recommend(client, user_id="demo-wellness", **body):
    return client.post("/api/recommendations", json={"user_id": user_id, **body})


class TestRoot:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["name"] == "Event Recommendation API"

    def test_health(self, client):
        data = client.get("/api/health").json()
        assert data["status"] == "healthy"
        assert data["invalidator"]["running"] is True
        assert data["cache"]["entries"] == 0


class TestRecommendations:
    def test_woman_sees_every_demo_event(self, client, london):
        response = _recommend(client, location=london)
        assert response.status_code == 200
        data = response.json()
        assert data["fallback_level"] == "exact"
        assert data["fallback_message"] is None
        assert data["total_available"] == 10
        assert len(data["events"]) == 10
        assert [e["queue_position"] for e in data["events"]] == list(range(1, 11))

    def test_ranking_is_sorted_and_rounded(self, client, london):
        events = _recommend(client, location=london).json()["events"]
        totals = [e["score"]["total"] for e in events]
        assert totals == sorted(totals, reverse=True)
        for e in events:
            for value in e["score"].values():
                assert 0.0 <= value <= 1.0
                assert round(value, 4) == value
            assert e["distance_km"] is not None

    def test_engagement_follows_approved_history(self, client, london):
        events = _recommend(client, location=london).json()["events"]
        engagement = {e["category"]: e["score"]["engagement"] for e in events}
        # Three approved wellness and one coffee participation; the pending gaming one is ignored
        assert engagement["wellness"] == 0.6
        assert engagement["coffee"] == 0.2
        assert engagement["gaming"] == 0.0

    def test_man_never_sees_women_only_events(self, client, london):
        data = _recommend(client, user_id="demo-gamer", location=london).json()
        assert data["total_available"] == 9
        assert all(e["audience"] != "women" for e in data["events"])

    def test_sparse_category_falls_back(self, client, london):
        data = _recommend(client, location=london, filters={"categories": ["pets"]}).json()
        assert data["fallback_level"] == "relaxed_category"
        assert data["fallback_message"]
        assert len(data["events"]) >= 6

    def test_limit(self, client):
        data = _recommend(client, user_id="demo-new", limit=3).json()
        assert len(data["events"]) == 3
        assert data["total_available"] == 9

    def test_without_location_distance_is_neutral(self, client):
        events = _recommend(client, user_id="demo-new").json()["events"]
        assert all(e["distance_km"] is None for e in events)
        assert all(e["score"]["distance"] == 0.5 for e in events)

    def test_search_text(self, client, london):
        data = _recommend(
            client,
            location=london,
            filters={"search_text": "shoreditch"},
        ).json()
        # Two Shoreditch events is below the minimum, so the cascade widens to everything
        assert data["fallback_level"] == "any"

    def test_validation_errors(self, client):
        assert client.post("/api/recommendations", json={}).status_code == 422
        assert _recommend(client, filters={"max_distance_km": -1}).status_code == 422
        assert _recommend(client, filters={"time_range": "tomorrow"}).status_code == 422
        assert _recommend(client, location={"latitude": 91, "longitude": 0}).status_code == 422
        assert _recommend(client, limit=0).status_code == 422

    def test_repository_failure_is_503(self, make_client, broken_repository):
        client = make_client(repository=broken_repository)
        response = _recommend(client)
        assert response.status_code == 503
        body = response.json()
        assert body["error"] == "repository_unavailable"
        assert body["retryable"] is True

    def test_repository_timeout_is_504(self, make_client, stalled_repository):
        client = make_client(
            repository=stalled_repository,
            recommender_config=RecommendationConfig(repository_timeout_seconds=0.05),
        )
        response = _recommend(client)
        assert response.status_code == 504
        assert response.json()["error"] == "repository_timeout"


class TestChangeNotifications:
    def test_change_invalidates_cache(self, client, london):
        _recommend(client, location=london)
        assert client.get("/api/health").json()["cache"]["entries"] >= 1

        response = client.post("/api/events/changes", json={"operation": "insert", "event_id": "11"})
        assert response.status_code == 202
        assert response.json()["accepted"] is True

        for _ in range(200):
            health = client.get("/api/health").json()
            if health["invalidator"]["invalidations"] >= 1:
                break
            time.sleep(0.01)
        assert health["invalidator"]["invalidations"] == 1
        assert health["cache"]["entries"] == 0

    def test_empty_body_is_accepted(self, client):
        assert client.post("/api/events/changes").status_code == 202

    def test_rejects_unknown_operation(self, client):
        assert client.post("/api/events/changes", json={"operation": "truncate"}).status_code == 422


class TestMapBoundary:
    def test_polygon(self, client):
        response = client.get(
            "/api/map/boundary",
            params={"latitude": 51.5074, "longitude": -0.1278, "radius_km": 5, "points": 16},
        )
        assert response.status_code == 200
        feature = response.json()
        assert feature["type"] == "Feature"
        assert feature["geometry"]["type"] == "Polygon"
        ring = feature["geometry"]["coordinates"][0]
        assert len(ring) == 17
        assert ring[0] == ring[-1]
        assert feature["properties"]["center"] == [-0.1278, 51.5074]

    def test_default_radius(self, client):
        feature = client.get("/api/map/boundary", params={"latitude": 0, "longitude": 0}).json()
        assert feature["properties"]["radius_km"] == 10.0
        assert len(feature["geometry"]["coordinates"][0]) == 65

    def test_invalid_params(self, client):
        assert client.get("/api/map/boundary", params={"latitude": 0, "longitude": 0, "points": 2}).status_code == 422
        assert client.get("/api/map/boundary", params={"latitude": 100, "longitude": 0}).status_code == 422


class TestConfigEndpoint:
    def test_effective_config(self, client):
        data = client.get("/api/config").json()
        rec = data["recommender"]
        total = rec["weight_distance"] + rec["weight_interest"] + rec["weight_engagement"] + rec["weight_recency"]
        assert abs(total - 1.0) < 1e-9
        assert rec["eligible_statuses"] == ["active", "full"]
        assert data["default_location"] is None
