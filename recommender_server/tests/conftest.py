"""
Fixtures for API tests.

Each test gets its own AppState (fresh cache, channel, and invalidator) over
the bundled demo data, installed as the process state for the test's app.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from recommender.models import RecommendationConfig
from recommender_server.app import create_app
from recommender_server.config import DEMO_EVENTS_PATH, DEMO_USERS_PATH, ServerConfig
from recommender_server.services import JsonEventRepository, JsonUserStore
from recommender_server.state import AppState, set_state

LONDON = {"latitude": 51.5074, "longitude": -0.1278}


class BrokenRepository:
    async def query_events(self, statuses, audience_filter, limit):
        raise ConnectionError("connection refused")


class StalledRepository:
    async def query_events(self, statuses, audience_filter, limit):
        await asyncio.sleep(1.0)
        return []


@pytest.fixture
def server_config():
    return ServerConfig(events_json_path=DEMO_EVENTS_PATH, users_json_path=DEMO_USERS_PATH)


@pytest.fixture
def make_client(server_config):
    """Yield a factory building a started TestClient around an AppState."""
    clients = []

    def _make(repository=None, recommender_config=None) -> TestClient:
        state = AppState(
            server_config,
            recommender_config=recommender_config or RecommendationConfig(),
            repository=repository or JsonEventRepository(DEMO_EVENTS_PATH),
            user_store=JsonUserStore(DEMO_USERS_PATH),
        )
        client = TestClient(create_app(state))
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)
    set_state(None)


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def london():
    return dict(LONDON)


@pytest.fixture
def broken_repository():
    return BrokenRepository()


@pytest.fixture
def stalled_repository():
    return StalledRepository()
