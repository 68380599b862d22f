"""Backing logic: event repository, user store, location."""

from .event_repository import InMemoryEventRepository, JsonEventRepository, materialize_row
from .location import location_provider_for
from .user_store import JsonUserStore

__all__ = [
    "InMemoryEventRepository",
    "JsonEventRepository",
    "JsonUserStore",
    "location_provider_for",
    "materialize_row",
]
