"""Root and health endpoints."""

from fastapi import APIRouter

from ..state import get_state

router = APIRouter()

SERVICE_NAME = "Event Recommendation API"
SERVICE_VERSION = "1.0.0"


@router.get("/")
def root():
    state = get_state()
    return {
        "name": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "events_source": type(state.repository).__name__,
        "endpoints": {
            "recommendations": ["/api/recommendations"],
            "events": ["/api/events/changes"],
            "map": ["/api/map/boundary"],
            "config": ["/api/config"],
        },
    }


@router.get("/api/health")
def health():
    state = get_state()
    return {
        "status": "healthy",
        "cache": {
            "entries": len(state.cache),
            "ttl_seconds": state.cache.default_ttl,
        },
        "invalidator": {
            "running": state.invalidator.running,
            "invalidations": state.invalidator.invalidations,
            "pending": state.channel.pending,
        },
    }
