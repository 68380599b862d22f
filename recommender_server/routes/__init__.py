"""Register all route modules on the FastAPI app."""

from fastapi import FastAPI

from .config import router as config_router
from .events import router as events_router
from .maps import router as maps_router
from .recommendations import router as recommendations_router
from .root import router as root_router


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the app."""
    app.include_router(root_router)
    app.include_router(config_router, prefix="/api/config", tags=["config"])
    app.include_router(recommendations_router, prefix="/api/recommendations", tags=["recommendations"])
    app.include_router(events_router, prefix="/api/events", tags=["events"])
    app.include_router(maps_router, prefix="/api/map", tags=["map"])
