"""
Event Recommendation API: FastAPI app factory.

Use: uvicorn recommender_server.app:app
Or:  from recommender_server import app
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recommender import RepositoryError, RepositoryTimeout

from .config import get_config
from .routes import register_routes
from .state import AppState, get_state, set_state

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def create_app(state: Optional[AppState] = None) -> FastAPI:
    """Build FastAPI app with CORS, routes, error mapping, and the invalidator lifecycle."""
    if state is not None:
        set_state(state)
    configure_logging(get_config().log_level)

    app = FastAPI(
        title="Event Recommendation API",
        description="Ranks nearby social events with filter relaxation and cached repository reads",
        version="1.0.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_routes(app)

    @app.exception_handler(RepositoryError)
    async def repository_error_handler(request: Request, exc: RepositoryError):
        timed_out = isinstance(exc, RepositoryTimeout)
        return JSONResponse(
            status_code=504 if timed_out else 503,
            content={
                "error": "repository_timeout" if timed_out else "repository_unavailable",
                "detail": str(exc),
                "retryable": True,
            },
        )

    @app.on_event("startup")
    async def start_invalidator():
        app_state = get_state()
        ok, errors = app_state.config.validate()
        for err in errors:
            logger.warning("[startup] %s", err)
        app_state.invalidator.start()
        logger.info(
            "[startup] Event Recommendation API starting (config valid=%s, cache ttl=%ss)",
            ok, app_state.cache.default_ttl,
        )

    @app.on_event("shutdown")
    async def stop_invalidator():
        await get_state().invalidator.stop()
        logger.info("[shutdown] Cache invalidator stopped")

    return app


app = create_app()
