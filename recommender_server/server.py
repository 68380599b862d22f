#!/usr/bin/env python3
"""
Event Recommendation API server: entrypoint for uvicorn recommender_server.server:app.

For uvicorn recommender_server:app use recommender_server/__init__.py.
"""

from .app import app
from .config import get_config


def main() -> None:
    import uvicorn

    config = get_config()
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
