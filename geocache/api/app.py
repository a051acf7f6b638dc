"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from geocache.api.dependencies import set_session
from geocache.api.routes import api_router
from geocache.config import GameConfig
from geocache.engine.builder import build_session
from geocache.engine.session import SessionController
from geocache.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(
    config: GameConfig | None = None,
    session: SessionController | None = None,
) -> FastAPI:
    """Build and return the fully-configured FastAPI application.

    Pass *session* to serve an already-built controller (tests, embedding);
    otherwise one is built from *config* when the app starts.
    """
    if config is None:
        config = session.config if session is not None else GameConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        active = session if session is not None else build_session(_config)
        set_session(active)
        logger.info("API server started, player at %s.", active.position)
        yield
        active.disable_tracking()
        if _config.autosave:
            active.save()
        set_session(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Geocache World Engine",
        description=(
            "Deterministic world state for a location-based coin collecting game.\n\n"
            "## API Groups\n\n"
            "- **State**: Player status, nearby cells, event feed\n"
            "- **Caches**: Inspect caches, collect and deposit coins\n"
            "- **Movement**: Manual steps, tracking toggle, position updates\n"
            "- **Control**: Save, load, reset\n"
            "- **Config**: Read-only game configuration\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Player position, wallet, nearby cells and recent game events."},
            {"name": "Caches", "description": "Cache contents and the collect/deposit operations (proximity gated)."},
            {"name": "Movement", "description": "Manual directional steps, manual/tracked mode switch, and external position updates."},
            {"name": "Control", "description": "Persistence controls: save, load and reset."},
            {"name": "Config", "description": "Read-only game configuration (tile width, radii, spawn probability)."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app
