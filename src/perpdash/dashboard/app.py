"""FastAPI dashboard application factory."""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import FastAPI

from perpdash.config import AppSettings
from perpdash.dashboard.routes import api


def create_dashboard_app(
    settings: AppSettings | None = None,
    lifespan: Any = None,
) -> FastAPI:
    """Create and configure the FastAPI dashboard application.

    Args:
        settings: Application settings. Loaded from the environment when
            omitted.
        lifespan: Optional async context manager for application lifespan
            events. Used by main.py to open and close the candle fetcher.

    Returns:
        Configured FastAPI application with the JSON API mounted at /api.
    """
    app = FastAPI(
        title="Perp EMA Strategy Dashboard",
        lifespan=lifespan,
    )

    app.state.settings = settings if settings is not None else AppSettings()

    # Wired by main.py lifespan (or directly by tests)
    app.state.fetcher = None
    app.state.pnl_cache = None
    # One cache refresh at a time; waiters reuse the fresh result
    app.state.pnl_lock = asyncio.Lock()

    app.include_router(api.router, prefix="/api")

    return app
