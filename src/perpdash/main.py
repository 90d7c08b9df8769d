"""Entry point for the perpdash dashboard server.

Loads settings, configures logging, and serves the FastAPI dashboard with
uvicorn. The lifespan owns the ccxt candle fetcher so its HTTP session is
opened once and closed on shutdown.
"""

import asyncio
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from perpdash.config import AppSettings
from perpdash.dashboard.app import create_dashboard_app
from perpdash.data.fetcher import DailyCandleFetcher
from perpdash.logging import get_logger, setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the candle fetcher on startup and release it on shutdown."""
    logger = get_logger("perpdash.main")
    settings = app.state.settings

    fetcher = DailyCandleFetcher(settings.market)
    app.state.fetcher = fetcher

    logger.info(
        "lifespan_started",
        exchange=settings.market.exchange_id,
        symbol=settings.market.symbol,
    )

    try:
        yield
    finally:
        await fetcher.close()
        logger.info("perpdash_stopped")


async def run() -> None:
    """Run the dashboard server until interrupted."""
    settings = AppSettings()

    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("perpdash.main")

    app = create_dashboard_app(settings=settings, lifespan=lifespan)

    logger.info(
        "starting_dashboard",
        host=settings.dashboard.host,
        port=settings.dashboard.port,
        strategies=len(settings.backtest.leverages),
    )

    config = uvicorn.Config(
        app,
        host=settings.dashboard.host,
        port=settings.dashboard.port,
        log_level="warning",  # Suppress uvicorn access logs
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
