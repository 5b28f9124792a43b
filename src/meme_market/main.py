"""Main module for the meme market service."""
import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from meme_market import __version__
from meme_market.container import Container
from meme_market.db import init_db
from meme_market.market.seed import default_instruments
from meme_market.routers import (events_router, leaderboard_router,
                                 market_router, transactions_router,
                                 trends_router)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; later calls are no-ops."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """Create tables, seed instruments and start the scheduler; stop and close on shutdown."""
    container: Container = fastapi_app.state.container
    settings = container.settings()
    configure_logging(settings.log_level)

    store = container.store()
    await asyncio.to_thread(init_db, container.db_engine())
    await asyncio.to_thread(store.seed_instruments, default_instruments())

    scheduler = container.scheduler()
    if settings.scheduler_autostart:
        scheduler.start()

    yield

    await scheduler.stop()
    # Close source resources (httpx clients)
    for source in container.aggregator().sources:
        try:
            await source.close()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Error closing source %s: %s", source.name, exc)


def create_app(container: Container | None = None) -> FastAPI:
    """Build the FastAPI app around a container (a fresh one from env if omitted)."""
    fastapi_app = FastAPI(
        title="Meme Market",
        description="Virtual meme stock market driven by social trends",
        version=__version__,
        lifespan=lifespan,
    )
    fastapi_app.state.container = container or Container()

    fastapi_app.include_router(market_router)
    fastapi_app.include_router(trends_router)
    fastapi_app.include_router(leaderboard_router)
    fastapi_app.include_router(transactions_router)
    fastapi_app.include_router(events_router)

    @fastapi_app.get("/")
    def health():
        """Return health check status."""
        scheduler = fastapi_app.state.container.scheduler()
        return {"status": "ok", "scheduler": scheduler.state.value}

    return fastapi_app


app = create_app()


def run():
    """Run the server (uvicorn). Entry point of `meme-market`."""
    uvicorn.run("meme_market.main:app", host="127.0.0.1", port=8001)
